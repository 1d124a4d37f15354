# T01-BEGIN:validate
from __future__ import annotations
from typing import Tuple

from .errors import InvalidDimensionError


def _as_int(name: str, v) -> int:
    if isinstance(v, bool):
        raise InvalidDimensionError(name, v)
    try:
        i = int(v)
    except (TypeError, ValueError) as e:
        raise InvalidDimensionError(name, v) from e
    if i != v:
        raise InvalidDimensionError(name, v)
    return i


def dimension(name: str, value) -> int:
    d = _as_int(name, value)
    if d <= 0:
        raise InvalidDimensionError(name, value)
    return d


def size_wh(width, height) -> Tuple[int, int]:
    return dimension("width", width), dimension("height", height)


def positive(name: str, value) -> int:
    try:
        i = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}") from e
    if i <= 0:
        raise ValueError(f"{name} must be positive")
    return i
# T01-END:validate
