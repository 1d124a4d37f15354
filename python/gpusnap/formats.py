# python/gpusnap/formats.py
# Texel layouts for the WebGPU texture formats a capture can use.
# RELEVANT FILES: python/gpusnap/capture.py, python/gpusnap/reslice.py, tests/test_capture.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np


@dataclass(frozen=True)
class TextureFormat:
    name: str
    bytes_per_pixel: int
    channels: int
    dtype: str

    @property
    def numpy_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)


_FORMATS: Dict[str, TextureFormat] = {
    f.name: f
    for f in (
        TextureFormat("r8unorm", 1, 1, "u1"),
        TextureFormat("r8uint", 1, 1, "u1"),
        TextureFormat("r8sint", 1, 1, "i1"),
        TextureFormat("rg8unorm", 2, 2, "u1"),
        TextureFormat("rg8uint", 2, 2, "u1"),
        TextureFormat("r16uint", 2, 1, "<u2"),
        TextureFormat("r16sint", 2, 1, "<i2"),
        TextureFormat("r16float", 2, 1, "<f2"),
        TextureFormat("rgba8unorm", 4, 4, "u1"),
        TextureFormat("rgba8unorm-srgb", 4, 4, "u1"),
        TextureFormat("rgba8uint", 4, 4, "u1"),
        TextureFormat("rgba8sint", 4, 4, "i1"),
        TextureFormat("bgra8unorm", 4, 4, "u1"),
        TextureFormat("bgra8unorm-srgb", 4, 4, "u1"),
        TextureFormat("r32uint", 4, 1, "<u4"),
        TextureFormat("r32sint", 4, 1, "<i4"),
        TextureFormat("r32float", 4, 1, "<f4"),
        TextureFormat("rg16float", 4, 2, "<f2"),
        TextureFormat("rg32float", 8, 2, "<f4"),
        TextureFormat("rgba16uint", 8, 4, "<u2"),
        TextureFormat("rgba16float", 8, 4, "<f2"),
        TextureFormat("rgba32uint", 16, 4, "<u4"),
        TextureFormat("rgba32float", 16, 4, "<f4"),
    )
}

DEFAULT_CAPTURE_FORMAT = "rgba8unorm-srgb"


def _normalize_key(value) -> str:
    return str(value).strip().lower().replace("_", "-")


def get_format(name) -> TextureFormat:
    """Look up a texture format by its WebGPU name (``rgba8unorm``, ``r32uint``...)."""
    if isinstance(name, TextureFormat):
        return name
    key = _normalize_key(name)
    if key not in _FORMATS:
        raise ValueError(f"Unknown texture format: {name!r}")
    return _FORMATS[key]


def bytes_per_pixel(name) -> int:
    return get_format(name).bytes_per_pixel


def available_formats() -> list[str]:
    return sorted(_FORMATS)


__all__ = [
    "TextureFormat",
    "DEFAULT_CAPTURE_FORMAT",
    "get_format",
    "bytes_per_pixel",
    "available_formats",
]
