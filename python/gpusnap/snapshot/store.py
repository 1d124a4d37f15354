# python/gpusnap/snapshot/store.py
# Record or verify snapshot values on disk with byte-exact comparison.
# RELEVANT FILES: python/gpusnap/snapshot/paths.py, python/gpusnap/errors.py, tests/test_store.py

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from ..config import SnapshotMode, parse_mode
from ..errors import (
    SnapshotContentMismatchError,
    SnapshotLengthMismatchError,
    SnapshotMissingError,
)
from .paths import resolve_snapshot_path
from .session import SnapshotSession, default_session

logger = logging.getLogger(__name__)

# Block size for the equality scan; only the first unequal block is inspected byte by byte.
_COMPARE_BLOCK = 64 * 1024


@dataclass(frozen=True)
class Bytes:
    """Snapshot value stored as its raw bytes."""

    data: Any

    def serialize(self) -> bytes:
        value = self.data
        if isinstance(value, np.ndarray):
            if value.dtype.kind not in "biuf" or value.dtype.hasobject:
                raise TypeError(f"Bytes() needs a fixed-width numeric array, got dtype {value.dtype}")
            return np.ascontiguousarray(value).tobytes()
        if isinstance(value, memoryview):
            return value.cast("B").tobytes()
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        raise TypeError(f"Bytes() needs a bytes-like object or numpy array, got {type(value).__name__}")


def _json_default(obj: Any) -> Any:
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, (bytes, bytearray)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass(frozen=True)
class Structured:
    """Snapshot value stored as compact UTF-8 JSON."""

    value: Any

    def serialize(self) -> bytes:
        text = json.dumps(
            self.value,
            default=_json_default,
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return text.encode("utf-8")


SnapshotValue = Union[Bytes, Structured]


def serialize(value: SnapshotValue) -> bytes:
    if not isinstance(value, (Bytes, Structured)):
        raise TypeError(
            f"snapshot value must be wrapped in Bytes(...) or Structured(...), got {type(value).__name__}"
        )
    return value.serialize()


def first_difference(expected: bytes, actual: bytes) -> Optional[int]:
    """Offset of the first differing byte between equal-length buffers, or None."""
    for start in range(0, len(expected), _COMPARE_BLOCK):
        end = start + _COMPARE_BLOCK
        if expected[start:end] == actual[start:end]:
            continue
        a = np.frombuffer(expected[start:end], dtype=np.uint8)
        b = np.frombuffer(actual[start:end], dtype=np.uint8)
        return start + int(np.argmax(a != b))
    return None


def compare_snapshot(path: Path, stored: bytes, actual: bytes) -> None:
    if len(stored) != len(actual):
        raise SnapshotLengthMismatchError(len(stored), len(actual), path)
    offset = first_difference(stored, actual)
    if offset is not None:
        raise SnapshotContentMismatchError(offset, stored[offset], actual[offset], path)


def assert_or_update(
    value: SnapshotValue,
    source_path: Union[str, "os.PathLike[str]"],
    test_name: str,
    extension: Optional[str] = None,
    mode: Optional[SnapshotMode] = None,
    session: Optional[SnapshotSession] = None,
) -> Path:
    """Compare ``value`` with its stored snapshot, or overwrite it in update mode.

    Args:
        value: ``Bytes(...)`` or ``Structured(...)``
        source_path: Test source file the snapshot belongs to
        test_name: Name of the running test
        extension: File extension (defaults to the session's default)
        mode: Explicit mode; when omitted the session's mode is used
        session: Snapshot session owning the occurrence counter

    Returns:
        Path of the snapshot file that was compared or written

    Raises:
        SnapshotMissingError: Assert mode and no stored snapshot exists
        SnapshotLengthMismatchError: Stored and new values differ in length
        SnapshotContentMismatchError: Stored and new values differ at some offset
        OSError: Directory creation or file write failed
    """
    sess = session if session is not None else default_session()
    data = serialize(value)
    ext = extension if extension is not None else sess.config.default_extension
    path = resolve_snapshot_path(
        source_path,
        test_name,
        ext,
        counter=sess.counter,
        directory_name=sess.config.directory_name,
    )
    path.parent.mkdir(parents=True, exist_ok=True)

    active = parse_mode(mode) if mode is not None else sess.mode
    if active is SnapshotMode.UPDATE:
        path.write_bytes(data)
        sess.record_write(path)
        logger.info("wrote snapshot %s (%d bytes)", path, len(data))
        return path

    try:
        stored = path.read_bytes()
    except FileNotFoundError:
        raise SnapshotMissingError(path) from None
    compare_snapshot(path, stored, data)
    logger.debug("snapshot %s matched (%d bytes)", path, len(data))
    return path


class SnapshotStore:
    """Snapshot assertions bound to one session."""

    def __init__(self, session: Optional[SnapshotSession] = None) -> None:
        self.session = session if session is not None else SnapshotSession()

    def assert_or_update(
        self,
        value: SnapshotValue,
        source_path,
        test_name: str,
        extension: Optional[str] = None,
        mode: Optional[SnapshotMode] = None,
    ) -> Path:
        return assert_or_update(value, source_path, test_name, extension, mode, self.session)


__all__ = [
    "Bytes",
    "Structured",
    "SnapshotValue",
    "serialize",
    "first_difference",
    "compare_snapshot",
    "assert_or_update",
    "SnapshotStore",
]
