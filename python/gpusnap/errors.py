# python/gpusnap/errors.py
# Error taxonomy for capture normalization and snapshot assertions.
# Snapshot failures subclass AssertionError so pytest reports them as test failures.
# RELEVANT FILES: python/gpusnap/reslice.py, python/gpusnap/snapshot/store.py, tests/test_store.py

from __future__ import annotations

from pathlib import Path
from typing import Optional


class InvalidDimensionError(ValueError):
    """Raised when a width or height is zero, negative or not an integer."""

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be a positive integer, got {value!r}")


class BufferTooSmallError(ValueError):
    """Raised when a captured buffer is shorter than its padded layout implies."""

    def __init__(self, required: int, actual: int) -> None:
        self.required = int(required)
        self.actual = int(actual)
        super().__init__(
            f"Captured buffer too small: need at least {self.required} bytes, got {self.actual}"
        )


class SnapshotError(AssertionError):
    """Base class for snapshot assertion failures."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class SnapshotMissingError(SnapshotError):
    """Raised in assert mode when no stored snapshot exists at the resolved path."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            "Snapshot missing; re-run with --snapshot-update to record it", path
        )


class SnapshotLengthMismatchError(SnapshotError):
    """Stored and new snapshot values differ in length."""

    def __init__(self, expected: int, actual: int, path: Optional[Path] = None) -> None:
        self.expected = int(expected)
        self.actual = int(actual)
        super().__init__(
            f"Snapshot length mismatch: expected {self.expected}, got {self.actual}", path
        )


class SnapshotContentMismatchError(SnapshotError):
    """Stored and new snapshot values differ at ``offset``."""

    def __init__(self, offset: int, expected: int, actual: int, path: Optional[Path] = None) -> None:
        self.offset = int(offset)
        self.expected = int(expected)
        self.actual = int(actual)
        super().__init__(
            f"Snapshot content mismatch at byte {self.offset}: "
            f"expected {self.expected}, got {self.actual}",
            path,
        )


__all__ = [
    "InvalidDimensionError",
    "BufferTooSmallError",
    "SnapshotError",
    "SnapshotMissingError",
    "SnapshotLengthMismatchError",
    "SnapshotContentMismatchError",
]
