# python/gpusnap/snapshot/paths.py
# Deterministic snapshot file naming keyed by test identity and call order.
# RELEVANT FILES: python/gpusnap/snapshot/store.py, python/gpusnap/snapshot/session.py, tests/test_paths.py

from __future__ import annotations

import logging
import os
import threading
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

SNAPSHOT_DIR_NAME = "__snapshots__"

PathLike = Union[str, "os.PathLike[str]"]


def slugify(s: str) -> str:
    """Lowercase ``s`` and collapse every run of non-alphanumerics into ``-``."""
    decomposed = unicodedata.normalize("NFKD", str(s))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    raw = "".join(c.lower() if c.isalnum() else "-" for c in stripped)
    slug = "-".join(part for part in raw.split("-") if part)
    return slug or "test"


@dataclass(frozen=True)
class SnapshotKey:
    """Identity of one assertion call within one test."""

    source_path: Path
    test_name: str
    index: int
    directory_name: str = SNAPSHOT_DIR_NAME

    @property
    def base(self) -> Path:
        return snapshot_base(self.source_path, self.test_name, self.directory_name)

    def path(self, extension: str) -> Path:
        ext = str(extension).lstrip(".")
        if not ext:
            raise ValueError("extension must not be empty")
        base = self.base
        return base.with_name(f"{base.name}.{self.index}.{ext}")


class SnapshotCounter:
    """Occurrence counter per snapshot base path.

    One instance lives for a whole test run; indices are handed out under a
    lock so concurrent assertions for the same test still get distinct,
    ordered values.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def next_index(self, key: str) -> int:
        with self._lock:
            index = self._counts.get(key, 0)
            self._counts[key] = index + 1
        return index

    def peek(self, key: str) -> int:
        with self._lock:
            return self._counts.get(key, 0)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)


def snapshot_base(
    source_path: PathLike,
    test_name: str,
    directory_name: str = SNAPSHOT_DIR_NAME,
) -> Path:
    source = Path(os.fspath(source_path))
    return source.parent / directory_name / f"{source.name}.{slugify(test_name)}"


def next_snapshot_key(
    source_path: PathLike,
    test_name: str,
    counter: SnapshotCounter,
    directory_name: str = SNAPSHOT_DIR_NAME,
) -> SnapshotKey:
    source = Path(os.fspath(source_path))
    base = snapshot_base(source, test_name, directory_name)
    index = counter.next_index(str(base))
    return SnapshotKey(source, test_name, index, directory_name)


def resolve_snapshot_path(
    source_path: PathLike,
    test_name: str,
    extension: str,
    counter: Optional[SnapshotCounter] = None,
    directory_name: str = SNAPSHOT_DIR_NAME,
) -> Path:
    """Return the snapshot path for the next assertion of ``test_name``.

    The n-th call for the same source file and test name (counting from 0,
    whatever the extension) yields ``<base>.<n>.<extension>``.
    """
    if not str(extension).lstrip("."):
        raise ValueError("extension must not be empty")
    if counter is None:
        from .session import default_session

        counter = default_session().counter
    key = next_snapshot_key(source_path, test_name, counter, directory_name)
    path = key.path(extension)
    logger.debug("snapshot path for %s[%d]: %s", test_name, key.index, path)
    return path


__all__ = [
    "SNAPSHOT_DIR_NAME",
    "SnapshotKey",
    "SnapshotCounter",
    "slugify",
    "snapshot_base",
    "next_snapshot_key",
    "resolve_snapshot_path",
]
