"""
Snapshot storage for gpusnap.

Resolves per-assertion snapshot paths and records or verifies values
against them with byte-exact comparison.
"""

from .paths import (
    SNAPSHOT_DIR_NAME,
    SnapshotCounter,
    SnapshotKey,
    next_snapshot_key,
    resolve_snapshot_path,
    slugify,
    snapshot_base,
)
from .session import SnapshotSession, default_session, reset_default_session
from .store import (
    Bytes,
    SnapshotStore,
    SnapshotValue,
    Structured,
    assert_or_update,
    compare_snapshot,
    first_difference,
    serialize,
)
from .assertion import SnapshotAssertion

__all__ = [
    "SNAPSHOT_DIR_NAME",
    "SnapshotCounter",
    "SnapshotKey",
    "next_snapshot_key",
    "resolve_snapshot_path",
    "slugify",
    "snapshot_base",
    "SnapshotSession",
    "default_session",
    "reset_default_session",
    "Bytes",
    "Structured",
    "SnapshotValue",
    "SnapshotStore",
    "assert_or_update",
    "compare_snapshot",
    "first_difference",
    "serialize",
    "SnapshotAssertion",
]
