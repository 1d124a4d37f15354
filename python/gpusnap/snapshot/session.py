# python/gpusnap/snapshot/session.py
# Per-run snapshot state: occurrence counter, configuration and mode.
# The pytest plugin owns one session per test run; a lazily created default
# session serves callers outside pytest.
# RELEVANT FILES: python/gpusnap/snapshot/paths.py, python/gpusnap/pytest_plugin.py

from __future__ import annotations

import threading
from typing import List, Optional

from ..config import SnapshotConfig, SnapshotMode, load_snapshot_config, parse_mode
from .paths import SnapshotCounter


class SnapshotSession:
    def __init__(
        self,
        config: Optional[SnapshotConfig] = None,
        mode: Optional[SnapshotMode] = None,
    ) -> None:
        self.config = config if config is not None else load_snapshot_config()
        self.counter = SnapshotCounter()
        self._mode = None if mode is None else parse_mode(mode)
        self._written: List[str] = []
        self._lock = threading.Lock()

    @property
    def mode(self) -> SnapshotMode:
        """Pinned mode if one was given, else read fresh from config/process."""
        if self._mode is not None:
            return self._mode
        return self.config.resolve_mode()

    def record_write(self, path) -> None:
        with self._lock:
            self._written.append(str(path))

    @property
    def written(self) -> List[str]:
        with self._lock:
            return list(self._written)


_DEFAULT_SESSION: Optional[SnapshotSession] = None
_DEFAULT_LOCK = threading.Lock()


def default_session() -> SnapshotSession:
    global _DEFAULT_SESSION
    with _DEFAULT_LOCK:
        if _DEFAULT_SESSION is None:
            _DEFAULT_SESSION = SnapshotSession()
        return _DEFAULT_SESSION


def reset_default_session() -> None:
    global _DEFAULT_SESSION
    with _DEFAULT_LOCK:
        _DEFAULT_SESSION = None


__all__ = ["SnapshotSession", "default_session", "reset_default_session"]
