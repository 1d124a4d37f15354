# python/gpusnap/snapshot/assertion.py
# Snapshot helpers bound to a single test (source file + test name).
# RELEVANT FILES: python/gpusnap/pytest_plugin.py, python/gpusnap/capture.py, tests/test_plugin.py

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import numpy as np

from ..capture import Capture, MappableBuffer, create_capture, read_capture, read_capture_async
from ..codec import encode_png
from ..formats import DEFAULT_CAPTURE_FORMAT
from .session import SnapshotSession, default_session
from .store import Bytes, SnapshotValue, Structured, assert_or_update

# Formats whose texels can be stored as 8-bit RGBA PNG; BGRA needs a swizzle first.
_RGBA_PNG_FORMATS = frozenset({"rgba8unorm", "rgba8unorm-srgb"})
_BGRA_PNG_FORMATS = frozenset({"bgra8unorm", "bgra8unorm-srgb"})


def _bgra_to_rgba(packed: bytes) -> bytes:
    arr = np.frombuffer(packed, dtype=np.uint8).reshape(-1, 4)
    return np.ascontiguousarray(arr[:, [2, 1, 0, 3]]).tobytes()


class SnapshotAssertion:
    """Assert or record snapshots for one test.

    Example:
        def test_clear(snapshot):
            capture = snapshot.create_capture(32, 32)
            ...
            snapshot.assert_capture(output_buffer, capture)
            # -> __snapshots__/test_clear.py.test-clear.0.png
    """

    def __init__(self, source_path, test_name: str, session: Optional[SnapshotSession] = None):
        self.source_path = Path(source_path)
        self.test_name = str(test_name)
        self.session = session if session is not None else default_session()
        self.paths: List[Path] = []

    def create_capture(self, width: int, height: int, format: str = DEFAULT_CAPTURE_FORMAT, **kwargs) -> Capture:
        """create_capture() using the row alignment from the session config."""
        kwargs.setdefault("alignment", self.session.config.alignment)
        return create_capture(width, height, format, **kwargs)

    def assert_match(self, value: SnapshotValue, extension: Optional[str] = None) -> Path:
        path = assert_or_update(
            value,
            self.source_path,
            self.test_name,
            extension=extension,
            session=self.session,
        )
        self.paths.append(path)
        return path

    def assert_bytes(self, data: Any, extension: Optional[str] = None) -> Path:
        return self.assert_match(Bytes(data), extension)

    def assert_json(self, value: Any, extension: Optional[str] = None) -> Path:
        return self.assert_match(Structured(value), extension)

    def assert_image(self, packed: Any, width: int, height: int) -> Path:
        """Snapshot packed RGBA8 pixels as a PNG."""
        png = encode_png(packed, width, height)
        return self.assert_match(Bytes(png), self.session.config.image_extension)

    def _assert_packed(self, packed: bytes, capture: Capture) -> Path:
        if capture.format in _RGBA_PNG_FORMATS:
            return self.assert_image(packed, capture.width, capture.height)
        if capture.format in _BGRA_PNG_FORMATS:
            return self.assert_image(_bgra_to_rgba(packed), capture.width, capture.height)
        return self.assert_bytes(packed)

    def assert_capture(self, buffer: MappableBuffer, capture: Capture) -> Path:
        """Read back a captured frame and snapshot it.

        rgba8unorm and bgra8unorm captures (and their srgb variants) are stored
        as RGBA PNG; other formats as raw packed bytes.
        """
        return self._assert_packed(read_capture(buffer, capture), capture)

    async def assert_capture_async(self, buffer: MappableBuffer, capture: Capture) -> Path:
        packed = await read_capture_async(buffer, capture)
        return self._assert_packed(packed, capture)


__all__ = ["SnapshotAssertion"]
