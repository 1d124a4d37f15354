# python/gpusnap/__init__.py
# Public API for the GPU capture snapshot harness
# Exists to gather row padding, reslicing, capture and snapshot helpers in one namespace
# RELEVANT FILES: python/gpusnap/padding.py, python/gpusnap/snapshot/store.py, python/gpusnap/pytest_plugin.py

__version__ = "0.3.0"

from .errors import (
    BufferTooSmallError,
    InvalidDimensionError,
    SnapshotContentMismatchError,
    SnapshotError,
    SnapshotLengthMismatchError,
    SnapshotMissingError,
)
from .padding import (
    COPY_BYTES_PER_ROW_ALIGNMENT,
    RowPadding,
    aligned_row_size,
    compute_row_padding,
    pad_to_copy_alignment,
)
from .formats import TextureFormat, available_formats, bytes_per_pixel, get_format
from .reslice import repad, reslice, reslice_to_array
from .capture import (
    BufferDescriptor,
    Capture,
    TextureDescriptor,
    create_capture,
    read_capture,
    read_capture_async,
)
from .codec import DecodedImage, decode_png, encode_png
from .config import (
    SnapshotConfig,
    SnapshotMode,
    current_mode,
    load_snapshot_config,
)
from .snapshot import (
    Bytes,
    SnapshotAssertion,
    SnapshotCounter,
    SnapshotSession,
    SnapshotStore,
    Structured,
    assert_or_update,
    resolve_snapshot_path,
    slugify,
)

__all__ = [
    "__version__",
    "BufferTooSmallError",
    "InvalidDimensionError",
    "SnapshotContentMismatchError",
    "SnapshotError",
    "SnapshotLengthMismatchError",
    "SnapshotMissingError",
    "COPY_BYTES_PER_ROW_ALIGNMENT",
    "RowPadding",
    "aligned_row_size",
    "compute_row_padding",
    "pad_to_copy_alignment",
    "TextureFormat",
    "available_formats",
    "bytes_per_pixel",
    "get_format",
    "repad",
    "reslice",
    "reslice_to_array",
    "BufferDescriptor",
    "Capture",
    "TextureDescriptor",
    "create_capture",
    "read_capture",
    "read_capture_async",
    "DecodedImage",
    "decode_png",
    "encode_png",
    "SnapshotConfig",
    "SnapshotMode",
    "current_mode",
    "load_snapshot_config",
    "Bytes",
    "SnapshotAssertion",
    "SnapshotCounter",
    "SnapshotSession",
    "SnapshotStore",
    "Structured",
    "assert_or_update",
    "resolve_snapshot_path",
    "slugify",
]
