# python/gpusnap/reslice.py
# Strip (and re-insert) per-row padding in captured GPU buffers.
# Output is always a fresh tightly packed buffer; inputs are never mutated.
# RELEVANT FILES: python/gpusnap/padding.py, python/gpusnap/capture.py, tests/test_reslice.py

from __future__ import annotations

import numpy as np

from ._validate import dimension
from .errors import BufferTooSmallError
from .formats import get_format
from .padding import COPY_BYTES_PER_ROW_ALIGNMENT, compute_row_padding


def _as_byte_view(buffer) -> memoryview:
    view = memoryview(buffer)
    if not view.c_contiguous:
        raise ValueError("buffer must be C-contiguous")
    return view.cast("B") if view.format != "B" or view.ndim != 1 else view


def reslice(
    buffer,
    width: int,
    height: int,
    bytes_per_pixel: int = 4,
    alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT,
) -> bytes:
    """Remove row padding from a captured buffer.

    Row ``i`` of the input starts at ``i * padded``; the first ``unpadded``
    bytes of each row are copied to ``i * unpadded`` in the output.

    Args:
        buffer: Raw captured bytes (any buffer-protocol object)
        width: Image width in pixels
        height: Image height in pixels
        bytes_per_pixel: Texel size in bytes
        alignment: Row alignment used when the buffer was written

    Returns:
        New ``bytes`` of length ``unpadded * height``

    Raises:
        InvalidDimensionError: If width or height is not positive
        BufferTooSmallError: If the buffer is shorter than ``padded * height``
    """
    rows = compute_row_padding(width, bytes_per_pixel, alignment)
    h = dimension("height", height)
    src = _as_byte_view(buffer)
    required = rows.padded * h
    if len(src) < required:
        raise BufferTooSmallError(required, len(src))

    out = bytearray(rows.unpadded * h)
    for i in range(h):
        start = i * rows.padded
        out[i * rows.unpadded:(i + 1) * rows.unpadded] = src[start:start + rows.unpadded]
    return bytes(out)


def repad(
    packed,
    width: int,
    height: int,
    bytes_per_pixel: int = 4,
    alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT,
    fill: int = 0,
) -> bytes:
    """Lay packed rows out at the aligned stride, filling the gap with ``fill``."""
    rows = compute_row_padding(width, bytes_per_pixel, alignment)
    h = dimension("height", height)
    src = _as_byte_view(packed)
    if len(src) != rows.unpadded * h:
        raise ValueError(
            f"packed buffer must be exactly {rows.unpadded * h} bytes, got {len(src)}"
        )
    if not 0 <= int(fill) <= 255:
        raise ValueError("fill must be a byte value in [0, 255]")

    out = bytearray([int(fill)]) * (rows.padded * h)
    for i in range(h):
        start = i * rows.padded
        out[start:start + rows.unpadded] = src[i * rows.unpadded:(i + 1) * rows.unpadded]
    return bytes(out)


def reslice_to_array(
    buffer,
    width: int,
    height: int,
    format: str = "rgba8unorm",
    alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT,
) -> np.ndarray:
    """Reslice a captured buffer and view it as an ``(H, W, C)`` numpy array."""
    fmt = get_format(format)
    packed = reslice(buffer, width, height, fmt.bytes_per_pixel, alignment)
    arr = np.frombuffer(packed, dtype=fmt.numpy_dtype)
    return arr.reshape((int(height), int(width), fmt.channels))


__all__ = ["reslice", "repad", "reslice_to_array"]
