# python/gpusnap/padding.py
# Row stride arithmetic for GPU texture-to-buffer copies.
# Copies must start every row on a 256-byte boundary, so logical and physical strides differ.
# RELEVANT FILES: python/gpusnap/reslice.py, python/gpusnap/capture.py, tests/test_padding.py

from __future__ import annotations

from dataclasses import dataclass

from ._validate import dimension, positive

COPY_BYTES_PER_ROW_ALIGNMENT: int = 256
COPY_BUFFER_ALIGNMENT: int = 4


@dataclass(frozen=True)
class RowPadding:
    """Logical (``unpadded``) and aligned (``padded``) byte length of one row."""

    unpadded: int
    padded: int

    @property
    def padding(self) -> int:
        return self.padded - self.unpadded


def aligned_row_size(row_bytes: int, alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT) -> int:
    """Round row_bytes up to the next multiple of alignment."""
    if alignment <= 0:
        raise ValueError("alignment must be positive")
    return ((int(row_bytes) + alignment - 1) // alignment) * alignment


def compute_row_padding(
    width: int,
    bytes_per_pixel: int = 4,
    alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT,
) -> RowPadding:
    """Compute the row strides for an image ``width`` pixels wide.

    Args:
        width: Row width in pixels (must be > 0)
        bytes_per_pixel: Size of one texel in bytes
        alignment: Required row alignment in bytes

    Returns:
        RowPadding with ``padded % alignment == 0`` and ``padded >= unpadded``

    Raises:
        InvalidDimensionError: If width is not a positive integer
    """
    w = dimension("width", width)
    bpp = positive("bytes_per_pixel", bytes_per_pixel)
    align = positive("alignment", alignment)
    unpadded = w * bpp
    return RowPadding(unpadded=unpadded, padded=aligned_row_size(unpadded, align))


def pad_to_copy_alignment(contents, alignment: int = COPY_BUFFER_ALIGNMENT) -> bytes:
    """Zero-extend ``contents`` so its length is a non-zero multiple of ``alignment``.

    Buffers created with mapped contents must have a size that is a multiple
    of 4; this returns the bytes to upload for such a buffer.
    """
    align = positive("alignment", alignment)
    data = memoryview(contents).cast("B").tobytes()
    size = max(aligned_row_size(len(data), align), align)
    return data + bytes(size - len(data))


__all__ = [
    "COPY_BYTES_PER_ROW_ALIGNMENT",
    "COPY_BUFFER_ALIGNMENT",
    "RowPadding",
    "aligned_row_size",
    "compute_row_padding",
    "pad_to_copy_alignment",
]
