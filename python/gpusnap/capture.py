# python/gpusnap/capture.py
# Capture target/buffer descriptors and readback of rendered frames.
# - Sizes the destination buffer from the aligned row stride
# - Maps, copies and unmaps a device buffer, then strips the row padding
# RELEVANT FILES: python/gpusnap/padding.py, python/gpusnap/reslice.py, tests/test_capture.py

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Tuple

from ._validate import size_wh
from .formats import DEFAULT_CAPTURE_FORMAT, TextureFormat, get_format
from .padding import COPY_BYTES_PER_ROW_ALIGNMENT, compute_row_padding
from .reslice import reslice

logger = logging.getLogger(__name__)

# WebGPU usage and map-mode bit flags
BUFFER_USAGE_MAP_READ = 0x0001
BUFFER_USAGE_COPY_DST = 0x0008
TEXTURE_USAGE_COPY_SRC = 0x01
TEXTURE_USAGE_TEXTURE_BINDING = 0x04
TEXTURE_USAGE_STORAGE_BINDING = 0x08
TEXTURE_USAGE_RENDER_ATTACHMENT = 0x10
MAP_MODE_READ = 0x0001


class MappableBuffer(Protocol):
    """The slice of a device buffer the capture readback relies on."""

    def read_mapped(self) -> Any: ...

    def unmap(self) -> None: ...


@dataclass(frozen=True)
class TextureDescriptor:
    label: str
    size: Tuple[int, int, int]
    format: str
    usage: int
    mip_level_count: int = 1
    sample_count: int = 1
    dimension: str = "2d"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "size": self.size,
            "format": self.format,
            "usage": self.usage,
            "mip_level_count": self.mip_level_count,
            "sample_count": self.sample_count,
            "dimension": self.dimension,
        }


@dataclass(frozen=True)
class BufferDescriptor:
    label: str
    size: int
    usage: int
    mapped_at_creation: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "size": self.size,
            "usage": self.usage,
            "mapped_at_creation": self.mapped_at_creation,
        }


@dataclass(frozen=True)
class Capture:
    """Render target and readback buffer descriptors for one captured frame.

    ``bytes_per_row`` is the stride the texture-to-buffer copy must use;
    passing any other value to the copy corrupts every row boundary.
    """

    width: int
    height: int
    texture_format: TextureFormat
    bytes_per_row: int
    texture: TextureDescriptor
    buffer: BufferDescriptor
    alignment: int = field(default=COPY_BYTES_PER_ROW_ALIGNMENT)

    @property
    def format(self) -> str:
        return self.texture_format.name

    @property
    def dimensions(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    @property
    def packed_size(self) -> int:
        return self.width * self.height * self.texture_format.bytes_per_pixel

    def copy_layout(self, buffer: Any = None) -> Dict[str, Any]:
        """Destination layout for ``copy_texture_to_buffer``."""
        return {
            "buffer": buffer,
            "offset": 0,
            "bytes_per_row": self.bytes_per_row,
            "rows_per_image": self.height,
        }

    def reslice(self, raw) -> bytes:
        return reslice(
            raw,
            self.width,
            self.height,
            self.texture_format.bytes_per_pixel,
            self.alignment,
        )


def create_capture(
    width: int,
    height: int,
    format: str = DEFAULT_CAPTURE_FORMAT,
    *,
    alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT,
    extra_texture_usage: int = 0,
    label: str = "Capture",
) -> Capture:
    """Describe a render target and a host-readable buffer for capturing it.

    Args:
        width: Render target width in pixels
        height: Render target height in pixels
        format: WebGPU texture format name
        alignment: Row alignment override for the buffer copy
        extra_texture_usage: Additional texture usage bits (e.g. storage binding)
        label: Debug label for both resources

    Returns:
        Capture with descriptors and the ``bytes_per_row`` to copy with
    """
    w, h = size_wh(width, height)
    fmt = get_format(format)
    rows = compute_row_padding(w, fmt.bytes_per_pixel, alignment)

    texture = TextureDescriptor(
        label=label,
        size=(w, h, 1),
        format=fmt.name,
        usage=TEXTURE_USAGE_RENDER_ATTACHMENT | TEXTURE_USAGE_COPY_SRC | int(extra_texture_usage),
    )
    buffer = BufferDescriptor(
        label=label,
        size=rows.padded * h,
        usage=BUFFER_USAGE_MAP_READ | BUFFER_USAGE_COPY_DST,
    )
    logger.debug(
        "capture %dx%d %s: bytes_per_row=%d buffer_size=%d",
        w, h, fmt.name, rows.padded, buffer.size,
    )
    return Capture(
        width=w,
        height=h,
        texture_format=fmt,
        bytes_per_row=rows.padded,
        texture=texture,
        buffer=buffer,
        alignment=int(alignment),
    )


def _copy_mapped(buffer: MappableBuffer) -> bytes:
    return bytes(memoryview(buffer.read_mapped()).cast("B"))


def read_capture(buffer: MappableBuffer, capture: Capture) -> bytes:
    """Map ``buffer`` for reading, copy it out and return the packed pixels.

    The buffer is always unmapped, even when reslicing fails.
    """
    map_sync = getattr(buffer, "map_sync", None)
    if not callable(map_sync):
        raise TypeError("buffer must provide map_sync(mode); use read_capture_async for map_async")
    map_sync(MAP_MODE_READ)
    try:
        raw = _copy_mapped(buffer)
    finally:
        buffer.unmap()
    return capture.reslice(raw)


async def read_capture_async(buffer: MappableBuffer, capture: Capture) -> bytes:
    """Async variant of :func:`read_capture` awaiting ``map_async``."""
    map_async = getattr(buffer, "map_async", None)
    if not callable(map_async):
        raise TypeError("buffer must provide map_async(mode)")
    pending = map_async(MAP_MODE_READ)
    if inspect.isawaitable(pending):
        await pending
    try:
        raw = _copy_mapped(buffer)
    finally:
        buffer.unmap()
    return capture.reslice(raw)


__all__ = [
    "BUFFER_USAGE_MAP_READ",
    "BUFFER_USAGE_COPY_DST",
    "TEXTURE_USAGE_COPY_SRC",
    "TEXTURE_USAGE_TEXTURE_BINDING",
    "TEXTURE_USAGE_STORAGE_BINDING",
    "TEXTURE_USAGE_RENDER_ATTACHMENT",
    "MAP_MODE_READ",
    "MappableBuffer",
    "TextureDescriptor",
    "BufferDescriptor",
    "Capture",
    "create_capture",
    "read_capture",
    "read_capture_async",
]
