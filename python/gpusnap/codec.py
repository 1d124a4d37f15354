# python/gpusnap/codec.py
# PNG encode/decode for packed RGBA pixels.
# - Deterministic PNG writer so snapshot bytes are stable across runs
# - Decoder for fixture images uploaded as input textures
# RELEVANT FILES: python/gpusnap/snapshot/assertion.py, python/gpusnap/tools/validate_rows.py, tests/test_codec.py

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import Union

import numpy as np
from PIL import Image

from ._validate import size_wh

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class DecodedImage:
    width: int
    height: int
    data: bytes

    def to_array(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=np.uint8).reshape((self.height, self.width, 4))


def encode_png(packed, width: int, height: int) -> bytes:
    """Encode tightly packed RGBA8 bytes as PNG.

    Written without optimization or ancillary chunks and with a fixed
    compress level, so identical pixels always produce identical bytes.
    """
    w, h = size_wh(width, height)
    arr = np.frombuffer(memoryview(packed).cast("B"), dtype=np.uint8)
    if arr.size != w * h * 4:
        raise ValueError(f"packed RGBA data must be {w * h * 4} bytes, got {arr.size}")
    img = Image.fromarray(arr.reshape((h, w, 4)))
    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=False, compress_level=6)
    return buf.getvalue()


def decode_png(source: Union[bytes, bytearray, PathLike]) -> DecodedImage:
    """Decode a PNG (bytes or file path) into packed RGBA8 pixels."""
    if isinstance(source, (bytes, bytearray)):
        stream = io.BytesIO(bytes(source))
        with Image.open(stream) as img:
            rgba = img.convert("RGBA")
    else:
        with Image.open(os.fspath(source)) as img:
            rgba = img.convert("RGBA")
    width, height = rgba.size
    return DecodedImage(width=width, height=height, data=rgba.tobytes())


__all__ = ["DecodedImage", "encode_png", "decode_png"]
