"""
PNG codec tests for gpusnap

Snapshots of rendered frames are stored as PNG, so encoding has to be
deterministic: identical pixels must give identical file bytes.
"""
import hashlib

import numpy as np
import pytest
from PIL import Image

from gpusnap import InvalidDimensionError, decode_png, encode_png


def _gradient(width, height):
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., 0] = np.linspace(0, 255, width, dtype=np.uint8)[None, :]
    arr[..., 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, None]
    arr[..., 3] = 255
    return arr


def test_encode_is_deterministic():
    packed = _gradient(32, 16).tobytes()
    first = encode_png(packed, 32, 16)
    second = encode_png(bytearray(packed), 32, 16)
    assert hashlib.sha256(first).hexdigest() == hashlib.sha256(second).hexdigest()
    assert first.startswith(b"\x89PNG\r\n\x1a\n")


def test_encode_decode_preserves_pixels():
    arr = _gradient(7, 5)
    decoded = decode_png(encode_png(arr.tobytes(), 7, 5))
    assert (decoded.width, decoded.height) == (7, 5)
    assert decoded.data == arr.tobytes()
    np.testing.assert_array_equal(decoded.to_array(), arr)


def test_encode_rejects_wrong_length():
    with pytest.raises(ValueError, match="64 bytes"):
        encode_png(b"\x00" * 63, 4, 4)


def test_encode_rejects_zero_size():
    with pytest.raises(InvalidDimensionError):
        encode_png(b"", 0, 4)


def test_decode_from_path_converts_to_rgba(tmp_path):
    path = tmp_path / "src.png"
    Image.new("RGB", (3, 2), (10, 20, 30)).save(path)

    decoded = decode_png(path)

    assert (decoded.width, decoded.height) == (3, 2)
    assert decoded.data == bytes([10, 20, 30, 255]) * 6
