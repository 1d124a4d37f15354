"""
Row padding tests for gpusnap

Covers the aligned stride computation used to size capture buffers and
the 4-byte padding applied to buffer uploads.
"""
import numpy as np
import pytest

from gpusnap import (
    InvalidDimensionError,
    RowPadding,
    aligned_row_size,
    compute_row_padding,
    pad_to_copy_alignment,
)


class TestComputeRowPadding:

    def test_width_32_rgba(self):
        rows = compute_row_padding(32, 4, 256)
        assert rows == RowPadding(unpadded=128, padded=256)
        assert rows.padding == 128

    def test_already_aligned_width(self):
        rows = compute_row_padding(64)
        assert rows.unpadded == 256
        assert rows.padded == 256

    def test_one_byte_over_boundary(self):
        rows = compute_row_padding(65)
        assert rows.unpadded == 260
        assert rows.padded == 512

    @pytest.mark.parametrize("width", [1, 2, 3, 31, 63, 64, 100, 255, 256, 257, 1000, 4097])
    def test_padded_is_aligned_and_not_smaller(self, width):
        rows = compute_row_padding(width, 4, 256)
        assert rows.padded % 256 == 0
        assert rows.padded >= width * 4
        assert rows.padded - rows.unpadded < 256

    @pytest.mark.parametrize("bpp,expected", [(1, 256), (2, 256), (8, 512), (16, 768)])
    def test_bytes_per_pixel(self, bpp, expected):
        assert compute_row_padding(40, bpp).padded == expected

    def test_custom_alignment(self):
        rows = compute_row_padding(3, 4, alignment=8)
        assert rows == RowPadding(unpadded=12, padded=16)

    @pytest.mark.parametrize("width", [0, -1, 2.5, "32", None, True])
    def test_invalid_width(self, width):
        with pytest.raises(InvalidDimensionError):
            compute_row_padding(width)

    def test_invalid_dimension_is_value_error(self):
        with pytest.raises(ValueError, match="width"):
            compute_row_padding(0)

    def test_numpy_integer_width(self):
        assert compute_row_padding(np.int64(32)).padded == 256

    @pytest.mark.parametrize("kwargs", [{"bytes_per_pixel": 0}, {"alignment": 0}, {"alignment": -256}])
    def test_invalid_stride_parameters(self, kwargs):
        with pytest.raises(ValueError):
            compute_row_padding(32, **kwargs)


class TestAlignedRowSize:

    @pytest.mark.parametrize("row_bytes,expected", [(0, 0), (1, 256), (256, 256), (257, 512)])
    def test_rounds_up(self, row_bytes, expected):
        assert aligned_row_size(row_bytes) == expected

    def test_rejects_non_positive_alignment(self):
        with pytest.raises(ValueError, match="alignment"):
            aligned_row_size(10, 0)


class TestPadToCopyAlignment:

    def test_pads_to_multiple_of_four(self):
        assert pad_to_copy_alignment(b"\x01\x02\x03\x04\x05") == b"\x01\x02\x03\x04\x05\x00\x00\x00"

    def test_aligned_contents_unchanged(self):
        assert pad_to_copy_alignment(b"abcd") == b"abcd"

    def test_empty_contents_get_minimum_size(self):
        assert pad_to_copy_alignment(b"") == b"\x00\x00\x00\x00"

    def test_numpy_index_buffer(self):
        indices = np.array([0, 1, 2], dtype=np.uint16)
        padded = pad_to_copy_alignment(indices)
        assert len(padded) == 8
        assert np.frombuffer(padded[:6], dtype=np.uint16).tolist() == [0, 1, 2]
        assert padded[6:] == b"\x00\x00"
