"""Tests for raster sampling."""

import pytest

from romglyph.raster_io import Raster, raster_from_image
from romglyph.sampler import (
    RasterSampleOptions,
    ReadingOrder,
    brightness_plane,
    cell_origins,
    grid_geometry,
    sample_raster,
)


def _lit_rows(character):
    return sum(1 for row in character.to_bitmap() if row == "1" * character.width)


class TestBrightness:
    def test_luma_weights(self):
        assert brightness_plane(Raster.solid(1, 1, (255, 0, 0))) == [76]
        assert brightness_plane(Raster.solid(1, 1, (0, 255, 0))) == [150]
        assert brightness_plane(Raster.solid(1, 1, (0, 0, 255))) == [29]

    def test_transparent_is_white(self):
        assert brightness_plane(Raster.solid(2, 1, (0, 0, 0), alpha=0)) == [255, 255]

    def test_gray(self):
        assert brightness_plane(Raster.solid(1, 1, (127, 127, 127))) == [127]


class TestGridGeometry:
    def test_default_sheet(self):
        assert grid_geometry(128, 64, RasterSampleOptions()) == (16, 8)

    def test_partial_cells_ignored(self):
        assert grid_geometry(130, 70, RasterSampleOptions()) == (16, 8)

    def test_offset(self):
        options = RasterSampleOptions(offset_x=4, offset_y=8)
        assert grid_geometry(128, 64, options) == (15, 7)

    def test_gap_needs_no_trailing_gap(self):
        options = RasterSampleOptions(gap_x=4, gap_y=2)
        assert grid_geometry(20, 18, options) == (2, 2)

    def test_pixel_scale(self):
        options = RasterSampleOptions(pixel_width=2, pixel_height=3)
        assert grid_geometry(32, 48, options) == (2, 2)

    def test_forced_counts(self):
        options = RasterSampleOptions(force_columns=3, force_rows=20)
        assert grid_geometry(128, 64, options) == (3, 20)

    @pytest.mark.parametrize("size", [0, -8])
    def test_non_positive_glyph_size(self, size):
        options = RasterSampleOptions(char_width=size, char_height=size, force_columns=4)
        assert grid_geometry(128, 64, options) == (0, 0)

    def test_image_smaller_than_cell(self):
        assert grid_geometry(4, 4, RasterSampleOptions()) == (0, 0)

    def test_offset_beyond_image(self):
        assert grid_geometry(16, 16, RasterSampleOptions(offset_x=40)) == (0, 2)


class TestCellOrigins:
    def test_row_major_with_gaps(self):
        options = RasterSampleOptions(gap_x=2, gap_y=1, offset_x=1)
        assert list(cell_origins(2, 2, options)) == [(1, 0), (11, 0), (1, 9), (11, 9)]

    def test_column_major(self):
        options = RasterSampleOptions(reading_order=ReadingOrder.TTB_LTR)
        assert list(cell_origins(2, 2, options)) == [(0, 0), (0, 8), (8, 0), (8, 8)]

    def test_reversed(self):
        options = RasterSampleOptions(reading_order="rtl-btt")
        assert list(cell_origins(2, 2, options)) == [(8, 8), (0, 8), (8, 0), (0, 0)]


class TestThreshold:
    def test_gray_above_threshold_is_off(self):
        raster = Raster.solid(8, 8, (127, 127, 127))
        result = sample_raster(raster, RasterSampleOptions(threshold=100))
        assert len(result.characters) == 1
        assert not any(result.characters[0].pixels)

    def test_gray_below_threshold_is_on(self):
        raster = Raster.solid(8, 8, (127, 127, 127))
        result = sample_raster(raster, RasterSampleOptions(threshold=150))
        assert all(result.characters[0].pixels)

    def test_equal_to_threshold_is_off(self):
        raster = Raster.solid(8, 8, (128, 128, 128))
        result = sample_raster(raster, RasterSampleOptions(threshold=128))
        assert not any(result.characters[0].pixels)

    def test_invert(self):
        raster = Raster.solid(8, 8)
        result = sample_raster(raster, RasterSampleOptions(invert=True))
        assert all(result.characters[0].pixels)

    def test_transparent_black_is_background(self):
        raster = Raster.solid(8, 8, (0, 0, 0), alpha=0)
        result = sample_raster(raster, RasterSampleOptions())
        assert not any(result.characters[0].pixels)


class TestSampleRaster:
    def test_blank_sheet(self):
        result = sample_raster(Raster.solid(128, 64), RasterSampleOptions())
        assert (result.columns, result.rows) == (16, 8)
        assert (result.image_width, result.image_height) == (128, 64)
        assert len(result.characters) == 128
        assert all(c.width == 8 and c.height == 8 for c in result.characters)
        assert not any(any(c.pixels) for c in result.characters)

    def test_two_cells(self, checkerboard_raster):
        result = sample_raster(checkerboard_raster, RasterSampleOptions())
        assert len(result.characters) == 2
        assert all(result.characters[0].pixels)
        assert not any(result.characters[1].pixels)

    def test_row_major_order(self, sheet_image):
        result = sample_raster(raster_from_image(sheet_image), RasterSampleOptions())
        assert [_lit_rows(c) for c in result.characters[:10]] == [0, 1, 2, 3, 4, 5, 6, 7, 0, 1]

    def test_column_major_order(self, sheet_image):
        options = RasterSampleOptions(reading_order=ReadingOrder.TTB_LTR)
        result = sample_raster(raster_from_image(sheet_image), options)
        assert [_lit_rows(c) for c in result.characters[:8]] == [0] * 8
        assert [_lit_rows(c) for c in result.characters[8:16]] == [1] * 8

    def test_right_to_left_order(self, checkerboard_raster):
        options = RasterSampleOptions(reading_order=ReadingOrder.RTL_TTB)
        result = sample_raster(checkerboard_raster, options)
        assert not any(result.characters[0].pixels)
        assert all(result.characters[1].pixels)

    def test_max_characters_truncates(self, sheet_image):
        options = RasterSampleOptions(max_characters=5)
        result = sample_raster(raster_from_image(sheet_image), options)
        assert [_lit_rows(c) for c in result.characters] == [0, 1, 2, 3, 4]
        assert (result.columns, result.rows) == (16, 8)

    def test_no_limit(self):
        options = RasterSampleOptions(max_characters=None)
        result = sample_raster(Raster.solid(256, 128), options)
        assert len(result.characters) == 512

    def test_default_limit(self):
        result = sample_raster(Raster.solid(256, 128), RasterSampleOptions())
        assert len(result.characters) == 256

    def test_forced_columns_outside_image_are_blank(self, checkerboard_raster):
        options = RasterSampleOptions(force_columns=4)
        result = sample_raster(checkerboard_raster, options)
        assert len(result.characters) == 4
        assert all(result.characters[0].pixels)
        assert not any(any(c.pixels) for c in result.characters[1:])

    def test_offset_shifts_cells(self, checkerboard_raster):
        options = RasterSampleOptions(offset_x=4, force_columns=1)
        result = sample_raster(checkerboard_raster, options)
        assert result.characters[0].to_bitmap() == ["11110000"] * 8

    def test_pixel_scale_averages_blocks(self):
        raster = Raster.solid(16, 16, (0, 0, 0))
        options = RasterSampleOptions(pixel_width=2, pixel_height=2)
        result = sample_raster(raster, options)
        assert len(result.characters) == 1
        assert all(result.characters[0].pixels)

    def test_block_average_rounds_half_up(self):
        # one black and one white pixel average to 127.5 -> 128
        data = bytes((0, 0, 0, 255, 255, 255, 255, 255))
        raster = Raster(2, 1, data)
        base = {"char_width": 1, "char_height": 1, "pixel_width": 2}
        off = sample_raster(raster, RasterSampleOptions(threshold=128, **base))
        on = sample_raster(raster, RasterSampleOptions(threshold=129, **base))
        assert off.characters[0].to_bitmap() == ["0"]
        assert on.characters[0].to_bitmap() == ["1"]

    def test_empty_raster(self):
        result = sample_raster(Raster(0, 0, b""), RasterSampleOptions())
        assert result.characters == []
        assert (result.columns, result.rows) == (0, 0)

    def test_zero_glyph_size_yields_nothing(self):
        options = RasterSampleOptions(char_width=0, force_columns=2, force_rows=2)
        assert sample_raster(Raster.solid(64, 64), options).characters == []

    def test_rotation_grows_canvas(self):
        result = sample_raster(Raster.solid(64, 64), RasterSampleOptions(rotation=3.0))
        assert result.image_width > 64
        assert result.image_height > 64
        assert not any(any(c.pixels) for c in result.characters)
