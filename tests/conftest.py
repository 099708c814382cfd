"""Shared fixtures for romglyph tests."""

import pytest
from PIL import Image

from romglyph.glyph import Character, GlyphConfig
from romglyph.raster_io import Raster

# -- Character fixtures -----------------------------------------------------


@pytest.fixture()
def letter_a():
    """An 8x8 "A" in the classic home-computer style."""
    return Character.from_rows(
        [
            "00011000",
            "00111100",
            "01100110",
            "01111110",
            "01100110",
            "01100110",
            "01100110",
            "00000000",
        ]
    )


@pytest.fixture()
def narrow_glyph():
    """A 5x7 glyph whose rows are not symmetric, so bit order mistakes show."""
    return Character.from_rows(
        [
            "11000",
            "10100",
            "10010",
            "10001",
            "10010",
            "10100",
            "11000",
        ]
    )


@pytest.fixture()
def default_config():
    return GlyphConfig()


# -- Raster fixtures --------------------------------------------------------


@pytest.fixture()
def checkerboard_raster():
    """A 16x8 raster of two 8x8 cells: the left cell black, the right cell white."""
    img = Image.new("RGBA", (16, 8), (255, 255, 255, 255))
    img.paste((0, 0, 0, 255), (0, 0, 8, 8))
    return Raster(img.width, img.height, img.tobytes())


@pytest.fixture()
def sheet_image():
    """A 128x64 RGB image: a 16x8 grid of 8x8 cells where cell i has i % 8 lit rows."""
    img = Image.new("RGB", (128, 64), (255, 255, 255))
    for index in range(128):
        col, row = index % 16, index // 16
        lit = index % 8
        if lit:
            img.paste((0, 0, 0), (col * 8, row * 8, col * 8 + 8, row * 8 + lit))
    return img


@pytest.fixture()
def sheet_path(tmp_path, sheet_image):
    path = tmp_path / "sheet.png"
    sheet_image.save(path)
    return path
