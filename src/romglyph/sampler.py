"""Extract a grid of characters from an RGBA raster.

Each glyph pixel ("logical pixel") covers ``pixel_width x pixel_height`` source
pixels. Its perceived brightness (0.299R + 0.587G + 0.114B) is averaged over that
block, with fully transparent and out-of-bounds pixels counting as white. A logical
pixel is foreground when the average is strictly below ``threshold``; ``invert`` flips
the result.

Grid size, unless forced, is the number of cells that fit after the offset, where
consecutive cell origins are ``cell + gap`` apart and the last cell needs no trailing
gap::

    columns = (image_width - offset_x + gap_x) // (char_width * pixel_width + gap_x)

Sampling never raises for any geometry: impossible layouts produce zero characters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice
from typing import Iterator

from romglyph.config import (
    BACKGROUND_BRIGHTNESS,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_CHARACTERS,
    DEFAULT_THRESHOLD,
    DEFAULT_WIDTH,
    LUMA_B,
    LUMA_G,
    LUMA_R,
)
from romglyph.glyph import Character
from romglyph.raster_io import Raster, rotate_raster

logger = logging.getLogger(__name__)


class ReadingOrder(str, Enum):
    """Order in which grid cells become characters.

    The first part names the primary direction, the second the secondary one:
    ``ltr-ttb`` is row-major, left to right, rows top to bottom.
    """

    LTR_TTB = "ltr-ttb"
    RTL_TTB = "rtl-ttb"
    LTR_BTT = "ltr-btt"
    RTL_BTT = "rtl-btt"
    TTB_LTR = "ttb-ltr"
    TTB_RTL = "ttb-rtl"
    BTT_LTR = "btt-ltr"
    BTT_RTL = "btt-rtl"


@dataclass(frozen=True)
class RasterSampleOptions:
    """Grid geometry and rendering options for ``sample_raster``."""

    char_width: int = DEFAULT_WIDTH
    char_height: int = DEFAULT_HEIGHT
    offset_x: int = 0
    offset_y: int = 0
    gap_x: int = 0
    gap_y: int = 0
    force_columns: int = 0  # 0 = auto
    force_rows: int = 0  # 0 = auto
    threshold: int = DEFAULT_THRESHOLD
    invert: bool = False
    pixel_width: int = 1
    pixel_height: int = 1
    max_characters: int | None = DEFAULT_MAX_CHARACTERS  # None = no limit
    reading_order: ReadingOrder = ReadingOrder.LTR_TTB
    rotation: float = 0.0


@dataclass
class RasterSampleResult:
    """Characters extracted from a raster plus the grid that produced them."""

    characters: list[Character] = field(default_factory=list)
    columns: int = 0
    rows: int = 0
    image_width: int = 0
    image_height: int = 0


def _fit_cells(available: int, cell: int, gap: int) -> int:
    """How many cells of size ``cell`` spaced by ``gap`` fit in ``available`` pixels."""
    if cell <= 0:
        return 0
    stride = cell + gap
    if stride <= 0:
        return 0
    return max(0, (available + gap) // stride)


def _scale(options: RasterSampleOptions) -> tuple[int, int]:
    return max(1, options.pixel_width), max(1, options.pixel_height)


def grid_geometry(
    image_width: int,
    image_height: int,
    options: RasterSampleOptions,
) -> tuple[int, int]:
    """Return ``(columns, rows)`` for a raster of the given size.

    Forced counts win over the computed ones, except that a non-positive glyph
    dimension always yields zero along that axis.
    """
    pw, ph = _scale(options)
    cell_w = options.char_width * pw
    cell_h = options.char_height * ph

    if cell_w <= 0:
        columns = 0
    elif options.force_columns > 0:
        columns = options.force_columns
    else:
        columns = _fit_cells(image_width - options.offset_x, cell_w, options.gap_x)

    if cell_h <= 0:
        rows = 0
    elif options.force_rows > 0:
        rows = options.force_rows
    else:
        rows = _fit_cells(image_height - options.offset_y, cell_h, options.gap_y)

    return columns, rows


def _cell_sequence(columns: int, rows: int, order: ReadingOrder) -> Iterator[tuple[int, int]]:
    """Yield ``(col, row)`` grid positions in reading order."""
    value = order.value
    col_indices = range(columns) if "ltr" in value else range(columns - 1, -1, -1)
    row_indices = range(rows) if "ttb" in value else range(rows - 1, -1, -1)

    if value[:3] in ("ltr", "rtl"):
        for row in row_indices:
            for col in col_indices:
                yield col, row
    else:
        for col in col_indices:
            for row in row_indices:
                yield col, row


def cell_origins(
    columns: int,
    rows: int,
    options: RasterSampleOptions,
) -> Iterator[tuple[int, int]]:
    """Yield the source-pixel origin ``(x, y)`` of every cell, in reading order."""
    pw, ph = _scale(options)
    stride_x = options.char_width * pw + options.gap_x
    stride_y = options.char_height * ph + options.gap_y
    for col, row in _cell_sequence(columns, rows, ReadingOrder(options.reading_order)):
        yield options.offset_x + col * stride_x, options.offset_y + row * stride_y


def _round_half_up(total: int | float, count: int) -> int:
    return int(total / count + 0.5)


def brightness_plane(raster: Raster) -> list[int]:
    """Perceived brightness (0-255) of every pixel, row-major.

    Fully transparent pixels count as white.
    """
    data = raster.data
    return [
        BACKGROUND_BRIGHTNESS if a == 0 else int(LUMA_R * r + LUMA_G * g + LUMA_B * b + 0.5)
        for r, g, b, a in zip(data[0::4], data[1::4], data[2::4], data[3::4])
    ]


def _area_brightness(
    plane: list[int],
    image_width: int,
    image_height: int,
    start_x: int,
    start_y: int,
    pixel_width: int,
    pixel_height: int,
) -> int:
    """Average brightness of a source block; pixels outside the raster are white."""
    if pixel_width == 1 and pixel_height == 1:
        if 0 <= start_x < image_width and 0 <= start_y < image_height:
            return plane[start_y * image_width + start_x]
        return BACKGROUND_BRIGHTNESS

    total = 0
    for y in range(start_y, start_y + pixel_height):
        if not 0 <= y < image_height:
            total += BACKGROUND_BRIGHTNESS * pixel_width
            continue
        base = y * image_width
        for x in range(start_x, start_x + pixel_width):
            if 0 <= x < image_width:
                total += plane[base + x]
            else:
                total += BACKGROUND_BRIGHTNESS
    return _round_half_up(total, pixel_width * pixel_height)


def _extract_character(
    plane: list[int],
    image_width: int,
    image_height: int,
    start_x: int,
    start_y: int,
    options: RasterSampleOptions,
) -> Character:
    pw, ph = _scale(options)
    width, height = options.char_width, options.char_height
    threshold = options.threshold
    invert = options.invert

    pixels = bytearray(width * height)
    for y in range(height):
        src_y = start_y + y * ph
        base = y * width
        for x in range(width):
            brightness = _area_brightness(
                plane, image_width, image_height, start_x + x * pw, src_y, pw, ph
            )
            on = brightness < threshold
            if invert:
                on = not on
            if on:
                pixels[base + x] = 1
    return Character(width, height, pixels)


def sample_raster(raster: Raster, options: RasterSampleOptions) -> RasterSampleResult:
    """Extract characters from ``raster`` using the grid described by ``options``.

    Produces ``min(columns * rows, max_characters)`` characters in reading order
    (row-major by default); truncation drops characters from the end of that order.
    ``image_width``/``image_height`` describe the raster actually sampled, which is
    larger than the input when ``rotation`` is set.
    """
    if options.rotation:
        raster = rotate_raster(raster, options.rotation)

    columns, rows = grid_geometry(raster.width, raster.height, options)
    result = RasterSampleResult(
        columns=columns,
        rows=rows,
        image_width=raster.width,
        image_height=raster.height,
    )

    total = columns * rows
    if options.max_characters is not None:
        total = min(total, max(0, options.max_characters))
    if total == 0:
        logger.debug("No characters to sample (%dx%d grid)", columns, rows)
        return result

    plane = brightness_plane(raster)
    for start_x, start_y in islice(cell_origins(columns, rows, options), total):
        result.characters.append(
            _extract_character(plane, raster.width, raster.height, start_x, start_y, options)
        )

    logger.info(
        "Sampled %d character(s) from %dx%d raster (%d columns x %d rows)",
        len(result.characters),
        raster.width,
        raster.height,
        columns,
        rows,
    )
    return result
