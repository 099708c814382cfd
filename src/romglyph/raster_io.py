"""RGBA raster container and Pillow-backed image helpers.

The sampler works on plain ``Raster`` values (width, height, interleaved RGBA8 bytes),
the same shape any image decoder produces. Pillow is used only at the edges: decoding
files, rotating, and drawing the sampling grid for visual checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from romglyph.config import BACKGROUND_RGB, GRID_OVERLAY_COLOR

if TYPE_CHECKING:
    from romglyph.sampler import RasterSampleOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Raster:
    """Decoded image: ``width * height`` pixels of interleaved RGBA bytes."""

    width: int
    height: int
    data: bytes

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            msg = f"Raster size must not be negative, got {self.width}x{self.height}"
            raise ValueError(msg)
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            msg = f"Raster data has {len(self.data)} bytes, expected {expected}"
            raise ValueError(msg)
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def solid(
        cls,
        width: int,
        height: int,
        rgb: tuple[int, int, int] = BACKGROUND_RGB,
        alpha: int = 255,
    ) -> Raster:
        """A raster filled with a single color."""
        return cls(width, height, bytes((*rgb, alpha)) * (width * height))

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        i = (y * self.width + x) * 4
        r, g, b, a = self.data[i : i + 4]
        return (r, g, b, a)


def raster_from_image(img: Image.Image, flatten: bool = True) -> Raster:
    """Convert a PIL image to a Raster.

    With ``flatten`` the image is composited onto an opaque white background first,
    so partially transparent pixels blend toward white the way a browser canvas does.
    """
    rgba = img.convert("RGBA")
    if flatten:
        background = Image.new("RGBA", rgba.size, (*BACKGROUND_RGB, 255))
        rgba = Image.alpha_composite(background, rgba)
    return Raster(rgba.width, rgba.height, rgba.tobytes())


def raster_to_image(raster: Raster) -> Image.Image:
    """Convert a Raster back to an RGBA PIL image."""
    return Image.frombytes("RGBA", (raster.width, raster.height), raster.data)


def load_raster(path: str | Path, flatten: bool = True) -> Raster:
    """Decode an image file (PNG, JPEG, GIF, WebP, BMP, ...) into a Raster."""
    with Image.open(path) as img:
        img.load()
        raster = raster_from_image(img, flatten=flatten)
    logger.info("Loaded %s (%dx%d)", path, raster.width, raster.height)
    return raster


def rotate_raster(raster: Raster, degrees: float) -> Raster:
    """Rotate counter-clockwise by ``degrees``, growing the canvas to fit.

    Uncovered corners are filled with white. Transparency is flattened.
    """
    if degrees == 0 or raster.width == 0 or raster.height == 0:
        return raster

    flat = raster_from_image(raster_to_image(raster), flatten=True)
    rotated = (
        raster_to_image(flat)
        .convert("RGB")
        .rotate(
            degrees,
            resample=Image.Resampling.BILINEAR,
            expand=True,
            fillcolor=BACKGROUND_RGB,
        )
    )
    logger.debug(
        "Rotated raster by %.2f deg: %dx%d -> %dx%d",
        degrees,
        raster.width,
        raster.height,
        rotated.width,
        rotated.height,
    )
    return raster_from_image(rotated, flatten=False)


def grid_overlay(raster: Raster, options: RasterSampleOptions) -> Image.Image:
    """Draw the outline of every sampled cell over the raster.

    Uses the same geometry as ``sample_raster`` (offsets, gaps, pixel scale,
    forced rows/columns), so what is outlined is exactly what gets sampled.
    """
    from romglyph.sampler import cell_origins, grid_geometry

    if options.rotation:
        raster = rotate_raster(raster, options.rotation)

    if raster.width == 0 or raster.height == 0:
        return Image.new("RGBA", (raster.width, raster.height))

    base = raster_to_image(raster)
    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    columns, rows = grid_geometry(raster.width, raster.height, options)
    cell_w = options.char_width * max(1, options.pixel_width)
    cell_h = options.char_height * max(1, options.pixel_height)

    for x0, y0 in cell_origins(columns, rows, options):
        draw.rectangle((x0, y0, x0 + cell_w - 1, y0 + cell_h - 1), outline=GRID_OVERLAY_COLOR)

    return Image.alpha_composite(base, layer)
