"""Glyph data model: pixel grids, binary format config and size arithmetic.

A ``Character`` stores its pixels in a flat, row-major ``bytearray`` (one byte per
pixel, 0 or 1) so that codec and sampler loops index ``row * width + col`` instead of
walking nested lists. ``GlyphConfig`` only describes how pixels are packed into bytes;
it has no effect on what a pixel means.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from romglyph.config import DEFAULT_HEIGHT, DEFAULT_WIDTH, MAX_GLYPH_SIZE, MIN_GLYPH_SIZE


class Padding(str, Enum):
    """Side of the packed row that receives the unused (zero) bits."""

    LEFT = "left"
    RIGHT = "right"


class BitDirection(str, Enum):
    """Whether the first scanned pixel lands in the most or least significant free bit."""

    LTR = "ltr"
    RTL = "rtl"


class ByteOrder(str, Enum):
    """Order of the bytes of one pixel row when a row spans several bytes."""

    BIG = "big"
    LITTLE = "little"


class Anchor(str, Enum):
    """Anchor point for resizing (3x3 grid: top/middle/bottom x left/center/right)."""

    TL = "tl"
    TC = "tc"
    TR = "tr"
    ML = "ml"
    MC = "mc"
    MR = "mr"
    BL = "bl"
    BC = "bc"
    BR = "br"


class GlyphConfig(BaseModel):
    """Binary format of a character set: glyph size plus bit packing rules."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    padding: Padding = Padding.RIGHT
    bit_direction: BitDirection = Field(default=BitDirection.LTR, alias="bitDirection")
    byte_order: ByteOrder = Field(default=ByteOrder.BIG, alias="byteOrder")

    @field_validator("width", "height")
    @classmethod
    def size_in_range(cls, v: int) -> int:
        if not MIN_GLYPH_SIZE <= v <= MAX_GLYPH_SIZE:
            msg = f"Glyph size must be between {MIN_GLYPH_SIZE} and {MAX_GLYPH_SIZE}, got {v}"
            raise ValueError(msg)
        return v

    def to_storage_dict(self) -> dict:
        """Dump to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def bytes_per_line(width: int) -> int:
    """Bytes needed for one packed pixel row: ceil(width / 8)."""
    return (width + 7) // 8


def bytes_per_character(config: GlyphConfig) -> int:
    """Bytes needed for one whole character block."""
    return bytes_per_line(config.width) * config.height


@dataclass
class Character:
    """A single monochrome glyph, ``True`` = foreground.

    ``pixels`` is a flat row-major buffer of ``width * height`` bytes holding 0 or 1.
    """

    width: int
    height: int
    pixels: bytearray = field(default=None)  # type: ignore[assignment]

    def __post_init__(self):
        size = self.width * self.height
        if self.pixels is None:
            self.pixels = bytearray(size)
        elif len(self.pixels) != size:
            msg = (
                f"Pixel buffer has {len(self.pixels)} entries, "
                f"expected {self.width}x{self.height}={size}"
            )
            raise ValueError(msg)
        else:
            self.pixels = bytearray(1 if p else 0 for p in self.pixels)

    @classmethod
    def empty(cls, width: int, height: int) -> Character:
        return cls(width, height)

    @classmethod
    def filled(cls, width: int, height: int) -> Character:
        return cls(width, height, bytearray(b"\x01" * (width * height)))

    @classmethod
    def from_rows(cls, rows: list) -> Character:
        """Build from nested rows of truthy values or from bitmap strings like "0110".

        Width is taken from the first row; every row must have the same length.
        """
        height = len(rows)
        width = len(rows[0]) if rows else 0
        flat = bytearray()
        for i, row in enumerate(rows):
            if len(row) != width:
                msg = f"Row {i} has length {len(row)}, expected {width}"
                raise ValueError(msg)
            if isinstance(row, str):
                flat.extend(1 if c == "1" else 0 for c in row)
            else:
                flat.extend(1 if p else 0 for p in row)
        return cls(width, height, flat)

    def get(self, row: int, col: int) -> bool:
        return self.pixels[row * self.width + col] == 1

    def set(self, row: int, col: int, value: bool) -> None:
        self.pixels[row * self.width + col] = 1 if value else 0

    def rows(self) -> list[list[bool]]:
        """Pixels as nested ``[row][col]`` lists."""
        w = self.width
        return [[p == 1 for p in self.pixels[r * w : (r + 1) * w]] for r in range(self.height)]

    def to_bitmap(self) -> list[str]:
        """Pixels as bitmap strings, e.g. ["010", "101"]."""
        w = self.width
        return [
            "".join("1" if p else "0" for p in self.pixels[r * w : (r + 1) * w])
            for r in range(self.height)
        ]

    def copy(self) -> Character:
        return Character(self.width, self.height, bytearray(self.pixels))

    def matches(self, config: GlyphConfig) -> bool:
        """True when this character has the dimensions ``config`` declares."""
        return self.width == config.width and self.height == config.height


def create_default_config() -> GlyphConfig:
    return GlyphConfig()


def resize_character(
    character: Character,
    width: int,
    height: int,
    anchor: Anchor | str = Anchor.TL,
) -> Character:
    """Resize a character, keeping its content pinned to ``anchor``.

    Pixels that fall outside the new size are dropped; new area is background.
    """
    anchor = Anchor(anchor)
    old_w, old_h = character.width, character.height

    horizontal = anchor.value[1]
    if horizontal == "l":
        offset_x = 0
    elif horizontal == "c":
        offset_x = (width - old_w) // 2
    else:
        offset_x = width - old_w

    vertical = anchor.value[0]
    if vertical == "t":
        offset_y = 0
    elif vertical == "m":
        offset_y = (height - old_h) // 2
    else:
        offset_y = height - old_h

    result = Character.empty(width, height)
    src = character.pixels
    dst = result.pixels
    for row in range(height):
        old_row = row - offset_y
        if not 0 <= old_row < old_h:
            continue
        for col in range(width):
            old_col = col - offset_x
            if 0 <= old_col < old_w:
                dst[row * width + col] = src[old_row * old_w + old_col]
    return result
