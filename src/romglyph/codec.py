"""Bit-exact conversion between Character grids and packed ROM bytes.

Row layout: each pixel row is packed into ``bytes_per_line(width)`` bytes. The row's
bit stream is read most-significant bit of the first byte first. Padding bits (always
zero) occupy the start of that stream for ``Padding.LEFT`` and the end for
``Padding.RIGHT``. Within every byte, the data bits it carries are filled from the
most significant end (``BitDirection.LTR``) or the least significant end
(``BitDirection.RTL``) in left-to-right pixel order. ``ByteOrder.LITTLE`` finally
reverses the bytes of a multi-byte row.

Example for a 5-pixel row ``11000``, one byte, three padding bits:

- LTR, right padding: ``11000000``
- LTR, left padding:  ``00011000``
- RTL, right padding: ``00011000`` -> pixel 0 is bit 3, pixel 1 is bit 4
- RTL, left padding:  ``00000011``

Packing and unpacking are total: short input reads as zero bits and trailing partial
characters are dropped rather than reported.
"""

from __future__ import annotations

import base64
import binascii
import logging
from functools import lru_cache
from itertools import groupby

from romglyph.glyph import (
    BitDirection,
    ByteOrder,
    Character,
    GlyphConfig,
    Padding,
    bytes_per_character,
    bytes_per_line,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=64)
def _row_bit_slots(
    width: int,
    padding: Padding,
    bit_direction: BitDirection,
    byte_order: ByteOrder,
) -> tuple[tuple[int, int], ...]:
    """Return ``(byte_index, bit_mask)`` for every pixel column of a row.

    Byte indexes are relative to the start of the row.
    """
    bpl = bytes_per_line(width)
    padding_bits = bpl * 8 - width
    start = padding_bits if padding == Padding.LEFT else 0

    slots: list[tuple[int, int]] = []
    for byte_index, positions in groupby(range(start, start + width), key=lambda p: p // 8):
        bits = [7 - p % 8 for p in positions]
        if bit_direction == BitDirection.RTL:
            bits.reverse()
        if byte_order == ByteOrder.LITTLE:
            byte_index = bpl - 1 - byte_index
        slots.extend((byte_index, 1 << bit) for bit in bits)
    return tuple(slots)


def _slots_for(config: GlyphConfig) -> tuple[tuple[int, int], ...]:
    return _row_bit_slots(config.width, config.padding, config.bit_direction, config.byte_order)


def character_to_bytes(character: Character, config: GlyphConfig) -> bytes:
    """Pack one character into ``bytes_per_character(config)`` bytes.

    Pixels outside the character (when it is smaller than ``config``) pack as 0.
    """
    bpl = bytes_per_line(config.width)
    out = bytearray(bpl * config.height)
    slots = _slots_for(config)

    char_w = character.width
    rows = min(config.height, character.height)
    cols = min(config.width, char_w)
    pixels = character.pixels

    for row in range(rows):
        base = row * bpl
        src = row * char_w
        for col in range(cols):
            if pixels[src + col]:
                byte_index, mask = slots[col]
                out[base + byte_index] |= mask
    return bytes(out)


def bytes_to_character(data: bytes | bytearray | memoryview, config: GlyphConfig) -> Character:
    """Unpack one character block. Missing bytes read as zero."""
    width = config.width
    bpl = bytes_per_line(width)
    slots = _slots_for(config)
    size = len(data)

    pixels = bytearray(width * config.height)
    for row in range(config.height):
        base = row * bpl
        dst = row * width
        for col, (byte_index, mask) in enumerate(slots):
            index = base + byte_index
            if index < size and data[index] & mask:
                pixels[dst + col] = 1
    return Character(width, config.height, pixels)


def serialize_character_rom(characters: list[Character], config: GlyphConfig) -> bytes:
    """Concatenate the packed bytes of every character, in order."""
    return b"".join(character_to_bytes(c, config) for c in characters)


def parse_character_rom(
    data: bytes | bytearray | memoryview,
    config: GlyphConfig,
) -> list[Character]:
    """Split a ROM image into characters.

    A trailing chunk shorter than one character is dropped, so the result holds
    ``len(data) // bytes_per_character(config)`` characters.
    """
    view = memoryview(bytes(data))
    char_size = bytes_per_character(config)
    count = len(view) // char_size
    remainder = len(view) - count * char_size
    if remainder:
        logger.debug("Dropping %d trailing byte(s) of incomplete character", remainder)

    return [
        bytes_to_character(view[i * char_size : (i + 1) * char_size], config)
        for i in range(count)
    ]


def character_count(size: int, config: GlyphConfig) -> int:
    """Number of whole characters a ROM of ``size`` bytes holds."""
    return max(0, size) // bytes_per_character(config)


def binary_to_base64(data: bytes | bytearray) -> str:
    """Encode bytes as standard (RFC 4648, padded) base64."""
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_to_binary(text: str) -> bytes:
    """Decode standard padded base64; whitespace is ignored.

    Raises ValueError for characters outside the base64 alphabet or bad padding.
    """
    cleaned = "".join(text.split())
    try:
        return base64.b64decode(cleaned, validate=True)
    except binascii.Error as e:
        msg = f"Invalid base64 data: {e}"
        raise ValueError(msg) from e


def _format_hex(data: bytes | list[int]) -> str:
    return " ".join(f"{b:02X}" for b in data)


def hex_preview(characters: list[Character], config: GlyphConfig, max_bytes: int = 16) -> str:
    """Upper-case hex dump of the first ``max_bytes`` packed bytes, e.g. "3C 66 6E"."""
    out = bytearray()
    for character in characters:
        if len(out) >= max_bytes:
            break
        out.extend(character_to_bytes(character, config))
    return _format_hex(out[:max_bytes])


def bit_layout(character: Character, config: GlyphConfig, row: int = 0) -> dict[str, str]:
    """Describe how one pixel row is packed.

    Returns a dict with ``bits`` (binary digits of the row bytes), ``hex`` and
    ``padding`` (``P`` for padding bits and ``D`` for data bits, in stream order).
    """
    bpl = bytes_per_line(config.width)
    packed = character_to_bytes(character, config)
    row_bytes = packed[row * bpl : (row + 1) * bpl]

    padding_bits = bpl * 8 - config.width
    if config.padding == Padding.LEFT:
        mask = "P" * padding_bits + "D" * config.width
    else:
        mask = "D" * config.width + "P" * padding_bits

    return {
        "bits": "".join(f"{b:08b}" for b in row_bytes),
        "hex": _format_hex(row_bytes),
        "padding": mask,
    }
