"""Compact share strings for whole character sets.

Format (version 2)::

    "2:" + base64url(deflate_raw(payload)), without "=" padding

    payload = [width:1][height:1][flags:1][name UTF-8][0x00][description UTF-8][0x00]
              [ROM bytes]
    flags   = bit0 set for left padding, bit1 set for right-to-left bit direction

The ROM bytes are always packed big-endian; byte order is not part of the format.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
import zlib
from dataclasses import dataclass

from pydantic import ValidationError

from romglyph.codec import parse_character_rom, serialize_character_rom
from romglyph.config import (
    MAX_RECOMMENDED_URL_LENGTH,
    MAX_URL_LENGTH,
    SHARE_BASE_PATH,
    SHARE_VERSION_PREFIX,
)
from romglyph.glyph import BitDirection, ByteOrder, Character, GlyphConfig, Padding

logger = logging.getLogger(__name__)

FLAG_LEFT_PADDING = 0x01
FLAG_RTL = 0x02


@dataclass
class SharedCharacterSet:
    """Contents of a decoded share string."""

    name: str
    description: str
    characters: list[Character]
    config: GlyphConfig


def base64url_encode(data: bytes) -> str:
    """URL-safe base64 with the trailing padding stripped."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def base64url_decode(text: str) -> bytes:
    """Inverse of ``base64url_encode``; restores the padding before decoding."""
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded)


def compress_data(data: bytes) -> bytes:
    """Raw DEFLATE (no zlib header) at maximum compression."""
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def decompress_data(data: bytes) -> bytes:
    return zlib.decompress(data, -zlib.MAX_WBITS)


def encode_share(
    name: str,
    description: str,
    characters: list[Character],
    config: GlyphConfig,
) -> str:
    """Encode a character set as a share string."""
    big_endian = config.model_copy(update={"byte_order": ByteOrder.BIG})
    rom = serialize_character_rom(characters, big_endian)
    flags = 0
    if config.padding == Padding.LEFT:
        flags |= FLAG_LEFT_PADDING
    if config.bit_direction == BitDirection.RTL:
        flags |= FLAG_RTL

    payload = bytearray((config.width, config.height, flags))
    payload += name.encode("utf-8") + b"\x00"
    payload += description.encode("utf-8") + b"\x00"
    payload += rom

    encoded = SHARE_VERSION_PREFIX + base64url_encode(compress_data(bytes(payload)))
    logger.debug("Encoded %d character(s) into %d chars", len(characters), len(encoded))
    return encoded


def _decode_payload(encoded: str) -> SharedCharacterSet:
    if not encoded.startswith(SHARE_VERSION_PREFIX):
        msg = "Invalid share format: missing version prefix"
        raise ValueError(msg)

    data = decompress_data(base64url_decode(encoded[len(SHARE_VERSION_PREFIX) :]))
    if len(data) < 3:
        msg = "Invalid share format: header truncated"
        raise ValueError(msg)

    width, height, flags = data[0], data[1], data[2]

    name_end = data.find(b"\x00", 3)
    if name_end == -1:
        msg = "Invalid share format: name not terminated"
        raise ValueError(msg)
    desc_end = data.find(b"\x00", name_end + 1)
    if desc_end == -1:
        msg = "Invalid share format: description not terminated"
        raise ValueError(msg)

    config = GlyphConfig(
        width=width,
        height=height,
        padding=Padding.LEFT if flags & FLAG_LEFT_PADDING else Padding.RIGHT,
        bit_direction=BitDirection.RTL if flags & FLAG_RTL else BitDirection.LTR,
    )
    return SharedCharacterSet(
        name=data[3:name_end].decode("utf-8"),
        description=data[name_end + 1 : desc_end].decode("utf-8"),
        characters=parse_character_rom(data[desc_end + 1 :], config),
        config=config,
    )


def decode_share(encoded: str) -> SharedCharacterSet:
    """Decode a share string.

    Raises ValueError with a "Failed to decode shared character set" message for any
    malformed input.
    """
    try:
        return _decode_payload(encoded.strip())
    except (ValueError, binascii.Error, zlib.error, ValidationError) as e:
        msg = f"Failed to decode shared character set: {e}"
        raise ValueError(msg) from e


def create_share_url(encoded: str, origin: str = "") -> str:
    """Build a share URL carrying the encoded set in the fragment."""
    return f"{origin.rstrip('/')}{SHARE_BASE_PATH}#{encoded}"


def extract_from_url(url: str) -> str | None:
    """Return the share string from a URL fragment, or None when absent."""
    _, sep, fragment = url.partition("#")
    if not sep or not fragment.startswith(SHARE_VERSION_PREFIX):
        return None
    return fragment


def url_length_status(url: str) -> str:
    """Classify a URL length as "ok", "warning" (long) or "error" (too long)."""
    if len(url) > MAX_URL_LENGTH:
        return "error"
    if len(url) > MAX_RECOMMENDED_URL_LENGTH:
        return "warning"
    return "ok"


def estimate_share_length(character_count: int, width: int, height: int) -> int:
    """Conservative share URL length estimate, without encoding anything.

    Assumes a 50% DEFLATE ratio, ~50 bytes of name/description and the ~34% base64
    expansion.
    """
    total_bytes = character_count * math.ceil(width * height / 8)
    compressed = math.ceil((total_bytes + 3 + 50) * 0.5)
    encoded = math.ceil(compressed * 1.34) + len(SHARE_VERSION_PREFIX)
    return encoded + 50


def can_share(character_count: int, width: int, height: int) -> tuple[bool, str]:
    """Whether a set of this size fits in a share URL, with a status message."""
    estimated = estimate_share_length(character_count, width, height)
    if estimated <= MAX_RECOMMENDED_URL_LENGTH:
        return True, "Character set can be shared"
    if estimated <= MAX_URL_LENGTH:
        return True, "URL may be too long for some platforms. Consider reducing characters."
    return False, f"Character set is too large to share via URL (~{estimated} chars)"
