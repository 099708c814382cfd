"""Parse ROM byte values out of pasted source text.

Accepts the way byte tables are usually written in C, JavaScript or assembly listings:
hex (``0x3C``, ``$3C``), binary (``0b00111100``) and plain decimal (``60``). Anything
else between the values (commas, braces, comments, labels) is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from romglyph.codec import parse_character_rom
from romglyph.glyph import Character, GlyphConfig

TOKEN_PATTERN = re.compile(r"0x[0-9a-fA-F]{1,2}|\$[0-9a-fA-F]{1,2}|0b[01]{1,8}|\b\d{1,3}\b")

OUT_OF_RANGE_ERROR = "No valid byte values found (all values were out of range 0-255)"

FORMAT_NAMES = {
    "hex": "hexadecimal",
    "decimal": "decimal",
    "binary": "binary",
    "mixed": "mixed formats",
}


@dataclass
class TextParseResult:
    """Bytes and characters recovered from text, with a diagnostic summary."""

    data: bytes = b""
    characters: list[Character] = field(default_factory=list)
    config: GlyphConfig = field(default_factory=GlyphConfig)
    detected_format: str = "hex"
    invalid_count: int = 0
    error: str | None = None


def _token_format(token: str) -> str:
    lowered = token.lower()
    if lowered.startswith("0x") or token.startswith("$"):
        return "hex"
    if lowered.startswith("0b"):
        return "binary"
    return "decimal"


def _token_value(token: str) -> int | None:
    """Numeric value of a token, or None when it is not a byte (0-255)."""
    fmt = _token_format(token)
    if fmt == "hex":
        value = int(token[1:] if token.startswith("$") else token[2:], 16)
    elif fmt == "binary":
        value = int(token[2:], 2)
    else:
        value = int(token, 10)
    return value if 0 <= value <= 255 else None


def parse_text_to_bytes(text: str) -> tuple[list[int], str, int, str | None]:
    """Extract byte values from text.

    Returns ``(values, detected_format, invalid_count, error)``. ``detected_format``
    is "hex", "decimal", "binary" or "mixed"; ``error`` is None on success.
    """
    if not text.strip():
        return [], "hex", 0, "No input provided"

    tokens = TOKEN_PATTERN.findall(text)
    if not tokens:
        return [], "hex", 0, "No valid byte values found in input"

    values: list[int] = []
    invalid = 0
    counts = {"hex": 0, "decimal": 0, "binary": 0}
    for token in tokens:
        value = _token_value(token)
        if value is None:
            invalid += 1
            continue
        values.append(value)
        counts[_token_format(token)] += 1

    if not values:
        return [], "hex", invalid, OUT_OF_RANGE_ERROR

    used = [fmt for fmt, n in counts.items() if n > 0]
    detected = used[0] if len(used) == 1 else "mixed"
    return values, detected, invalid, None


def parse_text_to_characters(text: str, config: GlyphConfig) -> TextParseResult:
    """Extract byte values from text and decode them as characters of ``config``."""
    values, detected, invalid, error = parse_text_to_bytes(text)
    if error is not None:
        return TextParseResult(detected_format=detected, invalid_count=invalid, error=error)

    data = bytes(values)
    return TextParseResult(
        data=data,
        characters=parse_character_rom(data, config),
        config=config,
        detected_format=detected,
        invalid_count=invalid,
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def parse_result_summary(result: TextParseResult) -> str:
    """One-line human summary of a parse result."""
    if result.error:
        return result.error

    summary = f"{len(result.data)} bytes detected ({FORMAT_NAMES[result.detected_format]})"
    if result.characters:
        summary += f" -> {_plural(len(result.characters), 'character')}"
    if result.invalid_count:
        summary += f" ({_plural(result.invalid_count, 'invalid value')} skipped)"
    return summary
