"""Caller-side contract checks for glyph configs, character sets and storage records.

The codec and sampler never validate their inputs; these helpers are what callers run
first. Every check returns a list of issues (empty = valid) instead of raising.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from romglyph.codec import base64_to_binary
from romglyph.config import (
    BIT_DIRECTION_CHOICES,
    BYTE_ORDER_CHOICES,
    MAX_GLYPH_SIZE,
    MIN_GLYPH_SIZE,
    PADDING_CHOICES,
)
from romglyph.glyph import Character, GlyphConfig

REQUIRED_RECORD_FIELDS = ("metadata", "config", "binaryData")


def validate_config(data: dict[str, Any]) -> list[str]:
    """Check a raw (camelCase) glyph config dict."""
    issues: list[str] = []

    for name in ("width", "height"):
        value = data.get(name)
        if not isinstance(value, int) or isinstance(value, bool):
            issues.append(f"{name.capitalize()} must be an integer, got {value!r}")
        elif not MIN_GLYPH_SIZE <= value <= MAX_GLYPH_SIZE:
            issues.append(
                f"{name.capitalize()} must be between {MIN_GLYPH_SIZE} and "
                f"{MAX_GLYPH_SIZE} pixels, got {value}"
            )

    _check_choice(data, "padding", PADDING_CHOICES, issues)
    _check_choice(data, "bitDirection", BIT_DIRECTION_CHOICES, issues)
    if "byteOrder" in data:
        _check_choice(data, "byteOrder", BYTE_ORDER_CHOICES, issues)

    return issues


def validate_characters(characters: list[Character], config: GlyphConfig) -> list[str]:
    """Every character must have exactly the dimensions ``config`` declares."""
    issues: list[str] = []
    for i, character in enumerate(characters):
        if not character.matches(config):
            issues.append(
                f"Character {i}: size {character.width}x{character.height} "
                f"!= config {config.width}x{config.height}"
            )
    return issues


def validate_record(data: dict[str, Any]) -> list[str]:
    """Check a serialized character-set record (see ``romglyph.storage``)."""
    issues: list[str] = []

    for name in REQUIRED_RECORD_FIELDS:
        if name not in data:
            issues.append(f"Missing required field: '{name}'")

    config = data.get("config")
    if isinstance(config, dict):
        issues.extend(validate_config(config))
    elif config is not None:
        issues.append("Field 'config' must be an object")

    metadata = data.get("metadata")
    if isinstance(metadata, dict):
        name = metadata.get("name")
        if not isinstance(name, str) or not name.strip():
            issues.append("Metadata name must be a non-empty string")
    elif metadata is not None:
        issues.append("Field 'metadata' must be an object")

    binary = data.get("binaryData")
    if binary is not None and not isinstance(binary, str):
        issues.append("Field 'binaryData' must be a base64 string")
    elif isinstance(binary, str):
        try:
            base64_to_binary(binary)
        except ValueError as e:
            issues.append(f"Field 'binaryData' is not valid base64: {e}")

    return issues


def validate_file(path: str) -> list[str]:
    """Load a JSON record from file, then validate it."""
    filepath = Path(path)

    if not filepath.exists():
        return [f"File not found: {path}"]

    try:
        data = json.loads(filepath.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return [f"Invalid JSON: {e}"]

    if not isinstance(data, dict):
        return ["Root element must be a JSON object"]

    return validate_record(data)


def _check_choice(
    data: dict[str, Any], name: str, choices: tuple[str, ...], issues: list[str]
) -> None:
    value = data.get(name)
    if value not in choices:
        valid = ", ".join(f"'{c}'" for c in choices)
        issues.append(f"Field '{name}' must be one of {valid}, got {value!r}")
