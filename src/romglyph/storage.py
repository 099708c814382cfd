"""Storage records for character sets: metadata + glyph config + base64 ROM data.

The record layout matches the editor's library format::

    {
      "metadata": {"id", "name", "description", "source", "manufacturer", "system",
                   "createdAt", "updatedAt", "isBuiltIn"},
      "config": {"width", "height", "padding", "bitDirection", "byteOrder"},
      "binaryData": "<standard base64>"
    }

Only the conversion lives here; where records are kept is up to the caller.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from romglyph.codec import (
    base64_to_binary,
    binary_to_base64,
    parse_character_rom,
    serialize_character_rom,
)
from romglyph.glyph import Character, GlyphConfig


def _now_ms() -> int:
    return int(time.time() * 1000)


class CharacterSetMetadata(BaseModel):
    """Descriptive information about a character set."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    source: str = "yourself"
    manufacturer: str = ""
    system: str = ""
    created_at: int = Field(default_factory=_now_ms, alias="createdAt")
    updated_at: int = Field(default_factory=_now_ms, alias="updatedAt")
    is_built_in: bool = Field(default=False, alias="isBuiltIn")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "Character set name must not be empty"
            raise ValueError(msg)
        return v

    def to_storage_dict(self) -> dict:
        """Dump to dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class CharacterSet:
    """A named set of equally sized characters plus its binary format."""

    metadata: CharacterSetMetadata
    config: GlyphConfig
    characters: list[Character] = field(default_factory=list)


def serialize_character_set(character_set: CharacterSet) -> dict:
    """Convert a character set into a JSON-ready storage record."""
    data = serialize_character_rom(character_set.characters, character_set.config)
    return {
        "metadata": character_set.metadata.to_storage_dict(),
        "config": character_set.config.to_storage_dict(),
        "binaryData": binary_to_base64(data),
    }


def deserialize_character_set(record: dict) -> CharacterSet:
    """Rebuild a character set from a storage record.

    Raises ValueError when required keys are missing or values are invalid.
    """
    if not isinstance(record, dict):
        msg = f"Storage record must be an object, got {type(record).__name__}"
        raise ValueError(msg)

    for key in ("metadata", "config", "binaryData"):
        if key not in record:
            msg = f"Storage record is missing '{key}'"
            raise ValueError(msg)

    if not isinstance(record["binaryData"], str):
        msg = "Storage record field 'binaryData' must be a base64 string"
        raise ValueError(msg)

    try:
        metadata = CharacterSetMetadata.model_validate(record["metadata"])
        config = GlyphConfig.model_validate(record["config"])
    except ValidationError as e:
        msg = f"Invalid storage record: {e}"
        raise ValueError(msg) from e

    characters = parse_character_rom(base64_to_binary(record["binaryData"]), config)
    return CharacterSet(metadata=metadata, config=config, characters=characters)
