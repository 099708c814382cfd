"""Size formatting, filename suggestion and character comparison helpers."""

import re
from pathlib import PurePath

from romglyph.config import BINARY_EXTENSIONS, IMAGE_EXTENSIONS
from romglyph.glyph import Character, GlyphConfig


def format_size(config: GlyphConfig) -> str:
    """Glyph size as "WxH", e.g. "8x8"."""
    return f"{config.width}x{config.height}"


def parse_size(size: str) -> tuple[int, int] | None:
    """Parse "WxH" into ``(width, height)``; None when the string does not match."""
    match = re.fullmatch(r"(\d+)x(\d+)", size.strip().lower())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def format_file_size(size: int) -> str:
    """Human-readable byte count: "512 B", "2.0 KB", "1.5 MB"."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def suggested_filename(name: str, extension: str = ".bin") -> str:
    """Convert a display name to an export filename.

    "Commodore 64 Upper" -> "commodore-64-upper.bin"
    "!!!" -> "charset.bin"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    slug = slug.strip("-")
    return f"{slug or 'charset'}{extension}"


def is_binary_filename(filename: str) -> bool:
    """Known ROM dump extension, or no extension at all."""
    suffix = PurePath(filename).suffix.lower()
    return not suffix or suffix in BINARY_EXTENSIONS


def is_image_filename(filename: str) -> bool:
    return PurePath(filename).suffix.lower() in IMAGE_EXTENSIONS


def characters_equal(a: Character, b: Character) -> bool:
    """Same dimensions and same pixels."""
    return a.width == b.width and a.height == b.height and a.pixels == b.pixels


def changed_character_indices(source: list[Character], target: list[Character]) -> set[int]:
    """Indices where two character lists differ, including indices present in only one."""
    changed: set[int] = set()
    for i in range(max(len(source), len(target))):
        if i >= len(source) or i >= len(target) or not characters_equal(source[i], target[i]):
            changed.add(i)
    return changed
