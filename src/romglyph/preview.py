"""ASCII art preview of characters."""

from __future__ import annotations

from romglyph.glyph import Character

FILLED = "█"
EMPTY = "·"


def render_rows(character: Character) -> list[str]:
    """Render each pixel row with █ for foreground and · for background."""
    return [
        "".join(FILLED if c == "1" else EMPTY for c in row) for row in character.to_bitmap()
    ]


def preview_character(character: Character, index: int) -> str:
    """Render a single character with a header line like "#65 (8×8)"."""
    lines = [f"#{index} ({character.width}×{character.height})"]
    lines.extend(render_rows(character))
    return "\n".join(lines)


def preview_characters(characters: list[Character], indices: list[int] | None = None) -> str:
    """Preview characters vertically, separated by blank lines.

    If indices is None, show all characters. Out-of-range indices are reported.
    """
    selected = range(len(characters)) if indices is None else indices

    sections: list[str] = []
    for i in selected:
        if not 0 <= i < len(characters):
            sections.append(f"#{i} (not found)")
            continue
        sections.append(preview_character(characters[i], i))

    return "\n\n".join(sections)


def preview_sheet(characters: list[Character], columns: int = 16) -> str:
    """Lay characters out side by side, ``columns`` per line of glyphs.

    Glyphs are separated by one blank column and glyph lines by one blank row.
    Glyphs shorter than the tallest one on their line are padded with empty rows.
    """
    if not characters or columns < 1:
        return ""

    blocks: list[str] = []
    for start in range(0, len(characters), columns):
        chunk = characters[start : start + columns]
        height = max(c.height for c in chunk)
        rendered = [
            render_rows(c) + [EMPTY * c.width] * (height - c.height) for c in chunk
        ]
        lines = [" ".join(rows[y] for rows in rendered) for y in range(height)]
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)
