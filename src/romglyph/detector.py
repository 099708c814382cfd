"""Suggest glyph grid geometries from raw image dimensions.

Detection strategy: try every size in the COMMON_GLYPH_SIZES catalog, count how many
whole cells fit, and rank by how close the resulting character count is to a
well-known ROM size (PREFERRED_CHARACTER_COUNTS). Nothing here looks at pixel content;
the result is a hint for the caller and never feeds sample_raster on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from romglyph.config import COMMON_GLYPH_SIZES, PREFERRED_CHARACTER_COUNTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridSuggestion:
    """A candidate glyph size and the grid it implies."""

    width: int
    height: int
    columns: int
    rows: int

    @property
    def total(self) -> int:
        return self.columns * self.rows


def count_distance(total: int) -> int:
    """Distance from ``total`` to the nearest preferred character count (0 = exact)."""
    return min(abs(total - preferred) for preferred in PREFERRED_CHARACTER_COUNTS)


def detect_character_dimensions(image_width: int, image_height: int) -> list[GridSuggestion]:
    """Return ranked grid suggestions for an image of the given size.

    Catalog sizes that fit at least one whole cell are ranked by ``count_distance``
    (exact matches first, ties in catalog order). An 8x8 suggestion and a
    single-character suggestion covering the whole image are always appended when not
    already present, so the list is never empty.
    """
    candidates: list[GridSuggestion] = []
    for w, h in COMMON_GLYPH_SIZES:
        columns = max(0, image_width) // w
        rows = max(0, image_height) // h
        if columns > 0 and rows > 0:
            candidates.append(GridSuggestion(w, h, columns, rows))

    suggestions = sorted(candidates, key=lambda s: count_distance(s.total))

    if not any(s.width == 8 and s.height == 8 for s in suggestions):
        suggestions.append(
            GridSuggestion(8, 8, max(0, image_width) // 8, max(0, image_height) // 8)
        )

    whole = GridSuggestion(image_width, image_height, 1, 1)
    if whole not in suggestions:
        suggestions.append(whole)

    best = suggestions[0]
    logger.debug(
        "Best grid for %dx%d: %dx%d glyphs, %dx%d cells",
        image_width,
        image_height,
        best.width,
        best.height,
        best.columns,
        best.rows,
    )
    return suggestions
