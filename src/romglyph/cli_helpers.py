"""CLI helper functions, decorators, and option definitions for romglyph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from romglyph.config import (
    BIT_DIRECTION_CHOICES,
    BYTE_ORDER_CHOICES,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_CHARACTERS,
    DEFAULT_THRESHOLD,
    DEFAULT_WIDTH,
    MAX_GLYPH_SIZE,
    MAX_ROTATION,
    MIN_GLYPH_SIZE,
    PADDING_CHOICES,
    READING_ORDER_CHOICES,
)

if TYPE_CHECKING:
    from romglyph.glyph import Character, GlyphConfig
    from romglyph.sampler import RasterSampleOptions

# Names of the shared glyph options (without prefix)
_GLYPH_OPTION_NAMES = ("width", "height", "padding", "bit_direction", "byte_order")

# Names of the shared sampling options (used to split kwargs in commands)
_SAMPLE_OPTION_NAMES = (
    "offset_x",
    "offset_y",
    "gap_x",
    "gap_y",
    "columns",
    "rows",
    "threshold",
    "invert",
    "pixel_width",
    "pixel_height",
    "max_chars",
    "reading_order",
    "rotation",
)


def shared_glyph_options(prefix: str = ""):
    """Decorator factory adding glyph size and packing options.

    With ``prefix="to"`` the options become ``--to-width``, ``--to-padding`` ... and
    their values arrive as ``to_width``, ``to_padding`` ... A prefixed set has no
    defaults; unset values fall back to the unprefixed ones.
    """
    flag = f"--{prefix}-" if prefix else "--"
    dest = f"{prefix}_" if prefix else ""
    size = click.IntRange(MIN_GLYPH_SIZE, MAX_GLYPH_SIZE)
    target = " of the output" if prefix else ""

    def decorator(func):
        options = [
            click.option(
                f"{flag}width",
                f"{dest}width",
                type=size,
                default=None if prefix else DEFAULT_WIDTH,
                help=f"Glyph width in pixels{target}",
            ),
            click.option(
                f"{flag}height",
                f"{dest}height",
                type=size,
                default=None if prefix else DEFAULT_HEIGHT,
                help=f"Glyph height in pixels{target}",
            ),
            click.option(
                f"{flag}padding",
                f"{dest}padding",
                type=click.Choice(PADDING_CHOICES),
                default=None if prefix else "right",
                help=f"Side of the row that holds unused bits{target}",
            ),
            click.option(
                f"{flag}bit-direction",
                f"{dest}bit_direction",
                type=click.Choice(BIT_DIRECTION_CHOICES),
                default=None if prefix else "ltr",
                help=f"Bit order, ltr = first pixel in high bit{target}",
            ),
            click.option(
                f"{flag}byte-order",
                f"{dest}byte_order",
                type=click.Choice(BYTE_ORDER_CHOICES),
                default=None if prefix else "big",
                help=f"Byte order of rows wider than 8 pixels{target}",
            ),
        ]
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


def shared_sample_options(func):
    """Decorator that adds raster sampling options to a command."""
    options = [
        click.option("--offset-x", type=int, default=0, help="Grid start X in source pixels"),
        click.option("--offset-y", type=int, default=0, help="Grid start Y in source pixels"),
        click.option("--gap-x", type=int, default=0, help="Horizontal gap between cells"),
        click.option("--gap-y", type=int, default=0, help="Vertical gap between cells"),
        click.option("--columns", type=click.IntRange(min=0), default=0, help="Force columns"),
        click.option("--rows", type=click.IntRange(min=0), default=0, help="Force rows"),
        click.option(
            "--threshold",
            type=click.IntRange(0, 255),
            default=DEFAULT_THRESHOLD,
            help="Brightness below this is foreground (default: 128)",
        ),
        click.option("--invert", is_flag=True, help="Treat light pixels as foreground"),
        click.option(
            "--pixel-width",
            type=click.IntRange(1, 100),
            default=1,
            help="Source pixels averaged per glyph pixel, horizontally",
        ),
        click.option(
            "--pixel-height",
            type=click.IntRange(1, 100),
            default=1,
            help="Source pixels averaged per glyph pixel, vertically",
        ),
        click.option(
            "--max-chars",
            type=click.IntRange(min=0),
            default=DEFAULT_MAX_CHARACTERS,
            help="Maximum characters to import (0 = no limit)",
        ),
        click.option(
            "--reading-order",
            type=click.Choice(READING_ORDER_CHOICES),
            default="ltr-ttb",
            help="Order in which cells become characters",
        ),
        click.option(
            "--rotation",
            type=click.FloatRange(-MAX_ROTATION, MAX_ROTATION),
            default=0.0,
            help="Deskew the image by this many degrees first",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_glyph_config(opts: dict, prefix: str = "", fallback: GlyphConfig | None = None):
    """Build a GlyphConfig from CLI options, filling unset values from ``fallback``."""
    from romglyph.glyph import GlyphConfig

    dest = f"{prefix}_" if prefix else ""
    values = {name: opts.get(f"{dest}{name}") for name in _GLYPH_OPTION_NAMES}
    if fallback is not None:
        for name, value in values.items():
            if value is None:
                values[name] = getattr(fallback, name)
    return GlyphConfig(**values)


def _build_sample_options(opts: dict, config: GlyphConfig) -> RasterSampleOptions:
    """Convert CLI option dict into RasterSampleOptions for ``config``'s glyph size."""
    from romglyph.sampler import RasterSampleOptions, ReadingOrder

    return RasterSampleOptions(
        char_width=config.width,
        char_height=config.height,
        offset_x=opts["offset_x"],
        offset_y=opts["offset_y"],
        gap_x=opts["gap_x"],
        gap_y=opts["gap_y"],
        force_columns=opts["columns"],
        force_rows=opts["rows"],
        threshold=opts["threshold"],
        invert=opts["invert"],
        pixel_width=opts["pixel_width"],
        pixel_height=opts["pixel_height"],
        max_characters=opts["max_chars"] or None,
        reading_order=ReadingOrder(opts["reading_order"]),
        rotation=opts["rotation"],
    )


def _split_kwargs(all_kwargs: dict, names: tuple[str, ...]) -> tuple[dict, dict]:
    """Split kwargs into (named_opts, command_opts)."""
    named = {k: all_kwargs[k] for k in names if k in all_kwargs}
    cmd = {k: v for k, v in all_kwargs.items() if k not in names}
    return named, cmd


def _split_glyph_kwargs(all_kwargs: dict, prefix: str = "") -> tuple[dict, dict]:
    dest = f"{prefix}_" if prefix else ""
    return _split_kwargs(all_kwargs, tuple(f"{dest}{n}" for n in _GLYPH_OPTION_NAMES))


def _split_sample_kwargs(all_kwargs: dict) -> tuple[dict, dict]:
    return _split_kwargs(all_kwargs, _SAMPLE_OPTION_NAMES)


def _load_characters(path: str, config: GlyphConfig) -> tuple[list[Character], GlyphConfig]:
    """Read characters from a ROM dump, or from a JSON storage record.

    A JSON record carries its own config, which then replaces ``config``.
    """
    from romglyph.codec import parse_character_rom
    from romglyph.storage import deserialize_character_set

    filepath = Path(path)
    if filepath.suffix.lower() == ".json":
        record = json.loads(filepath.read_text(encoding="utf-8"))
        character_set = deserialize_character_set(record)
        return character_set.characters, character_set.config

    return parse_character_rom(filepath.read_bytes(), config), config


def _write_characters(
    characters: list[Character],
    config: GlyphConfig,
    output_path: str,
    name: str,
    description: str = "",
) -> int:
    """Write a ROM dump, or a JSON storage record when the path ends in .json.

    Returns the number of bytes written.
    """
    from romglyph.codec import serialize_character_rom
    from romglyph.storage import CharacterSet, CharacterSetMetadata, serialize_character_set

    filepath = Path(output_path)
    if filepath.suffix.lower() == ".json":
        character_set = CharacterSet(
            metadata=CharacterSetMetadata(name=name, description=description),
            config=config,
            characters=characters,
        )
        text = json.dumps(serialize_character_set(character_set), indent=2, ensure_ascii=False)
        filepath.write_text(text, encoding="utf-8")
        return len(text.encode("utf-8"))

    data = serialize_character_rom(characters, config)
    filepath.write_bytes(data)
    return len(data)


def _print_write_summary(output_path: str, count: int, config: GlyphConfig, size: int) -> None:
    """Print standard summary after writing characters."""
    from romglyph.utils import format_file_size, format_size

    click.secho(f"Wrote {output_path}", fg="green")
    click.echo(f"  Characters: {count} ({format_size(config)})")
    click.echo(
        f"  Format: padding={config.padding.value}, bit direction={config.bit_direction.value}, "
        f"byte order={config.byte_order.value}"
    )
    click.echo(f"  Size: {format_file_size(size)}")


def _parse_indices(raw: str | None) -> list[int] | None:
    """Parse "0,1,65" or "32-40" style index lists."""
    if not raw:
        return None
    indices: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, _, end = part.partition("-")
            indices.extend(range(int(start), int(end) + 1))
        else:
            indices.append(int(part))
    return indices
