"""CLI entry point for romglyph - convert between character ROM dumps, images and text."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from romglyph.cli_helpers import (
    _build_glyph_config,
    _build_sample_options,
    _load_characters,
    _parse_indices,
    _print_write_summary,
    _split_glyph_kwargs,
    _split_sample_kwargs,
    _write_characters,
    shared_glyph_options,
    shared_sample_options,
)
from romglyph.config import ANCHOR_CHOICES

# -- CLI group --------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="romglyph")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Convert character generator ROM dumps to and from images, text and share strings."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


# -- detect ----------------------------------------------------------------------------


@cli.command()
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", type=click.IntRange(min=1), default=10, help="Max suggestions shown")
def detect(image_path, limit):
    """Suggest glyph sizes and grid layouts for an image."""
    from romglyph.detector import count_distance, detect_character_dimensions
    from romglyph.raster_io import load_raster

    try:
        raster = load_raster(image_path)
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"Image: {image_path} ({raster.width}x{raster.height})\n")
    for suggestion in detect_character_dimensions(raster.width, raster.height)[:limit]:
        marker = "*" if count_distance(suggestion.total) == 0 else " "
        click.echo(
            f"  {marker} {suggestion.width}x{suggestion.height} glyphs: "
            f"{suggestion.columns} columns x {suggestion.rows} rows = {suggestion.total}"
        )


# -- import-image ----------------------------------------------------------------------


@cli.command("import-image")
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), default=None, help="Output .bin or .json")
@click.option("--name", default=None, help="Character set name (JSON output)")
@click.option("--auto", is_flag=True, help="Use the best detected glyph size and grid")
@click.option("--preview/--no-preview", default=False, help="Show ASCII preview")
@shared_glyph_options()
@shared_sample_options
def import_image(image_path, **all_kwargs):
    """Extract characters from an image of a character sheet."""
    glyph_opts, rest = _split_glyph_kwargs(all_kwargs)
    sample_opts, cmd = _split_sample_kwargs(rest)

    from romglyph.detector import detect_character_dimensions
    from romglyph.raster_io import load_raster
    from romglyph.sampler import sample_raster
    from romglyph.utils import suggested_filename

    try:
        raster = load_raster(image_path)
        if cmd["auto"]:
            best = detect_character_dimensions(raster.width, raster.height)[0]
            glyph_opts.update(width=best.width, height=best.height)
            sample_opts.update(columns=best.columns, rows=best.rows)
            click.echo(f"Detected {best.width}x{best.height}, {best.columns}x{best.rows} grid")
        config = _build_glyph_config(glyph_opts)
        result = sample_raster(raster, _build_sample_options(sample_opts, config))
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if not result.characters:
        click.secho("No characters found with this grid layout", fg="yellow")
        sys.exit(1)

    name = cmd["name"] or Path(image_path).stem
    output = cmd["output"] or suggested_filename(name)
    size = _write_characters(result.characters, config, output, name)
    _print_write_summary(output, len(result.characters), config, size)
    click.echo(f"  Grid: {result.columns} columns x {result.rows} rows")

    if cmd["preview"]:
        from romglyph.preview import preview_sheet

        click.echo("\n" + preview_sheet(result.characters))


# -- import-text -----------------------------------------------------------------------


@cli.command("import-text")
@click.argument("text_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), required=True, help="Output .bin or .json")
@click.option("--name", default=None, help="Character set name (JSON output)")
@shared_glyph_options()
def import_text(text_path, output, name, **glyph_opts):
    """Parse byte values (0x3C, $3C, 0b00111100, 60) from source code or text."""
    from romglyph.text_import import parse_result_summary, parse_text_to_characters

    config = _build_glyph_config(glyph_opts)
    text = Path(text_path).read_text(encoding="utf-8", errors="replace")
    result = parse_text_to_characters(text, config)

    if result.error:
        click.secho(f"Error: {result.error}", fg="red", err=True)
        sys.exit(1)

    click.echo(parse_result_summary(result))
    if not result.characters:
        click.secho("Not enough bytes for a single character", fg="yellow")
        sys.exit(1)

    size = _write_characters(result.characters, config, output, name or Path(text_path).stem)
    _print_write_summary(output, len(result.characters), config, size)


# -- inspect ---------------------------------------------------------------------------


@cli.command()
@click.argument("rom_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--preview/--no-preview", default=False, help="Show all characters as a sheet")
@shared_glyph_options()
def inspect(rom_path, preview, **glyph_opts):
    """Show how a ROM dump decodes with a given glyph format."""
    from romglyph.codec import bit_layout, hex_preview
    from romglyph.glyph import bytes_per_character
    from romglyph.utils import format_file_size, format_size

    try:
        characters, config = _load_characters(rom_path, _build_glyph_config(glyph_opts))
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    file_size = Path(rom_path).stat().st_size
    click.echo(f"Inspecting: {rom_path} ({format_file_size(file_size)})\n")
    click.echo(f"  Glyph size:      {format_size(config)}")
    click.echo(f"  Bytes/character: {bytes_per_character(config)}")
    click.echo(f"  Characters:      {len(characters)}")

    if Path(rom_path).suffix.lower() != ".json":
        leftover = file_size - len(characters) * bytes_per_character(config)
        if leftover:
            click.secho(f"  Trailing bytes ignored: {leftover}", fg="yellow")

    if not characters:
        return

    layout = bit_layout(characters[0], config)
    click.echo(f"\n  First bytes:  {hex_preview(characters, config)}")
    click.echo(f"  Row 0 bits:   {layout['bits']}")
    click.echo(f"  Row 0 layout: {layout['padding']}")

    if preview:
        from romglyph.preview import preview_sheet

        click.echo("\n" + preview_sheet(characters))


# -- convert ---------------------------------------------------------------------------


@cli.command()
@click.argument("rom_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), required=True, help="Output .bin or .json")
@click.option(
    "--anchor",
    type=click.Choice(ANCHOR_CHOICES),
    default="tl",
    help="Where content stays when the glyph size changes",
)
@click.option("--name", default=None, help="Character set name (JSON output)")
@shared_glyph_options()
@shared_glyph_options("to")
def convert(rom_path, **all_kwargs):
    """Re-pack a ROM into another glyph format (size, padding, bit/byte order)."""
    source_opts, rest = _split_glyph_kwargs(all_kwargs)
    target_opts, cmd = _split_glyph_kwargs(rest, "to")

    from romglyph.glyph import resize_character

    try:
        characters, source = _load_characters(rom_path, _build_glyph_config(source_opts))
        target = _build_glyph_config(target_opts, "to", fallback=source)
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if (target.width, target.height) != (source.width, source.height):
        characters = [
            resize_character(c, target.width, target.height, cmd["anchor"]) for c in characters
        ]

    name = cmd["name"] or Path(rom_path).stem
    size = _write_characters(characters, target, cmd["output"], name)
    _print_write_summary(cmd["output"], len(characters), target, size)


# -- overlay ---------------------------------------------------------------------------


@cli.command()
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), required=True, help="Output PNG path")
@shared_glyph_options()
@shared_sample_options
def overlay(image_path, output, **all_kwargs):
    """Draw the sampling grid over an image to check offsets and gaps."""
    glyph_opts, sample_opts = _split_glyph_kwargs(all_kwargs)

    from romglyph.raster_io import grid_overlay, load_raster
    from romglyph.sampler import grid_geometry

    try:
        raster = load_raster(image_path)
        options = _build_sample_options(sample_opts, _build_glyph_config(glyph_opts))
        image = grid_overlay(raster, options)
        image.save(output, format="PNG")
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    columns, rows = grid_geometry(image.width, image.height, options)
    click.secho(f"Wrote {output}", fg="green")
    click.echo(f"  Grid: {columns} columns x {rows} rows")


# -- share / unshare -------------------------------------------------------------------


@cli.command()
@click.argument("rom_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", default=None, help="Character set name")
@click.option("--description", default="", help="Character set description")
@click.option("--origin", default="", help="Site origin for a full share URL")
@shared_glyph_options()
def share(rom_path, name, description, origin, **glyph_opts):
    """Encode a ROM as a compact share string."""
    from romglyph.sharing import create_share_url, encode_share, url_length_status

    try:
        characters, config = _load_characters(rom_path, _build_glyph_config(glyph_opts))
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    encoded = encode_share(name or Path(rom_path).stem, description, characters, config)
    click.echo(encoded)

    status = url_length_status(create_share_url(encoded, origin))
    if status == "warning":
        click.secho("URL may be too long for some platforms", fg="yellow", err=True)
    elif status == "error":
        click.secho("URL is too long to share reliably", fg="red", err=True)


@cli.command()
@click.argument("encoded")
@click.option("-o", "--output", type=click.Path(), required=True, help="Output .bin or .json")
def unshare(encoded, output):
    """Decode a share string (or a URL containing one) into a ROM."""
    from romglyph.sharing import decode_share, extract_from_url

    encoded = extract_from_url(encoded) or encoded
    try:
        shared = decode_share(encoded)
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"Name: {shared.name}")
    if shared.description:
        click.echo(f"Description: {shared.description}")
    size = _write_characters(
        shared.characters, shared.config, output, shared.name or "shared", shared.description
    )
    _print_write_summary(output, len(shared.characters), shared.config, size)


# -- preview ---------------------------------------------------------------------------


@cli.command("preview")
@click.argument("rom_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--chars", default=None, help="Character indices, e.g. '0,1,65-70'")
@click.option("--sheet", is_flag=True, help="Lay characters out in a grid")
@click.option("--columns", type=click.IntRange(min=1), default=16, help="Sheet columns")
@shared_glyph_options()
def preview_cmd(rom_path, chars, sheet, columns, **glyph_opts):
    """Show ASCII preview of the characters in a ROM dump or JSON record."""
    from romglyph.preview import preview_characters, preview_sheet

    try:
        characters, config = _load_characters(rom_path, _build_glyph_config(glyph_opts))
        indices = _parse_indices(chars)
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"ROM: {Path(rom_path).name} ({len(characters)} characters)\n")
    if sheet:
        selected = characters if indices is None else [
            characters[i] for i in indices if 0 <= i < len(characters)
        ]
        click.echo(preview_sheet(selected, columns))
    else:
        click.echo(preview_characters(characters, indices))


# -- validate --------------------------------------------------------------------------


@cli.command("validate")
@click.argument("json_path", type=click.Path(exists=True))
def validate_cmd(json_path):
    """Validate a character set JSON record."""
    from romglyph.validator import validate_file

    issues = validate_file(json_path)
    if not issues:
        click.secho(f"Validation passed: {json_path}", fg="green")
        return

    click.secho(f"Validation issues in {json_path} ({len(issues)}):", fg="yellow")
    for issue in issues:
        click.echo(f"  - {issue}")
    sys.exit(1)
