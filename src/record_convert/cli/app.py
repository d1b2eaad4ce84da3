"""Typer-based command line interface for record_convert."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from ..config import AppConfig, load_config
from ..csv2json import (
    ConversionResult,
    RecordConverter,
    derive_output_path,
    records_from_id_map,
    records_from_payload,
    remap_fields,
    strip_byte_order_mark,
    to_json,
)
from ..domain.types import OutputFormat
from ..errors import MissingInputError, RecordConvertError
from ..repair import diagnose_text, parse_sanitized, sanitize

app = typer.Typer(help="Repair record-store JSON exports and convert them to and from CSV.")

MAX_COLUMNS_SHOWN = 10


def _configure_logging(verbose: bool) -> None:
    # Outcomes are echoed by the commands; log records only show with --verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load_app_config(config: Optional[Path]) -> AppConfig:
    if config is None:
        return AppConfig.default()
    try:
        return load_config(config)
    except RecordConvertError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command()
def convert(
    inputs: Optional[List[Path]] = typer.Argument(
        None,
        help="Input files (.json API exports or .csv tables).",
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML configuration file."),
    to: Optional[str] = typer.Option(
        None,
        "--to",
        "-t",
        help="Output format for JSON input (csv/json). Overrides config setting.",
    ),
    suffix: Optional[str] = typer.Option(
        None,
        "--suffix",
        help="Suffix inserted before the output extension, e.g. _readable.",
    ),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for output files."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log output."),
) -> None:
    """Convert JSON exports to CSV (or id-keyed JSON) and CSV tables to JSON."""

    _configure_logging(verbose)
    if not inputs:
        error = MissingInputError("Please provide an input file name as an argument")
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
        typer.secho("Usage: record-convert convert <input-file> [<input-file> ...]", err=True)
        raise typer.Exit(code=1)

    config_obj = _load_app_config(config)

    json_target = None
    if to:
        try:
            json_target = OutputFormat(to.lower())
        except ValueError:
            typer.secho(f"WARNING: Invalid output format '{to}', using config setting", fg=typer.colors.YELLOW)

    options = config_obj.convert_options(json_target=json_target, output_suffix=suffix, output_dir=output_dir)
    converter = RecordConverter(options)

    typer.echo("Converting record exports...")
    failed = False
    for path in inputs:
        typer.echo(f"\nProcessing: {path}")
        result = converter.convert_file(path)
        _describe_result(result)
        if not result.success and not result.skipped:
            failed = True

    if failed:
        typer.secho("\n✗ Conversion finished with errors", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho("\n✓ Conversion complete!", fg=typer.colors.GREEN)


@app.command()
def diagnose(
    file: Path = typer.Argument(..., help="JSON export to inspect."),
    position: Optional[int] = typer.Option(
        None,
        "--position",
        "-p",
        help="Character offset to inspect. Defaults to the parse-error offset.",
    ),
    context: int = typer.Option(200, "--context", help="Characters shown on each side of the offset."),
) -> None:
    """Sanitize a JSON export and show context around a parse failure."""

    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        typer.secho(f"Error: Cannot read {file}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    report = diagnose_text(strip_byte_order_mark(text), position=position, window=context)
    typer.echo(report.format())
    if not report.parsed:
        raise typer.Exit(code=1)


@app.command()
def remap(
    file: Path = typer.Argument(..., help="JSON file (API payload or id-keyed) to remap."),
    config: Path = typer.Option(..., "--config", "-c", help="YAML configuration with a 'remap' section."),
    suffix: str = typer.Option("_FIXED", "--suffix", help="Suffix inserted before the output extension."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log output."),
) -> None:
    """Rename and normalise record fields using the configured mapping."""

    _configure_logging(verbose)
    config_obj = _load_app_config(config)
    if not config_obj.remap.rename:
        typer.secho("No field mapping defined in remap.rename.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    try:
        text = strip_byte_order_mark(file.read_text(encoding=config_obj.defaults.encoding))
        typer.echo("Reading input file...")
        data = parse_sanitized(text, sanitize(text), source=str(file), window=config_obj.defaults.context_window)
        if isinstance(data, dict) and "records" in data:
            records = records_from_payload(data)
        else:
            records = records_from_id_map(data)
        typer.echo(f"Found {len(records)} records")

        result = remap_fields(records, config_obj.remap)
        for name in result.unmapped:
            typer.secho(f'  ⚠ Unmapped field: "{name}"', fg=typer.colors.YELLOW)

        output_path = derive_output_path(
            file, OutputFormat.JSON, suffix=suffix, output_dir=config_obj.output_directory
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        typer.echo("Writing fixed file...")
        output_path.write_text(to_json(result.records), encoding=config_obj.defaults.encoding)
    except (OSError, UnicodeDecodeError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except RecordConvertError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        context = getattr(e, "context", None)
        if context is not None:
            typer.echo(context.format(), err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ Fixed JSON written to: {output_path}", fg=typer.colors.GREEN)
    typer.secho(f"✓ Processed {len(result.records)} records", fg=typer.colors.GREEN)


def _describe_result(result: ConversionResult) -> None:
    if not result.success:
        for issue in result.errors:
            color = typer.colors.YELLOW if issue.warning else typer.colors.RED
            typer.secho(f"  ✗ {issue.message}", fg=color, err=True)
            if issue.detail:
                typer.echo(issue.detail, err=True)
        return

    typer.secho(
        f"  ✓ Converted {result.stats.total_records} records to {result.output_path}",
        fg=typer.colors.GREEN,
    )
    typer.secho(f"  ✓ IDs: {', '.join(result.record_ids[:3])}...", fg=typer.colors.GREEN)
    for warning in result.warnings:
        typer.secho(f"  ⚠ WARNING: {warning}", fg=typer.colors.YELLOW)

    if result.columns:
        typer.echo(f"\n  Found {len(result.columns)} columns:")
        for index, column in enumerate(result.columns[:MAX_COLUMNS_SHOWN], start=1):
            typer.echo(f"    {index}. {column}")
        if len(result.columns) > MAX_COLUMNS_SHOWN:
            typer.echo(f"    ... and {len(result.columns) - MAX_COLUMNS_SHOWN} more")


def main() -> None:
    app()


__all__ = ["app", "convert", "diagnose", "main", "remap"]
