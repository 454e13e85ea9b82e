from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from image_format_converter.cli.console import ConsoleReporter, configure_logging, render_summary
from image_format_converter.core.config import build_config, load_config_file
from image_format_converter.core.converter import ImageFormatConverter
from image_format_converter.core.errors import ConfigError


@click.command()
@click.option("--src", "source_root", type=click.Path(path_type=Path), default=None, help="Source root to scan (default: src).")
@click.option("--dest", "dest_root", type=click.Path(path_type=Path), default=None, help="Destination root (default: dist).")
@click.option(
    "--format",
    "-f",
    "formats",
    multiple=True,
    help="Target format as NAME or NAME:QUALITY, repeatable (default: avif:80).",
)
@click.option("--compress-quality", type=int, default=None, help="Quality for the same-format compressed copy (default: 85).")
@click.option(
    "--keep-extension/--strip-extension",
    default=None,
    help="Keep the original extension in converted file names (photo.jpg.avif).",
)
@click.option("--jobs", "-j", "file_concurrency", type=click.IntRange(min=1), default=None, help="Files processed at once (default: 1).")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="JSON config file.")
@click.option("--fail-on-error", is_flag=True, help="Exit with status 1 when any job failed.")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging.")
@click.option("--quiet", "-q", is_flag=True, help="Only print errors and the summary.")
@click.pass_context
def main(
    ctx: click.Context,
    source_root: Path | None,
    dest_root: Path | None,
    formats: tuple[str, ...],
    compress_quality: int | None,
    keep_extension: bool | None,
    file_concurrency: int | None,
    config_path: Path | None,
    fail_on_error: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Convert JPEG/PNG images to modern formats and write compressed copies."""
    console = Console(highlight=False)
    configure_logging(verbose=verbose, quiet=quiet, console=console)

    try:
        file_options = load_config_file(config_path) if config_path else None
        config = build_config(
            file_options,
            formats=formats,
            source_root=source_root,
            dest_root=dest_root,
            keep_extension=keep_extension,
            compress_quality=compress_quality,
            file_concurrency=file_concurrency,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    converter = ImageFormatConverter(config, on_event=ConsoleReporter(console, quiet=quiet))
    report = converter.report
    render_summary(report, console)

    if fail_on_error and report.failed_jobs:
        ctx.exit(1)
