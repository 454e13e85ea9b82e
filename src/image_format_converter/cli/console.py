from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from image_format_converter.core.events import ConverterEvent, EventKind
from image_format_converter.core.models import RunReport, RunState


def configure_logging(verbose: bool = False, quiet: bool = False, console: Console | None = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def format_bytes(byte_count: int) -> str:
    units = ["B", "KB", "MB", "GB"]
    value = float(byte_count)
    unit_index = 0

    while abs(value) >= 1024 and unit_index < len(units) - 1:
        value /= 1024
        unit_index += 1

    return f"{value:.2f} {units[unit_index]}"


class ConsoleReporter:
    """Renders converter events as coloured status lines."""

    def __init__(self, console: Console | None = None, quiet: bool = False) -> None:
        self.console = console or Console(highlight=False)
        self.quiet = quiet

    def __call__(self, event: ConverterEvent) -> None:
        line = self.render(event)
        if line is not None:
            self.console.print(line)

    def render(self, event: ConverterEvent) -> str | None:
        source = escape(str(event.source)) if event.source is not None else ""
        dest = escape(str(event.dest)) if event.dest is not None else ""
        label = escape(event.format_label or "")
        detail = escape(event.detail or "")

        if event.kind is EventKind.JOB_FAILED:
            return f"[red]Error processing [blue]{source}[/blue] to [yellow]{label}[/yellow]\n{detail}[/red]"
        if event.kind is EventKind.DIRECTORY_FAILED:
            return f"[red]Failed to create directory [green]{dest}[/green]\n{detail}[/red]"
        if event.kind is EventKind.NO_INPUT_FILES:
            return "[red]No images found to convert or compress[/red]"
        if self.quiet:
            return None

        if event.kind is EventKind.CONVERTED:
            return f"Converted [blue]{source}[/blue] to [yellow]{label}[/yellow] [green]{dest}[/green]"
        if event.kind is EventKind.COMPRESSED:
            return (
                f"Compressed [blue]{source}[/blue] to [green]{dest}[/green] "
                f"with quality [yellow]{event.quality}[/yellow]"
            )
        if event.kind is EventKind.DIRECTORY_CREATED:
            return f"Created directory [green]{dest}[/green]"
        if event.kind is EventKind.FILE_STARTED:
            return f"[dim]\\[{detail}] Processing: {source}[/dim]"
        return None


def render_summary(report: RunReport, console: Console) -> None:
    if report.state is RunState.NO_INPUT_FILES:
        return

    table = Table(title="Summary", show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Files processed", str(report.total_files))
    table.add_row("Jobs", str(report.total_jobs))
    table.add_row("Succeeded", f"[green]{report.succeeded_jobs}[/green]")
    failed_style = "red" if report.failed_jobs else "green"
    table.add_row("Failed", f"[{failed_style}]{report.failed_jobs}[/{failed_style}]")
    table.add_row("Input size", format_bytes(report.input_total_bytes))
    table.add_row("Output size", format_bytes(report.output_total_bytes))
    table.add_row(
        "Saved",
        f"{format_bytes(report.bytes_saved)} ({report.compression_rate_percent:.1f}%)",
    )
    console.print(table)
