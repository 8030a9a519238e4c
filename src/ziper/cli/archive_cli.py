"""Command-line interface for creating and listing ZIP archives."""

import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ziper.archive import ArchiveReader, ArchiveReport, create_archive
from ziper.core.config import load_settings
from ziper.core.errors import FatalArchiveError, SourceNotFoundError
from ziper.core.log import setup_logging
from ziper.core.utils import human_size, split_patterns


app = typer.Typer(help="A fast compression tool: pack a directory into a ZIP archive")
console = Console()


def _print_report(report: ArchiveReport) -> None:
    table = Table(title=f"Archive {escape(report.output)}")
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Files added", str(len(report.added)))
    table.add_row("Entries ignored", str(len(report.ignored)))
    table.add_row("Entries skipped", str(len(report.skipped)))
    table.add_row("Invalid patterns", str(len(report.rejected_patterns)))
    table.add_row("Bytes read", human_size(report.bytes_read))
    console.print(table)

    if report.skipped:
        skipped = Table(title="Skipped entries")
        skipped.add_column("Path")
        skipped.add_column("Reason", style="yellow")
        for item in report.skipped:
            skipped.add_row(escape(item.path), escape(item.reason))
        console.print(skipped)


@app.command("create")
def create(
    source: Path = typer.Argument(..., help="Source directory or file to compress"),
    output: Optional[Path] = typer.Argument(
        None, help="Output zip file path (defaults to the source name with a .zip suffix)"
    ),
    ignore: Optional[List[str]] = typer.Option(
        None, "--ignore", "-i", help="Patterns to ignore, comma-separated (e.g. \"node_modules,.git,*.zip\")"
    ),
    level: Optional[int] = typer.Option(None, "--level", "-l", min=0, max=9, help="Deflate compression level"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet mode: only errors are shown"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose mode: debug output and a summary"),
):
    """Compress a directory (or a single file) into a ZIP archive."""
    try:
        settings = load_settings(compress_level=level)
    except ValidationError as e:
        console.print(f"[bold red]Error:[/bold red] invalid configuration: {escape(str(e))}")
        raise typer.Exit(code=1)

    setup_logging(quiet=quiet, verbose=verbose, level=settings.log_level)

    try:
        report = create_archive(source, output, split_patterns(ignore), settings)
    except (SourceNotFoundError, FatalArchiveError):
        # Already logged where it happened
        raise typer.Exit(code=1)

    if verbose and not quiet:
        _print_report(report)


@app.command("list")
def list_entries(
    archive_path: Path = typer.Argument(..., help="Path to the archive zip file"),
    limit: int = typer.Option(0, "--limit", "-n", help="Number of entries to show (0 for all)"),
):
    """List the entries stored in an archive."""
    try:
        reader = ArchiveReader(str(archive_path))
        entries = reader.list_entries()
        stats = reader.get_archive_stats()
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    table = Table(title=f"Entries in {escape(archive_path.name)}")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Packed", justify="right", style="magenta")
    table.add_column("Mode", style="yellow")
    table.add_column("Modified", style="green")

    shown = entries[:limit] if limit > 0 else entries
    for entry in shown:
        table.add_row(
            escape(entry['name']),
            human_size(entry['size']),
            human_size(entry['compressed_size']),
            entry['permissions'],
            entry['modified'].strftime('%Y-%m-%d %H:%M'),
        )

    console.print(table)
    console.print(
        f"[bold]Entries:[/bold] {stats['entries']}  "
        f"[bold]Size:[/bold] {human_size(stats['total_size'])}  "
        f"[bold]Archive:[/bold] {human_size(stats['archive_size'])}"
    )

    if len(entries) > len(shown):
        console.print(f"\nShowing {len(shown)} of {len(entries)} entries. Use --limit to show more.")
