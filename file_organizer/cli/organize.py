"""
CLI command for organizing a directory.

Moves every file under SOURCE_DIRECTORY into
<extension>/<YYYY>/<MM>/<DD>/<small|medium|large>/ beneath it.
"""

import signal
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config import get_settings
from ..core.exceptions import OrganizerError
from ..core.types import RelocationResult, SizeThresholds, TimeAttribute
from ..organization import FileRelocator, RelocationOptions
from ..shared.file_utils import format_bytes, setup_logging

console = Console()

EXIT_CANCELLED = 130


@click.command()
@click.argument(
    "source_directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "-t",
    "--time",
    "time_attribute",
    type=click.Choice([attr.value for attr in TimeAttribute], case_sensitive=False),
    default=None,
    help="Time attribute to organize by (default: creation)",
)
@click.option(
    "--small",
    type=click.IntRange(min=0),
    default=None,
    help="Threshold for 'small' files in MB (default: 1)",
)
@click.option(
    "--medium",
    type=click.IntRange(min=0),
    default=None,
    help="Threshold for 'medium' files in MB (default: 10)",
)
@click.option(
    "-d",
    "--dry-run",
    is_flag=True,
    default=False,
    help="Perform a trial run with no changes made",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "-w",
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of worker threads (default: 1)",
)
@click.option(
    "--no-progress",
    is_flag=True,
    default=False,
    help="Disable the progress bar",
)
@click.version_option(__version__, prog_name="file-organizer")
def organize(
    source_directory: Path,
    time_attribute: Optional[str],
    small: Optional[int],
    medium: Optional[int],
    dry_run: bool,
    verbose: bool,
    workers: Optional[int],
    no_progress: bool,
) -> None:
    """
    Organize the files under SOURCE_DIRECTORY by extension, date and size.

    \b
    Examples:
        # Preview what would happen
        file-organizer --dry-run /path/to/source

        # Organize by modification time with custom size buckets
        file-organizer --time modification --small 2 --medium 20 /path/to/source

    \b
    Layout:
        <source>/<extension>/<YYYY>/<MM>/<DD>/<small|medium|large>/<file>

    \b
    Collisions:
        • Files identical to the one already at the target are left in place
        • Different files with the same name get a _1, _2, ... suffix

    Defaults can also be set with FILE_ORGANIZER_TIME_ATTRIBUTE,
    FILE_ORGANIZER_SMALL_MB, FILE_ORGANIZER_MEDIUM_MB and
    FILE_ORGANIZER_WORKERS.
    """
    setup_logging(verbose=verbose, dry_run=dry_run)

    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.UsageError(f"Invalid FILE_ORGANIZER_* environment: {e}")

    attribute = TimeAttribute(time_attribute or settings.time_attribute)
    small_mb = settings.small_mb if small is None else small
    medium_mb = settings.medium_mb if medium is None else medium

    try:
        thresholds = SizeThresholds.from_megabytes(small_mb, medium_mb)
    except ValidationError:
        raise click.UsageError(
            f"--small ({small_mb} MB) must be smaller than --medium ({medium_mb} MB)"
        )

    options = RelocationOptions(
        time_attribute=attribute,
        thresholds=thresholds,
        dry_run=dry_run,
        max_workers=workers or settings.workers,
        show_progress=not no_progress,
    )

    if verbose:
        _display_configuration(source_directory, options)

    if dry_run:
        console.print("\n[yellow]⚠ DRY RUN MODE - No files will be modified[/yellow]")

    cancel_event = threading.Event()
    relocator = FileRelocator(
        source_directory, options=options, cancel_event=cancel_event
    )

    try:
        with _cancel_on_signals(cancel_event):
            result = relocator.organize()
    except OrganizerError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    _display_result(result)

    if result.cancelled:
        sys.exit(EXIT_CANCELLED)
    if result.failed:
        sys.exit(1)


@contextmanager
def _cancel_on_signals(cancel_event: threading.Event) -> Iterator[None]:
    """Set ``cancel_event`` on SIGINT/SIGTERM while the block runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum: int, frame: object) -> None:
        console.print("\n[yellow]Cancelling after the files in progress...[/yellow]")
        cancel_event.set()

    previous = {
        signum: signal.signal(signum, handler)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield
    finally:
        for signum, old_handler in previous.items():
            signal.signal(signum, old_handler)


def _display_configuration(source_directory: Path, options: RelocationOptions) -> None:
    """Display run configuration."""
    thresholds = options.thresholds
    console.print("\n[cyan]Organization Configuration:[/cyan]")
    console.print(f"  Source: {source_directory}")
    console.print(f"  Dry run: {'YES' if options.dry_run else 'NO'}")
    console.print(f"  Time attribute: {options.time_attribute.value}")
    console.print(
        f"  Size thresholds: small < {format_bytes(thresholds.small_max)}, "
        f"medium < {format_bytes(thresholds.medium_max)}"
    )
    console.print(f"  Workers: {options.max_workers}")


def _display_result(result: RelocationResult) -> None:
    """Display organization result."""
    if result.cancelled:
        console.print("\n[yellow]⚠ Organization cancelled[/yellow]\n")
    else:
        console.print("\n[green]✓ Organization complete![/green]\n")

    table = Table(title="Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")

    moved_label = "Would move" if result.dry_run else "Moved"
    table.add_row("Total files", str(result.total_files))
    table.add_row(moved_label, str(result.moved))
    table.add_row("Skipped", str(result.skipped))
    table.add_row("Failed", str(result.failed))
    table.add_row("Fallback timestamps", str(result.degraded_timestamps))

    console.print(table)

    if result.dry_run:
        console.print("\n[yellow]This was a DRY RUN - no files were modified[/yellow]")
        console.print("Run without --dry-run to execute the organization.")

    if result.errors:
        console.print("\n[red]Errors:[/red]")
        for error in result.errors[:10]:
            console.print(f"  [red]• {error}[/red]")
        if len(result.errors) > 10:
            console.print(f"  [dim]... and {len(result.errors) - 10} more[/dim]")


if __name__ == "__main__":
    organize()
