"""
File utilities shared across the organizer.

Provides byte-for-byte comparison, formatting helpers and logging setup.
"""

import logging
from pathlib import Path

CHUNK_SIZE = 8192
SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def files_identical(first: Path, second: Path) -> bool:
    """
    Compare two files byte for byte.

    Sizes are compared first; contents are then read in chunks so large
    files are never loaded whole.

    Args:
        first: First file
        second: Second file

    Returns:
        True if both files have the same contents

    Raises:
        OSError: If either file cannot be read
    """
    if first.stat().st_size != second.stat().st_size:
        return False

    with open(first, "rb") as f1, open(second, "rb") as f2:
        while True:
            chunk1 = f1.read(CHUNK_SIZE)
            chunk2 = f2.read(CHUNK_SIZE)
            if chunk1 != chunk2:
                return False
            if not chunk1:
                return True


def format_bytes(size_bytes: int) -> str:
    """
    Format a size for display, e.g. "10 MB" or "1.50 KB".

    Whole amounts print without decimals so thresholds read as entered.
    """
    size = float(size_bytes)
    unit = SIZE_UNITS[0]
    for unit in SIZE_UNITS:
        if size < 1024 or unit == SIZE_UNITS[-1]:
            break
        size /= 1024

    if size.is_integer():
        return f"{int(size)} {unit}"
    return f"{size:.2f} {unit}"


def setup_logging(verbose: bool = False, dry_run: bool = False) -> int:
    """
    Configure root logging for one run.

    Verbose runs log every decision (DEBUG), dry runs log the planned moves
    (INFO), and live runs only report fallbacks and failures (WARNING).

    Args:
        verbose: Narrate every decision
        dry_run: Show the moves a dry run plans

    Returns:
        The logging level that was configured
    """
    if verbose:
        level = logging.DEBUG
    elif dry_run:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")
    return level
