"""
Classification of files into target directories.

A file lands in ``<extension>/<YYYY>/<MM>/<DD>/<size category>`` relative to
the organized root. Dates use the local calendar, so the same file can be
bucketed differently after the host timezone changes.
"""

from datetime import datetime
from pathlib import Path

from .types import SizeCategory, SizeThresholds, TargetSpec

NO_EXTENSION = "no_extension"


def classify_size(size_bytes: int, thresholds: SizeThresholds) -> SizeCategory:
    """
    Map a byte count to a size category.

    Args:
        size_bytes: File size in bytes
        thresholds: Bucket boundaries

    Returns:
        SMALL below ``small_max``, MEDIUM below ``medium_max``, LARGE otherwise
    """
    if size_bytes < thresholds.small_max:
        return SizeCategory.SMALL
    elif size_bytes < thresholds.medium_max:
        return SizeCategory.MEDIUM
    return SizeCategory.LARGE


def extension_segment(path: Path) -> str:
    """
    Get the extension directory name for a file.

    Only the last suffix counts (``a.tar.gz`` -> ``gz``). Dot files such as
    ``.bashrc`` and names ending in a bare dot have no extension.

    Args:
        path: File path

    Returns:
        Lowercased extension without the dot, or ``no_extension``
    """
    extension = path.suffix[1:].lower()
    return extension or NO_EXTENSION


def build_target_spec(
    extension: str, timestamp: float, size_category: SizeCategory
) -> TargetSpec:
    """
    Classify a file from its extension, timestamp and size category.

    Args:
        extension: Extension segment (see ``extension_segment``)
        timestamp: POSIX timestamp, bucketed in local time
        size_category: Size bucket

    Returns:
        Target specification
    """
    date = datetime.fromtimestamp(timestamp)
    return TargetSpec(
        extension=extension,
        year=date.year,
        month=date.month,
        day=date.day,
        size_category=SizeCategory(size_category),
    )


def build_relative_path(
    extension: str, timestamp: float, size_category: SizeCategory
) -> Path:
    """
    Build the target directory of a file relative to the organized root.

    Args:
        extension: Extension segment
        timestamp: POSIX timestamp
        size_category: Size bucket

    Returns:
        Relative directory, e.g. ``jpg/2023/06/15/small``
    """
    return build_target_spec(extension, timestamp, size_category).relative_path
