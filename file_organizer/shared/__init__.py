"""
Shared utilities for the organizer.
"""

from .file_utils import (
    files_identical,
    format_bytes,
    setup_logging,
)

__all__ = [
    "files_identical",
    "format_bytes",
    "setup_logging",
]
