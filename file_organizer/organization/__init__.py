"""
Organization module for relocating files.

This module moves files into an extension/date/size directory structure,
with dry-run mode, duplicate skipping and collision-safe renaming.
"""

from .collision import (
    CollisionAction,
    CollisionDecision,
    CollisionResolver,
    DirectoryLocks,
    PlannedTree,
)
from .relocator import FileRelocator, RelocationOptions
from .walker import snapshot_files

__all__ = [
    "CollisionAction",
    "CollisionDecision",
    "CollisionResolver",
    "DirectoryLocks",
    "PlannedTree",
    "FileRelocator",
    "RelocationOptions",
    "snapshot_files",
]
