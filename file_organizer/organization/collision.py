"""
Collision handling for target paths.

Decides what happens when a file's target path is already taken: skip it
when the contents match, otherwise pick the next free ``stem_N.ext`` name.
"""

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Set

from pydantic import BaseModel, ConfigDict

from ..core.exceptions import CollisionLimitError
from ..shared.file_utils import files_identical

logger = logging.getLogger(__name__)

DEFAULT_MAX_SUFFIX = 9999


class CollisionAction(str, Enum):
    """What to do with a file after collision checks."""

    PROCEED = "proceed"
    SKIP_IDENTICAL = "skip_identical"
    SKIP_ALREADY_CORRECT = "skip_already_correct"


class CollisionDecision(BaseModel):
    """Decision for one file and the path it refers to."""

    action: CollisionAction
    target: Path

    model_config = ConfigDict(frozen=True)


class PlannedTree:
    """
    Moves a dry run has decided on but not performed.

    Lets later decisions in the same dry run see the tree a live run would
    have produced by then, so both report the same suffixes and skips.
    """

    def __init__(self) -> None:
        self._placed: Dict[Path, Path] = {}  # target -> file holding the bytes
        self._vacated: Set[Path] = set()
        self._lock = threading.Lock()

    def exists(self, path: Path) -> bool:
        with self._lock:
            if path in self._placed:
                return True
            if path in self._vacated:
                return False
        return path.exists()

    def content_of(self, path: Path) -> Path:
        """Return the real file whose bytes would be found at ``path``."""
        with self._lock:
            return self._placed.get(path, path)

    def record_move(self, source: Path, target: Path) -> None:
        with self._lock:
            self._placed[target] = source
            self._vacated.discard(target)
            self._vacated.add(source)

    def __len__(self) -> int:
        return len(self._placed)


class DirectoryLocks:
    """One lock per target directory, created on first use."""

    def __init__(self) -> None:
        self._locks: Dict[Path, threading.Lock] = {}
        self._guard = threading.Lock()

    def for_directory(self, directory: Path) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(directory)
            if lock is None:
                lock = self._locks[directory] = threading.Lock()
            return lock


class CollisionResolver:
    """Resolve a file's final target path."""

    def __init__(
        self,
        planned: Optional[PlannedTree] = None,
        max_suffix: int = DEFAULT_MAX_SUFFIX,
    ):
        """
        Initialize collision resolver.

        Args:
            planned: Dry-run overlay consulted before the filesystem
            max_suffix: Highest ``_N`` suffix tried before giving up
        """
        self.planned = planned
        self.max_suffix = max_suffix

    def resolve(self, source: Path, candidate: Path) -> CollisionDecision:
        """
        Decide where ``source`` should go given its candidate target.

        Args:
            source: File being relocated
            candidate: Target path derived from its classification

        Returns:
            Decision with the final target path

        Raises:
            CollisionLimitError: If every suffix up to ``max_suffix`` is taken
            OSError: If the contents cannot be compared
        """
        if source == candidate:
            return CollisionDecision(
                action=CollisionAction.SKIP_ALREADY_CORRECT, target=candidate
            )

        if not self.exists(candidate):
            return CollisionDecision(action=CollisionAction.PROCEED, target=candidate)

        try:
            identical = files_identical(source, self._content_of(candidate))
        except FileNotFoundError:
            # Another worker may move a misfiled candidate out of this directory
            if self.exists(candidate):
                raise
            logger.debug(f"{candidate} was moved away, taking its place")
            return CollisionDecision(action=CollisionAction.PROCEED, target=candidate)

        if identical:
            return CollisionDecision(
                action=CollisionAction.SKIP_IDENTICAL, target=candidate
            )

        resolved = self.disambiguate(candidate)
        logger.debug(f"Name conflict for {candidate}, using {resolved.name}")
        return CollisionDecision(action=CollisionAction.PROCEED, target=resolved)

    def disambiguate(self, target: Path) -> Path:
        """
        Find the first free ``stem_N.ext`` name next to ``target``.

        Args:
            target: Path that is already taken

        Returns:
            Unused path with a numeric suffix
        """
        stem = target.stem
        suffix = target.suffix
        parent = target.parent

        for counter in range(1, self.max_suffix + 1):
            new_path = parent / f"{stem}_{counter}{suffix}"
            if not self.exists(new_path):
                return new_path

        raise CollisionLimitError(f"Too many naming conflicts for {target}")

    def exists(self, path: Path) -> bool:
        if self.planned is not None:
            return self.planned.exists(path)
        return path.exists()

    def _content_of(self, path: Path) -> Path:
        if self.planned is not None:
            return self.planned.content_of(path)
        return path
