"""
File relocator for reorganizing a directory tree in place.

Moves every file under the source root into
``<extension>/<YYYY>/<MM>/<DD>/<size>/`` beneath the same root, with dry-run
support, duplicate skipping and collision-safe renaming.
"""

import errno
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)

from ..core.classification import build_relative_path, classify_size
from ..core.exceptions import SourceDirectoryError
from ..core.metadata import MetadataResolver
from ..core.types import (
    FileRecord,
    MoveOutcome,
    MoveStatus,
    RelocationResult,
    SizeThresholds,
    TimeAttribute,
)
from .collision import (
    CollisionAction,
    CollisionDecision,
    CollisionResolver,
    DirectoryLocks,
    PlannedTree,
)
from .walker import snapshot_files

logger = logging.getLogger(__name__)


class RelocationOptions(BaseModel):
    """Settings for one organization run."""

    time_attribute: TimeAttribute = Field(
        default=TimeAttribute.CREATION,
        description="Timestamp used to date files",
    )
    thresholds: SizeThresholds = Field(
        default_factory=SizeThresholds,
        description="Size bucket boundaries",
    )
    dry_run: bool = Field(
        default=False,
        description="Decide everything but leave the filesystem untouched",
    )
    max_workers: int = Field(default=1, ge=1, description="Worker threads")
    show_progress: bool = Field(default=True, description="Show a progress bar")

    model_config = ConfigDict(frozen=True)


class FileRelocator:
    """Organize the files under a directory by extension, date and size."""

    def __init__(
        self,
        source_root: Path,
        options: Optional[RelocationOptions] = None,
        resolver: Optional[MetadataResolver] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Initialize file relocator.

        Args:
            source_root: Directory to reorganize (also the destination root)
            options: Run options
            resolver: Timestamp resolver
            cancel_event: When set, no further files are started
        """
        self.source_root = Path(os.path.abspath(source_root))
        self.options = options or RelocationOptions()
        self.resolver = resolver or MetadataResolver()
        self.cancel_event = cancel_event or threading.Event()

        self._locks = DirectoryLocks()
        self._planned: Optional[PlannedTree] = (
            PlannedTree() if self.options.dry_run else None
        )
        self._planned_dirs: Set[Path] = set()
        self._planned_dirs_lock = threading.Lock()
        self.collisions = CollisionResolver(planned=self._planned)

    def organize(self) -> RelocationResult:
        """
        Snapshot the source tree, then relocate each file.

        Returns:
            Result with one outcome per processed file, in snapshot order

        Raises:
            SourceDirectoryError: If the source root is missing or not a directory
        """
        self._check_source_root()

        dry_run = self.options.dry_run
        logger.info(
            f"Starting organization of {self.source_root} "
            f"({'DRY RUN' if dry_run else 'LIVE'})"
        )

        files = snapshot_files(self.source_root)
        result = RelocationResult(total_files=len(files), dry_run=dry_run)
        outcomes: List[Optional[MoveOutcome]] = [None] * len(files)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeRemainingColumn(),
            disable=not self.options.show_progress,
        ) as progress:
            task = progress.add_task("Organizing files...", total=len(files))

            if self.options.max_workers > 1:
                logger.info(f"Using {self.options.max_workers} workers")
                with ThreadPoolExecutor(
                    max_workers=self.options.max_workers
                ) as executor:
                    future_to_index = {
                        executor.submit(self._relocate_unless_cancelled, path): index
                        for index, path in enumerate(files)
                    }
                    for future in as_completed(future_to_index):
                        outcomes[future_to_index[future]] = future.result()
                        progress.advance(task)
            else:
                for index, path in enumerate(files):
                    if self.cancel_event.is_set():
                        break
                    outcomes[index] = self.relocate(path)
                    progress.advance(task)

        result.outcomes = [outcome for outcome in outcomes if outcome is not None]
        # Only a run that left files unstarted counts as cancelled
        result.cancelled = len(result.outcomes) < len(files)

        if result.cancelled:
            logger.warning(
                f"Cancelled after {len(result.outcomes)} of {len(files)} files"
            )
        logger.info(
            f"Organization complete: {result.moved} moved, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
        return result

    def relocate(self, path: Path) -> MoveOutcome:
        """
        Relocate a single file.

        Errors are logged and reported as a FAILED outcome; they never
        propagate to the caller.

        Args:
            path: File from the snapshot

        Returns:
            Outcome for the file
        """
        path = Path(path)
        record = FileRecord(path=path)
        dry_run = self.options.dry_run

        if not record.exists():
            logger.debug(f"Skipping {path}: does not exist")
            return MoveOutcome(
                source=path, status=MoveStatus.SKIPPED_MISSING, dry_run=dry_run
            )

        degraded = False
        try:
            resolved = self.resolver.resolve(path, self.options.time_attribute)
            degraded = resolved.degraded

            size = self._size_of(record)
            size_category = classify_size(size, self.options.thresholds)
            target_dir = self.source_root / build_relative_path(
                record.extension, resolved.timestamp, size_category
            )

            self._ensure_directory(target_dir)

            with self._locks.for_directory(target_dir):
                decision = self.collisions.resolve(path, target_dir / path.name)
                outcome = self._commit(path, decision)

        except Exception as e:
            logger.error(f"Error processing {path}: {e}")
            outcome = MoveOutcome(
                source=path,
                status=MoveStatus.FAILED,
                reason=str(e),
                dry_run=dry_run,
            )

        if degraded:
            outcome = outcome.model_copy(update={"timestamp_degraded": True})
        return outcome

    def _relocate_unless_cancelled(self, path: Path) -> Optional[MoveOutcome]:
        if self.cancel_event.is_set():
            return None
        return self.relocate(path)

    def _check_source_root(self) -> None:
        if not self.source_root.exists():
            raise SourceDirectoryError(
                f"Source directory does not exist: {self.source_root}"
            )
        if not self.source_root.is_dir():
            raise SourceDirectoryError(
                f"Source path is not a directory: {self.source_root}"
            )

    def _size_of(self, record: FileRecord) -> int:
        try:
            return record.size_bytes()
        except OSError as e:
            logger.error(f"Unable to get file size for {record.path}: {e}")
            return 0

    def _ensure_directory(self, target_dir: Path) -> None:
        if self._planned is not None:
            with self._planned_dirs_lock:
                if target_dir in self._planned_dirs or target_dir.is_dir():
                    return
                self._check_planned_directory(self._planned, target_dir)
                self._planned_dirs.add(target_dir)
            logger.debug(f"[DRY RUN] Would create directory {target_dir}")
            return

        if not target_dir.is_dir():
            target_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory {target_dir}")

    def _check_planned_directory(
        self, planned: PlannedTree, target_dir: Path
    ) -> None:
        """Fail like ``mkdir`` when a file sits where a directory must go."""
        for directory in (target_dir, *target_dir.parents):
            if not planned.exists(directory):
                continue
            if not directory.is_dir():
                raise NotADirectoryError(
                    errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(directory)
                )
            return

    def _commit(self, path: Path, decision: CollisionDecision) -> MoveOutcome:
        dry_run = self.options.dry_run
        target = decision.target

        if decision.action == CollisionAction.SKIP_ALREADY_CORRECT:
            logger.debug(f"Skipping {path}: already in the correct location")
            return MoveOutcome(
                source=path,
                status=MoveStatus.SKIPPED_ALREADY_CORRECT,
                target=target,
                dry_run=dry_run,
            )

        if decision.action == CollisionAction.SKIP_IDENTICAL:
            logger.debug(f"Skipping {path}: matches the existing file {target}")
            return MoveOutcome(
                source=path,
                status=MoveStatus.SKIPPED_IDENTICAL,
                target=target,
                dry_run=dry_run,
            )

        if self._planned is not None:
            self._planned.record_move(path, target)
            logger.info(f"[DRY RUN] Would move {path} → {target}")
            return MoveOutcome(
                source=path, status=MoveStatus.MOVED, target=target, dry_run=True
            )

        try:
            path.rename(target)
        except FileNotFoundError:
            if not path.exists():
                logger.debug(f"Skipping {path}: vanished before it could be moved")
                return MoveOutcome(source=path, status=MoveStatus.SKIPPED_MISSING)
            raise

        logger.info(f"Moved {path} → {target}")
        return MoveOutcome(source=path, status=MoveStatus.MOVED, target=target)
