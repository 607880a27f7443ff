"""
Type definitions for the organizer.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MEGABYTE = 1024 * 1024
DEFAULT_SMALL_MAX = 1 * MEGABYTE
DEFAULT_MEDIUM_MAX = 10 * MEGABYTE


class TimeAttribute(str, Enum):
    """Filesystem timestamp used to date a file."""

    CREATION = "creation"
    MODIFICATION = "modification"
    ACCESS = "access"


class TimestampSource(str, Enum):
    """Where a resolved timestamp actually came from."""

    BIRTH = "birth"
    MODIFICATION = "modification"
    ACCESS = "access"
    NOW = "now"  # Wall clock substitute when stat failed


class SizeCategory(str, Enum):
    """Size bucket of a file."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class MoveStatus(str, Enum):
    """Outcome of relocating a single file."""

    MOVED = "moved"
    SKIPPED_IDENTICAL = "skipped_identical"
    SKIPPED_ALREADY_CORRECT = "skipped_already_correct"
    SKIPPED_MISSING = "skipped_missing"
    FAILED = "failed"


class SizeThresholds(BaseModel):
    """Upper bounds (exclusive, in bytes) of the small and medium buckets."""

    small_max: int = Field(
        default=DEFAULT_SMALL_MAX, ge=0, description="Files below this are small"
    )
    medium_max: int = Field(
        default=DEFAULT_MEDIUM_MAX, ge=0, description="Files below this are medium"
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "SizeThresholds":
        if self.small_max >= self.medium_max:
            raise ValueError(
                f"small threshold ({self.small_max} bytes) must be below "
                f"medium threshold ({self.medium_max} bytes)"
            )
        return self

    @classmethod
    def from_megabytes(cls, small_mb: int, medium_mb: int) -> "SizeThresholds":
        """
        Build thresholds from megabyte values.

        Args:
            small_mb: Small threshold in MB
            medium_mb: Medium threshold in MB

        Returns:
            Thresholds in bytes
        """
        return cls(small_max=small_mb * MEGABYTE, medium_max=medium_mb * MEGABYTE)


class FileRecord(BaseModel):
    """A file captured in the snapshot. Everything else is derived on demand."""

    path: Path

    model_config = ConfigDict(frozen=True)

    @property
    def extension(self) -> str:
        from .classification import extension_segment

        return extension_segment(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def size_bytes(self) -> int:
        return self.path.stat().st_size


class ResolvedTimestamp(BaseModel):
    """Timestamp chosen for a file, with the fallback that produced it."""

    timestamp: float = Field(description="POSIX timestamp in seconds")
    requested: TimeAttribute
    source: TimestampSource
    warning: Optional[str] = Field(
        default=None, description="Why a fallback was applied"
    )

    @property
    def degraded(self) -> bool:
        return self.warning is not None


class TargetSpec(BaseModel):
    """Classification of a file; folds into its target directory."""

    extension: str
    year: int
    month: int
    day: int
    size_category: SizeCategory

    model_config = ConfigDict(frozen=True)

    @property
    def relative_path(self) -> Path:
        """Path like ``jpg/2023/06/15/small``."""
        return Path(
            self.extension,
            f"{self.year:04d}",
            f"{self.month:02d}",
            f"{self.day:02d}",
            self.size_category.value,
        )


class MoveOutcome(BaseModel):
    """Result of relocating one file."""

    source: Path
    status: MoveStatus
    target: Optional[Path] = None
    reason: Optional[str] = None
    dry_run: bool = False
    timestamp_degraded: bool = False


class RelocationResult(BaseModel):
    """Result of a whole run."""

    total_files: int = 0
    dry_run: bool = False
    cancelled: bool = False
    outcomes: List[MoveOutcome] = Field(default_factory=list)

    def count(self, *statuses: MoveStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status in statuses)

    @property
    def moved(self) -> int:
        return self.count(MoveStatus.MOVED)

    @property
    def skipped(self) -> int:
        return self.count(
            MoveStatus.SKIPPED_IDENTICAL,
            MoveStatus.SKIPPED_ALREADY_CORRECT,
            MoveStatus.SKIPPED_MISSING,
        )

    @property
    def failed(self) -> int:
        return self.count(MoveStatus.FAILED)

    @property
    def degraded_timestamps(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.timestamp_degraded)

    @property
    def errors(self) -> List[str]:
        return [
            f"{outcome.source}: {outcome.reason}"
            for outcome in self.outcomes
            if outcome.status == MoveStatus.FAILED
        ]

    def outcome_for(self, source: Path) -> Optional[MoveOutcome]:
        for outcome in self.outcomes:
            if outcome.source == source:
                return outcome
        return None
