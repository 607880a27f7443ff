"""
Core classification logic: types, timestamp resolution and target paths.
"""

from .classification import (
    NO_EXTENSION,
    build_relative_path,
    build_target_spec,
    classify_size,
    extension_segment,
)
from .exceptions import CollisionLimitError, OrganizerError, SourceDirectoryError
from .metadata import MetadataResolver, stat_birthtime
from .types import (
    FileRecord,
    MoveOutcome,
    MoveStatus,
    RelocationResult,
    ResolvedTimestamp,
    SizeCategory,
    SizeThresholds,
    TargetSpec,
    TimeAttribute,
    TimestampSource,
)

__all__ = [
    "NO_EXTENSION",
    "build_relative_path",
    "build_target_spec",
    "classify_size",
    "extension_segment",
    "CollisionLimitError",
    "OrganizerError",
    "SourceDirectoryError",
    "MetadataResolver",
    "stat_birthtime",
    "FileRecord",
    "MoveOutcome",
    "MoveStatus",
    "RelocationResult",
    "ResolvedTimestamp",
    "SizeCategory",
    "SizeThresholds",
    "TargetSpec",
    "TimeAttribute",
    "TimestampSource",
]
