"""Tests for organizer types."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from file_organizer.core.types import (
    MEGABYTE,
    FileRecord,
    MoveOutcome,
    MoveStatus,
    RelocationResult,
    ResolvedTimestamp,
    SizeThresholds,
    TimeAttribute,
    TimestampSource,
)


class TestSizeThresholds:
    """Test size threshold configuration."""

    def test_defaults(self):
        """Test default thresholds are 1 MB and 10 MB."""
        thresholds = SizeThresholds()

        assert thresholds.small_max == 1 * MEGABYTE
        assert thresholds.medium_max == 10 * MEGABYTE

    def test_from_megabytes(self):
        """Test building thresholds from megabytes."""
        thresholds = SizeThresholds.from_megabytes(2, 20)

        assert thresholds.small_max == 2 * 1024 * 1024
        assert thresholds.medium_max == 20 * 1024 * 1024

    def test_rejects_ill_ordered_thresholds(self):
        """Test small must be below medium."""
        with pytest.raises(ValidationError):
            SizeThresholds(small_max=10, medium_max=10)

        with pytest.raises(ValidationError):
            SizeThresholds.from_megabytes(20, 2)

    def test_rejects_negative(self):
        """Test thresholds cannot be negative."""
        with pytest.raises(ValidationError):
            SizeThresholds(small_max=-1, medium_max=10)

    def test_is_immutable(self):
        """Test thresholds cannot be changed after creation."""
        thresholds = SizeThresholds()

        with pytest.raises(ValidationError):
            thresholds.small_max = 5


class TestFileRecord:
    """Test snapshot file records."""

    def test_derived_attributes(self, tmp_path):
        """Test extension and size are read on demand."""
        path = tmp_path / "Report.PDF"
        path.write_bytes(b"x" * 42)

        record = FileRecord(path=path)

        assert record.extension == "pdf"
        assert record.size_bytes() == 42
        assert record.exists()

    def test_vanished_file(self, tmp_path):
        """Test a deleted file no longer exists and has no size."""
        path = tmp_path / "gone.txt"
        path.write_text("x")
        record = FileRecord(path=path)
        path.unlink()

        assert not record.exists()
        with pytest.raises(OSError):
            record.size_bytes()


class TestResolvedTimestamp:
    """Test resolved timestamp flags."""

    def test_degraded_when_warning_set(self):
        """Test a warning marks the timestamp as degraded."""
        exact = ResolvedTimestamp(
            timestamp=1.0,
            requested=TimeAttribute.MODIFICATION,
            source=TimestampSource.MODIFICATION,
        )
        fallback = exact.model_copy(update={"warning": "fell back"})

        assert not exact.degraded
        assert fallback.degraded


class TestRelocationResult:
    """Test run result counters."""

    def test_counters(self):
        """Test counts by outcome status."""
        result = RelocationResult(
            total_files=5,
            outcomes=[
                MoveOutcome(source=Path("a"), status=MoveStatus.MOVED),
                MoveOutcome(source=Path("b"), status=MoveStatus.SKIPPED_IDENTICAL),
                MoveOutcome(
                    source=Path("c"),
                    status=MoveStatus.SKIPPED_ALREADY_CORRECT,
                    timestamp_degraded=True,
                ),
                MoveOutcome(source=Path("d"), status=MoveStatus.SKIPPED_MISSING),
                MoveOutcome(
                    source=Path("e"), status=MoveStatus.FAILED, reason="disk full"
                ),
            ],
        )

        assert result.moved == 1
        assert result.skipped == 3
        assert result.failed == 1
        assert result.degraded_timestamps == 1
        assert result.errors == ["e: disk full"]

    def test_outcome_for(self):
        """Test looking up the outcome of a file."""
        outcome = MoveOutcome(source=Path("a"), status=MoveStatus.MOVED)
        result = RelocationResult(total_files=1, outcomes=[outcome])

        assert result.outcome_for(Path("a")) == outcome
        assert result.outcome_for(Path("b")) is None
