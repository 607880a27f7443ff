"""
Pytest configuration and fixtures for file_organizer tests.
"""

import hashlib
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import pytest

from file_organizer.core.metadata import MetadataResolver
from file_organizer.organization import FileRelocator, RelocationOptions

# Local noon, so the calendar date is the same in every timezone
JUNE_15_2023 = datetime(2023, 6, 15, 12, 0, 0).timestamp()
JULY_20_2023 = datetime(2023, 7, 20, 12, 0, 0).timestamp()


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Directory to be organized."""
    root = tmp_path / "source"
    root.mkdir()
    return root


@pytest.fixture
def make_file(source_root: Path) -> Callable[..., Path]:
    """Create a file under the source root with a fixed modification time."""

    def _make(
        relative: str, content: bytes = b"content", mtime: float = JUNE_15_2023
    ) -> Path:
        path = source_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def no_birthtime_resolver() -> MetadataResolver:
    """Resolver on a platform that never reports birth time."""
    return MetadataResolver(birthtime_probe=lambda path: None)


@pytest.fixture
def make_relocator(
    source_root: Path, no_birthtime_resolver: MetadataResolver
) -> Callable[..., FileRelocator]:
    """Build a relocator over the source root, dating files by mtime."""

    def _make(resolver: Optional[MetadataResolver] = None, **options) -> FileRelocator:
        options.setdefault("show_progress", False)
        return FileRelocator(
            source_root,
            options=RelocationOptions(**options),
            resolver=resolver or no_birthtime_resolver,
        )

    return _make


@pytest.fixture
def tree_listing() -> Callable[[Path], Dict[str, Tuple[int, str]]]:
    """Map every entry under a root to its size and SHA-256 (dirs included)."""

    def _listing(root: Path) -> Dict[str, Tuple[int, str]]:
        listing = {}
        for path in sorted(root.rglob("*")):
            relative = path.relative_to(root).as_posix()
            if path.is_dir():
                listing[relative] = (0, "<dir>")
            else:
                digest = hashlib.sha256(path.read_bytes()).hexdigest()
                listing[relative] = (path.stat().st_size, digest)
        return listing

    return _listing
