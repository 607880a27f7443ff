"""
Snapshot of the files under a directory tree.

The whole listing is collected before anything is moved; renaming entries
while a walk is still iterating the same tree is not safe.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)


def snapshot_files(root: Path) -> Tuple[Path, ...]:
    """
    Collect every regular file beneath ``root``.

    Unreadable directories are skipped. Symbolic links are neither followed
    nor collected. Names are visited in sorted order, so the snapshot is
    stable for an unchanged tree.

    Args:
        root: Directory to scan

    Returns:
        Immutable sequence of file paths
    """
    root = Path(root)
    files: List[Path] = []

    def on_error(error: OSError) -> None:
        logger.warning(f"Skipping {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        current = Path(dirpath)

        for name in sorted(filenames):
            path = current / name
            try:
                mode = os.lstat(path).st_mode
            except OSError as e:
                logger.warning(f"Skipping {path}: {e}")
                continue

            if stat.S_ISREG(mode):
                files.append(path)

    logger.info(f"Collected {len(files)} files for processing")
    return tuple(files)
