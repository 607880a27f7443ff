"""
Timestamp resolution for files.

Resolves the creation, modification or access time of a file. Birth time is
not exposed on every platform/filesystem, so creation time goes through a
probe and falls back to the modification time. A failing stat degrades to
the current wall clock time. Resolution never raises.
"""

import ctypes
import logging
import os
import platform
import sys
import time
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from .types import ResolvedTimestamp, TimeAttribute, TimestampSource

logger = logging.getLogger(__name__)

BirthtimeProbe = Callable[[Path], Optional[float]]

AT_FDCWD = -100
STATX_BTIME = 0x800

# statx(2) syscall numbers for libcs without the statx() wrapper
STATX_SYSCALLS = {
    "x86_64": 332,
    "aarch64": 291,
    "riscv64": 291,
    "i686": 383,
    "armv7l": 397,
    "ppc64le": 383,
    "s390x": 379,
}


class _StatxTimestamp(ctypes.Structure):
    _fields_ = [
        ("tv_sec", ctypes.c_int64),
        ("tv_nsec", ctypes.c_uint32),
        ("_reserved", ctypes.c_int32),
    ]


class _Statx(ctypes.Structure):
    """``struct statx`` from <linux/stat.h>, padded past the kernel's 256 bytes."""

    _fields_ = [
        ("stx_mask", ctypes.c_uint32),
        ("stx_blksize", ctypes.c_uint32),
        ("stx_attributes", ctypes.c_uint64),
        ("stx_nlink", ctypes.c_uint32),
        ("stx_uid", ctypes.c_uint32),
        ("stx_gid", ctypes.c_uint32),
        ("stx_mode", ctypes.c_uint16),
        ("_spare0", ctypes.c_uint16),
        ("stx_ino", ctypes.c_uint64),
        ("stx_size", ctypes.c_uint64),
        ("stx_blocks", ctypes.c_uint64),
        ("stx_attributes_mask", ctypes.c_uint64),
        ("stx_atime", _StatxTimestamp),
        ("stx_btime", _StatxTimestamp),
        ("stx_ctime", _StatxTimestamp),
        ("stx_mtime", _StatxTimestamp),
        ("_spare", ctypes.c_uint64 * 24),
    ]


@lru_cache(maxsize=None)
def _libc_statx() -> Optional[Callable[..., int]]:
    """Return a ``statx(dirfd, path, flags, mask, buf)`` callable, or None."""
    try:
        libc = ctypes.CDLL(None, use_errno=True)
    except OSError:
        return None

    try:
        statx = libc.statx
    except AttributeError:
        number = STATX_SYSCALLS.get(platform.machine())
        if number is None:
            return None
        syscall = libc.syscall
        syscall.restype = ctypes.c_long

        def statx(dirfd, path, flags, mask, buf):
            return syscall(
                ctypes.c_long(number),
                ctypes.c_int(dirfd),
                ctypes.c_char_p(path),
                ctypes.c_int(flags),
                ctypes.c_uint(mask),
                buf,
            )

        return statx

    statx.argtypes = [
        ctypes.c_int,
        ctypes.c_char_p,
        ctypes.c_int,
        ctypes.c_uint,
        ctypes.POINTER(_Statx),
    ]
    statx.restype = ctypes.c_int
    return statx


def _statx_birthtime(path: Path) -> Optional[float]:
    if hasattr(os, "statx"):
        result = os.statx(path, os.STATX_BTIME)
        if not result.stx_mask & os.STATX_BTIME:
            return None
        return result.stx_birthtime

    statx = _libc_statx()
    if statx is None:
        return None

    buf = _Statx()
    if statx(AT_FDCWD, os.fsencode(path), 0, STATX_BTIME, ctypes.byref(buf)) != 0:
        return None
    if not buf.stx_mask & STATX_BTIME:
        return None
    return buf.stx_btime.tv_sec + buf.stx_btime.tv_nsec / 1e9


def stat_birthtime(path: Path) -> Optional[float]:
    """
    Read the birth time of a file if the platform reports one.

    macOS, the BSDs and Windows (Python 3.12+) expose ``st_birthtime`` on
    ``os.stat``. Linux only reports it through ``statx(2)`` (kernel 4.11+),
    and only on filesystems that record it.

    Args:
        path: File to inspect

    Returns:
        POSIX timestamp, or None when unsupported or the stat failed
    """
    try:
        birthtime = getattr(os.stat(path), "st_birthtime", None)
        if birthtime is None and sys.platform.startswith("linux"):
            birthtime = _statx_birthtime(path)
        return birthtime
    except OSError:
        return None


class MetadataResolver:
    """Resolve the timestamp a file should be dated by."""

    def __init__(
        self,
        birthtime_probe: Optional[BirthtimeProbe] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize resolver.

        Args:
            birthtime_probe: Returns a file's birth time or None when the
                platform cannot tell. Defaults to ``stat_birthtime``.
            clock: Wall clock used when a timestamp cannot be read at all
        """
        self.birthtime_probe = birthtime_probe or stat_birthtime
        self.clock = clock

    def resolve(self, path: Path, attribute: TimeAttribute) -> ResolvedTimestamp:
        """
        Resolve the requested timestamp of a file.

        Args:
            path: File to inspect
            attribute: Timestamp to use

        Returns:
            Resolved timestamp; ``warning`` is set when a fallback was used
        """
        attribute = TimeAttribute(attribute)

        if attribute == TimeAttribute.CREATION:
            birthtime = self._probe(path)
            if birthtime is not None:
                return ResolvedTimestamp(
                    timestamp=birthtime,
                    requested=attribute,
                    source=TimestampSource.BIRTH,
                )

            warning = "creation time not available, fell back to modification time"
            logger.warning(
                f"Creation time not available for {path}. "
                "Falling back to last modification time."
            )
            resolved = self._stat_time(path, TimeAttribute.MODIFICATION, attribute)
            if resolved.warning is None:
                resolved = resolved.model_copy(update={"warning": warning})
            return resolved

        return self._stat_time(path, attribute, attribute)

    def _probe(self, path: Path) -> Optional[float]:
        try:
            return self.birthtime_probe(path)
        except Exception as e:
            # A probe that blows up is an unsupported platform, not a fatal error
            logger.debug(f"Birth time probe failed for {path}: {e}")
            return None

    def _stat_time(
        self, path: Path, attribute: TimeAttribute, requested: TimeAttribute
    ) -> ResolvedTimestamp:
        try:
            stat = os.stat(path)
        except OSError as e:
            label = attribute.value
            logger.error(f"Unable to get {label} time for {path}: {e}")
            return ResolvedTimestamp(
                timestamp=self.clock(),
                requested=requested,
                source=TimestampSource.NOW,
                warning=f"unable to read {label} time ({e}), used current time",
            )

        if attribute == TimeAttribute.ACCESS:
            return ResolvedTimestamp(
                timestamp=stat.st_atime,
                requested=requested,
                source=TimestampSource.ACCESS,
            )

        return ResolvedTimestamp(
            timestamp=stat.st_mtime,
            requested=requested,
            source=TimestampSource.MODIFICATION,
        )
