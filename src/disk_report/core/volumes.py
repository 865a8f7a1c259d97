"""Volume enumeration and capacity queries backed by psutil.

Failures of a capacity query are classified into three kinds so the
reporter can print a message that tells the operator what to do:
access denied (re-run with more privileges), not ready (removable media,
disconnected device) and everything else.
"""

from __future__ import annotations

import errno
import logging
import os
import sys
from typing import ClassVar, Final

import psutil

from disk_report.types.models import QueryFailure, VolumeSnapshot

logger = logging.getLogger(__name__)

# Windows system error codes returned by the capacity query
_WIN_ERROR_ACCESS_DENIED: Final[int] = 5
_WIN_ERROR_NOT_READY: Final[int] = 21

_ACCESS_DENIED_ERRNOS: Final[frozenset[int]] = frozenset({errno.EACCES, errno.EPERM})

# ENOMEDIUM only exists on Linux
_NOT_READY_ERRNOS: Final[frozenset[int]] = frozenset(
    code
    for code in (
        errno.ENOENT,
        errno.ENODEV,
        errno.ENXIO,
        errno.EIO,
        errno.EBUSY,
        errno.EAGAIN,
        getattr(errno, "ENOMEDIUM", None),
    )
    if code is not None
)


class VolumeQueryError(Exception):
    """Base exception for failed volume capacity queries.

    Raised directly for failures that cannot be classified further.
    """

    failure: ClassVar[QueryFailure] = QueryFailure.UNKNOWN

    def __init__(self, volume_id: str, code: int | None = None, detail: str | None = None) -> None:
        """Initialize VolumeQueryError.

        Args:
            volume_id: Volume whose capacity could not be queried
            code: Platform error code, when one is available
            detail: Platform error description
        """
        message = f"Error getting disk free space for volume {volume_id}: {code if code is not None else detail}"
        super().__init__(message)
        self.volume_id: str = volume_id
        self.code: int | None = code
        self.detail: str | None = detail


class VolumeAccessDeniedError(VolumeQueryError):
    """The process lacks the privileges needed to query the volume."""

    failure: ClassVar[QueryFailure] = QueryFailure.ACCESS_DENIED


class VolumeNotReadyError(VolumeQueryError):
    """The volume exists but cannot currently be queried."""

    failure: ClassVar[QueryFailure] = QueryFailure.NOT_READY


def classify_os_error(volume_id: str, exc: OSError) -> VolumeQueryError:
    """Map an OSError from a capacity query onto the failure taxonomy.

    Windows error codes take precedence over errno values since Windows
    reports both and only the former distinguishes a not-ready drive.

    Args:
        volume_id: Volume that was being queried
        exc: Error raised by the platform query

    Returns:
        Classified exception carrying the platform error code
    """
    winerror: int | None = getattr(exc, "winerror", None)
    code = winerror if winerror is not None else exc.errno
    detail = exc.strerror or str(exc)

    if winerror == _WIN_ERROR_ACCESS_DENIED:
        return VolumeAccessDeniedError(volume_id, code, detail)
    if winerror == _WIN_ERROR_NOT_READY:
        return VolumeNotReadyError(volume_id, code, detail)
    if winerror is None:
        if isinstance(exc, PermissionError) or exc.errno in _ACCESS_DENIED_ERRNOS:
            return VolumeAccessDeniedError(volume_id, code, detail)
        if exc.errno in _NOT_READY_ERRNOS:
            return VolumeNotReadyError(volume_id, code, detail)

    return VolumeQueryError(volume_id, code, detail)


def same_volume(first: str, second: str) -> bool:
    """Compare two volume identifiers the way the host filesystem does."""
    return os.path.normcase(os.path.normpath(first)) == os.path.normcase(os.path.normpath(second))


class PsutilVolumeProvider:
    """VolumeProvider implementation using psutil.

    Works on Windows (drive letters), macOS and Linux (mount points).
    """

    def __init__(self, *, include_all: bool = False) -> None:
        """Initialize the provider.

        Args:
            include_all: Also list pseudo and duplicate filesystems
        """
        self.include_all: bool = include_all

    def list_volumes(self) -> list[str]:
        """Return mounted volume identifiers sorted by name.

        Returns:
            Unique mount points; empty when partitions cannot be enumerated
        """
        try:
            partitions = psutil.disk_partitions(all=self.include_all)
        except OSError as exc:
            logger.error("Error getting mounted volumes: %s", exc)
            return []

        volumes: list[str] = []
        seen: set[str] = set()
        for partition in partitions:
            if not partition.mountpoint:
                continue
            mountpoint = os.path.abspath(partition.mountpoint)
            key = os.path.normcase(mountpoint)
            if key in seen:
                continue
            seen.add(key)
            volumes.append(mountpoint)

        volumes.sort(key=str.lower)
        return volumes

    def primary_volume(self) -> str:
        """Return the system drive on Windows and ``/`` elsewhere."""
        if sys.platform.startswith("win"):
            return os.environ.get("SystemDrive", "C:") + "\\"
        return os.sep

    def query_capacity(self, volume_id: str) -> VolumeSnapshot:
        """Query total and free bytes of a volume.

        Args:
            volume_id: Mount point or drive root

        Returns:
            Capacity snapshot

        Raises:
            VolumeQueryError: Classified failure of the underlying query
        """
        try:
            usage = psutil.disk_usage(volume_id)
        except OSError as exc:
            raise classify_os_error(volume_id, exc) from exc

        return VolumeSnapshot(volume_id=volume_id, total=int(usage.total), free=int(usage.free))
