"""Size calculation for directory trees with per-entry error isolation."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from disk_report.types.models import EntryKind, ScanEntry, SizeSummary

from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


class SizeMode(str, Enum):
    """Enumeration for size calculation modes."""

    APPARENT = "apparent"  # Apparent size (file content size)
    DISK_USAGE = "disk_usage"  # Actual disk usage (considering filesystem blocks)


class SizeCalculator:
    """Calculator for the total size of regular files under a directory.

    The calculation is best effort and always returns a number: every
    entry the scanner could not read is logged with its cause, contributes
    nothing to the total, and the traversal carries on with the rest of the
    tree. A root that cannot be read at all therefore measures 0 bytes.
    """

    def __init__(
        self,
        scanner: DirectoryScanner | None = None,
        mode: SizeMode = SizeMode.APPARENT,
    ) -> None:
        """Initialize the size calculator.

        Args:
            scanner: Directory scanner instance for file discovery
            mode: Size calculation mode (apparent size vs disk usage)
        """
        self.scanner: DirectoryScanner = scanner or DirectoryScanner()
        self.mode: SizeMode = mode

    def size_of(self, path: Path) -> int:
        """Calculate the total size of all regular files under ``path``.

        Args:
            path: Directory to measure

        Returns:
            Total size in bytes (0 when nothing could be read)
        """
        return self.measure(path).total_bytes

    def measure(self, path: Path) -> SizeSummary:
        """Measure a directory tree, counting files and skipped entries.

        Args:
            path: Directory to measure

        Returns:
            Summary with total bytes, files counted and entries skipped
        """
        total_bytes = 0
        files = 0
        skipped = 0

        for entry in self.scanner.scan_directory(path):
            if entry.kind is EntryKind.FILE:
                total_bytes += self._entry_size(entry)
                files += 1
            elif entry.kind is EntryKind.ERROR:
                logger.warning("Cannot access %s: %s", entry.path, entry.error)
                skipped += 1

        logger.debug(
            "Measured %s: %d bytes in %d files, %d entries skipped",
            path,
            total_bytes,
            files,
            skipped,
        )
        return SizeSummary(path=path, total_bytes=total_bytes, files=files, skipped=skipped)

    def _entry_size(self, entry: ScanEntry) -> int:
        """Size of a file entry according to the configured mode.

        Args:
            entry: File entry produced by the scanner

        Returns:
            Size in bytes
        """
        if self.mode == SizeMode.APPARENT:
            return entry.size
        return entry.allocated
