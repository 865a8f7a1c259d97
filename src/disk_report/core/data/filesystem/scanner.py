"""Directory scanner for filesystem operations."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterator
from enum import Enum
from pathlib import Path

from disk_report.types.models import EntryKind, ScanEntry

logger = logging.getLogger(__name__)

# st_blocks is always expressed in 512-byte units
_BLOCK_SIZE = 512


class ScanStrategy(str, Enum):
    """Enumeration for directory scanning strategies."""

    DEPTH_FIRST = "depth_first"
    BREADTH_FIRST = "breadth_first"


class DirectoryScanner:
    """Scanner producing a lazy sequence of entries for a directory tree.

    Provides traversal with support for:
    - Depth-first or breadth-first ordering over an explicit work list
      (no recursion, so deep trees cannot exhaust the call stack)
    - Unreadable directories and files surfaced as error entries instead
      of aborting the sequence
    - Symbolic links and junctions reported but never followed
    - Directories on another filesystem (mount points below the root)
      reported as OTHER and never entered
    """

    def __init__(self, strategy: ScanStrategy = ScanStrategy.DEPTH_FIRST) -> None:
        """Initialize the directory scanner.

        Args:
            strategy: Scanning strategy to use
        """
        self.strategy: ScanStrategy = strategy

    def scan_directory(self, path: Path) -> Iterator[ScanEntry]:
        """Yield every descendant of ``path``.

        The root itself is not yielded unless it cannot be listed, in which
        case a single error entry for it is produced.

        Args:
            path: Root directory to scan

        Yields:
            ScanEntry objects for all descendants found
        """
        device = self._device_of(path)
        pending: deque[Path] = deque([path])
        depth_first = self.strategy == ScanStrategy.DEPTH_FIRST

        while pending:
            current = pending.pop() if depth_first else pending.popleft()

            try:
                children = self._list_directory(current)
            except OSError as exc:
                yield ScanEntry(path=current, kind=EntryKind.ERROR, error=exc)
                continue

            subdirectories: list[Path] = []
            for child in children:
                entry = self._classify(child, device)
                yield entry
                if entry.kind is EntryKind.DIRECTORY:
                    subdirectories.append(entry.path)

            if depth_first:
                # Reversed so the first child is the next one popped
                pending.extend(reversed(subdirectories))
            else:
                pending.extend(subdirectories)

    def list_subdirectories(self, path: Path) -> list[Path]:
        """Return the immediate subdirectories of ``path`` in name order.

        Links, junctions and mount points of other filesystems are left
        out. Children whose type cannot be
        determined are logged and skipped.

        Args:
            path: Directory to list

        Returns:
            Subdirectory paths sorted by name

        Raises:
            OSError: If ``path`` itself cannot be listed
        """
        device = self._device_of(path)
        subdirectories: list[Path] = []
        for child in self._list_directory(path):
            entry = self._classify(child, device)
            if entry.kind is EntryKind.DIRECTORY:
                subdirectories.append(entry.path)
            elif entry.is_error:
                logger.warning("Cannot access %s: %s", entry.path, entry.error)

        return sorted(subdirectories, key=lambda p: p.name)

    def _list_directory(self, path: Path) -> list[os.DirEntry[str]]:
        """Read all entries of a single directory.

        Args:
            path: Directory path

        Returns:
            Directory entries in the order the filesystem reports them
        """
        with os.scandir(path) as it:
            return list(it)

    def _stat_entry(self, entry: os.DirEntry[str]) -> os.stat_result:
        """Stat a directory entry without following links."""
        return entry.stat(follow_symlinks=False)

    def _device_of(self, path: Path) -> int | None:
        """Device id of the filesystem holding ``path``.

        Returns:
            st_dev of ``path``; None on Windows, where scandir entries carry
            no device id, or when ``path`` cannot be stat'ed
        """
        if os.name == "nt":
            return None
        try:
            return os.stat(path, follow_symlinks=False).st_dev
        except OSError:
            return None

    def _classify(self, entry: os.DirEntry[str], device: int | None = None) -> ScanEntry:
        """Turn a raw directory entry into a ScanEntry.

        Args:
            entry: Entry returned by os.scandir
            device: Device id of the scanned root; directories on any other
                device are classified as OTHER

        Returns:
            Classified entry; OSErrors become error entries
        """
        path = Path(entry.path)
        try:
            if entry.is_symlink() or entry.is_junction():
                return ScanEntry(path=path, kind=EntryKind.SYMLINK)

            if entry.is_dir(follow_symlinks=False):
                if device is not None and self._stat_entry(entry).st_dev != device:
                    logger.debug("Not crossing into another filesystem at %s", path)
                    return ScanEntry(path=path, kind=EntryKind.OTHER)
                return ScanEntry(path=path, kind=EntryKind.DIRECTORY)

            if entry.is_file(follow_symlinks=False):
                stat = self._stat_entry(entry)
                # st_blocks is missing on Windows; fall back to the apparent size
                blocks: int | None = getattr(stat, "st_blocks", None)
                allocated = blocks * _BLOCK_SIZE if blocks is not None else stat.st_size
                return ScanEntry(
                    path=path,
                    kind=EntryKind.FILE,
                    size=stat.st_size,
                    allocated=allocated,
                )

            return ScanEntry(path=path, kind=EntryKind.OTHER)

        except OSError as exc:
            # Permission denied, broken reparse point, or removed mid-scan
            return ScanEntry(path=path, kind=EntryKind.ERROR, error=exc)
