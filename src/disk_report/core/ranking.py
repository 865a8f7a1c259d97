"""Ranking of immediate subdirectories by total size.

Each immediate subdirectory of a root collapses into a single report row
whose size is the recursive total of its regular files. Rows are ordered
largest first; the progress callback is told about every row as soon as
it has been measured, since sizing a whole volume can take a long time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from disk_report.core.data.filesystem import SizeCalculator
from disk_report.types.models import DirectoryEntry, RankedReport, ScanProgress
from disk_report.types.protocols import ProgressCallback

logger = logging.getLogger(__name__)


def rank_entries(entries: Iterable[DirectoryEntry]) -> tuple[DirectoryEntry, ...]:
    """Order entries by size, largest first.

    The sort is stable: entries of equal size keep their input order.

    Args:
        entries: Report rows in enumeration order

    Returns:
        Rows sorted descending by size
    """
    return tuple(sorted(entries, key=lambda entry: entry.size, reverse=True))


class DirectoryRanker:
    """Produces a RankedReport for the immediate subdirectories of a root."""

    def __init__(self, calculator: SizeCalculator | None = None) -> None:
        """Initialize the ranker.

        Args:
            calculator: Size calculator used for every subdirectory
        """
        self.calculator: SizeCalculator = calculator or SizeCalculator()

    def rank(self, root: Path, progress: ProgressCallback | None = None) -> RankedReport:
        """Size every immediate subdirectory of ``root`` and rank them.

        Never raises: a root that cannot be listed is logged and yields an
        empty report, exactly like a root without subdirectories.

        Args:
            root: Directory whose children are ranked
            progress: Optional callback invoked after each child is sized

        Returns:
            Report rows sorted descending by size
        """
        try:
            children = self.calculator.scanner.list_subdirectories(root)
        except OSError as exc:
            logger.warning("Cannot access %s: %s", root, exc)
            return RankedReport(root=root)

        total = len(children)
        logger.info("Ranking %d subdirectories of %s", total, root)

        entries: list[DirectoryEntry] = []
        for processed, child in enumerate(children, start=1):
            entries.append(DirectoryEntry(path=child, size=self.calculator.size_of(child)))
            if progress is not None:
                progress(ScanProgress(processed=processed, total=total, path=child))

        return RankedReport(root=root, entries=rank_entries(entries))
