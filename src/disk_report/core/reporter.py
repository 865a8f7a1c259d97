"""Per-volume reporting: capacity snapshot followed by a subdirectory ranking.

Each call to VolumeReporter.report() walks a small state machine:

    QUERYING -> FAILED                         (capacity query failed)
    QUERYING -> REPORTING -> RANKING -> DONE   (capacity query succeeded)

A failed query is terminal for that volume only. Nothing is retained
between calls, so a failure on one volume never affects the next.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Final

from disk_report.core.ranking import DirectoryRanker
from disk_report.core.volumes import VolumeQueryError, classify_os_error
from disk_report.types.models import (
    AggregateTotals,
    QueryFailure,
    ReportPhase,
    VolumeReport,
    VolumeSnapshot,
)
from disk_report.types.protocols import ReportWriter, VolumeProvider
from disk_report.utils.formatting import format_duration, format_size
from disk_report.utils.logging import scan_id_context

logger = logging.getLogger(__name__)

# Volumes larger than this get a "this may take a while" advisory
DEFAULT_LARGE_VOLUME_THRESHOLD: Final[int] = 50 * 1024**3

LARGE_VOLUME_ADVISORY: Final[str] = (
    "Please wait while the program scans your directories. This may take a while..."
)

FAILURE_MESSAGES: Final[Mapping[QueryFailure, str]] = {
    QueryFailure.ACCESS_DENIED: "Access denied. Try running the program as an administrator.",
    QueryFailure.NOT_READY: "The volume is not ready.",
    QueryFailure.UNKNOWN: "Unknown error.",
}

_TRANSITIONS: Final[Mapping[ReportPhase, frozenset[ReportPhase]]] = {
    ReportPhase.QUERYING: frozenset({ReportPhase.REPORTING, ReportPhase.FAILED}),
    ReportPhase.REPORTING: frozenset({ReportPhase.RANKING}),
    ReportPhase.RANKING: frozenset({ReportPhase.DONE}),
    ReportPhase.DONE: frozenset(),
    ReportPhase.FAILED: frozenset(),
}


class StateTransitionError(Exception):
    """Exception raised when a report attempts an illegal phase change."""

    def __init__(self, from_phase: ReportPhase, to_phase: ReportPhase) -> None:
        super().__init__(f"Invalid report transition: {from_phase.value} -> {to_phase.value}")
        self.from_phase: ReportPhase = from_phase
        self.to_phase: ReportPhase = to_phase


def aggregate_totals(reports: Iterable[VolumeReport]) -> AggregateTotals:
    """Sum the capacity of every volume that produced a snapshot.

    Args:
        reports: Outcomes of VolumeReporter.report()

    Returns:
        Totals over successful volumes only
    """
    totals = AggregateTotals()
    for report in reports:
        if report.snapshot is not None:
            totals.add(report.snapshot)
    return totals


class VolumeReporter:
    """Reports capacity and the largest top-level directories of a volume."""

    def __init__(
        self,
        provider: VolumeProvider,
        writer: ReportWriter,
        *,
        ranker: DirectoryRanker | None = None,
        large_volume_threshold: int = DEFAULT_LARGE_VOLUME_THRESHOLD,
        show_progress: bool = True,
    ) -> None:
        """Initialize the reporter.

        Args:
            provider: Platform volume provider
            writer: Destination for report lines and failure messages
            ranker: Ranker used on the volume root
            large_volume_threshold: Total size in bytes above which the advisory is printed
            show_progress: Whether ranking progress is forwarded to the writer
        """
        self.provider: VolumeProvider = provider
        self.writer: ReportWriter = writer
        self.ranker: DirectoryRanker = ranker or DirectoryRanker()
        self.large_volume_threshold: int = large_volume_threshold
        self.show_progress: bool = show_progress

    def report(self, volume_id: str) -> VolumeReport:
        """Query, print and rank a single volume.

        Args:
            volume_id: Identifier of the volume to report on

        Returns:
            Outcome of the report, including the final phase reached
        """
        result = VolumeReport(volume_id=volume_id)
        started = time.monotonic()

        with scan_id_context():
            self.writer.line(f"Checking volume: {volume_id}")

            try:
                snapshot = self.provider.query_capacity(volume_id)
            except VolumeQueryError as exc:
                self._fail(result, exc)
                return result
            except OSError as exc:
                self._fail(result, classify_os_error(volume_id, exc))
                return result

            self._transition(result, ReportPhase.REPORTING)
            result.snapshot = snapshot
            self.print_snapshot(snapshot)

            if snapshot.total > self.large_volume_threshold:
                self.writer.line(LARGE_VOLUME_ADVISORY)
                self.writer.line()

            self._transition(result, ReportPhase.RANKING)
            progress = self.writer.progress if self.show_progress else None
            ranking = self.ranker.rank(Path(volume_id), progress)
            result.ranking = ranking

            for line in ranking.lines():
                self.writer.line(line)

            result.elapsed_sec = time.monotonic() - started
            self._transition(result, ReportPhase.DONE)
            logger.info(
                "Reported %s: %d directories in %s",
                volume_id,
                len(ranking),
                format_duration(result.elapsed_sec),
            )

        return result

    def report_many(self, volume_ids: Iterable[str]) -> list[VolumeReport]:
        """Report on each volume in turn; failures do not stop the rest."""
        return [self.report(volume_id) for volume_id in volume_ids]

    def print_snapshot(self, snapshot: VolumeSnapshot) -> None:
        """Print total, free and used space of a volume."""
        self.writer.line()
        self.writer.line(f"Volume: {snapshot.volume_id}")
        self.writer.line(f"Total Space: {format_size(snapshot.total)}")
        self.writer.line(f"Free Space: {format_size(snapshot.free)}")
        self.writer.line(f"Used Space: {format_size(snapshot.used)}")
        self.writer.line()

    def print_totals(self, totals: AggregateTotals) -> None:
        """Print capacity summed over several volumes."""
        self.writer.line()
        self.writer.line(f"Total across {len(totals.volumes)} volume(s):")
        self.writer.line(f"Total Space: {format_size(totals.total)}")
        self.writer.line(f"Free Space: {format_size(totals.free)}")
        self.writer.line(f"Used Space: {format_size(totals.used)}")
        self.writer.line()

    def _fail(self, result: VolumeReport, exc: VolumeQueryError) -> None:
        self._transition(result, ReportPhase.FAILED)
        result.failure = exc.failure
        self.writer.error(str(exc))
        self.writer.error(FAILURE_MESSAGES[exc.failure])
        logger.info("Capacity query failed for %s (%s)", result.volume_id, exc.failure.value)

    def _transition(self, result: VolumeReport, phase: ReportPhase) -> None:
        if phase not in _TRANSITIONS[result.phase]:
            raise StateTransitionError(result.phase, phase)
        logger.debug("Volume %s: %s -> %s", result.volume_id, result.phase.value, phase.value)
        result.phase = phase
