"""Test suite for per-volume reporting."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from disk_report.core.data.filesystem import DirectoryScanner, SizeCalculator
from disk_report.core.ranking import DirectoryRanker
from disk_report.core.reporter import (
    FAILURE_MESSAGES,
    LARGE_VOLUME_ADVISORY,
    StateTransitionError,
    VolumeReporter,
    aggregate_totals,
)
from disk_report.core.volumes import (
    VolumeAccessDeniedError,
    VolumeNotReadyError,
    VolumeQueryError,
)
from disk_report.types.models import (
    DirectoryEntry,
    QueryFailure,
    RankedReport,
    ReportPhase,
    VolumeReport,
    VolumeSnapshot,
)

if TYPE_CHECKING:
    from conftest import FakeVolumeProvider, RecordingWriter

GIB = 1024**3


def _mock_ranker(entries: tuple[DirectoryEntry, ...] = ()) -> MagicMock:
    ranker = MagicMock(spec=DirectoryRanker)
    ranker.rank.side_effect = lambda root, progress=None: RankedReport(root=root, entries=entries)  # pyright: ignore[reportUnknownLambdaType]
    return ranker


@pytest.mark.unit
class TestVolumeReporterSuccess:
    """Reports on volumes whose capacity query succeeds."""

    def test_prints_capacity_then_ranking(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
        make_tree: Callable[..., Path],
    ) -> None:
        """Capacity lines come first, then one line per subdirectory."""
        root = make_tree({"a": {"f": 1000}, "b": {"g": 2000}, "c": {}})
        volume = str(root)
        provider = make_provider({volume: VolumeSnapshot(volume, total=2 * GIB, free=GIB)})

        result = VolumeReporter(provider, writer, show_progress=False).report(volume)

        assert result.phase is ReportPhase.DONE
        assert result.succeeded
        assert result.failure is None
        assert writer.lines == [
            f"Checking volume: {volume}",
            "",
            f"Volume: {volume}",
            "Total Space: 2.00 GB",
            "Free Space: 1.00 GB",
            "Used Space: 1.00 GB",
            "",
            f"{root / 'b'}: 1.95 KB",
            f"{root / 'a'}: 0.98 KB",
            f"{root / 'c'}: 0.00 B",
        ]
        assert writer.errors == []

    def test_nested_permission_error_reaches_ranking(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
        make_tree: Callable[..., Path],
        make_denying_scanner: Callable[..., DirectoryScanner],
    ) -> None:
        """An unreadable file deep in the volume does not stop the report."""
        root = make_tree({"a": {"f": 1000}, "b": {"g": 2000, "deep": {"secret": 4000}}, "c": {}})
        volume = str(root)
        provider = make_provider({volume: VolumeSnapshot(volume, total=GIB, free=GIB)})
        ranker = DirectoryRanker(SizeCalculator(make_denying_scanner({"secret"})))

        result = VolumeReporter(provider, writer, ranker=ranker, show_progress=False).report(volume)

        assert result.phase is ReportPhase.DONE
        assert writer.errors == []
        assert writer.lines[-3:] == [
            f"{root / 'b'}: 1.95 KB",
            f"{root / 'a'}: 0.98 KB",
            f"{root / 'c'}: 0.00 B",
        ]

    def test_progress_forwarded_to_writer(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
        make_tree: Callable[..., Path],
    ) -> None:
        """Progress events reach the writer when enabled."""
        root = make_tree({"a": {}, "b": {}})
        volume = str(root)
        provider = make_provider({volume: VolumeSnapshot(volume, total=GIB, free=GIB)})

        _ = VolumeReporter(provider, writer).report(volume)

        assert [event.processed for event in writer.progress_events] == [1, 2]

    def test_progress_suppressed(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """No callback is passed to the ranker when progress is disabled."""
        provider = make_provider({"/v": VolumeSnapshot("/v", total=GIB, free=GIB)})
        ranker = _mock_ranker()

        _ = VolumeReporter(provider, writer, ranker=ranker, show_progress=False).report("/v")

        ranker.rank.assert_called_once_with(Path("/v"), None)

    def test_large_volume_advisory(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """Volumes above the threshold get the long-scan advisory."""
        provider = make_provider({"/big": VolumeSnapshot("/big", total=51 * GIB, free=GIB)})

        _ = VolumeReporter(provider, writer, ranker=_mock_ranker()).report("/big")

        assert LARGE_VOLUME_ADVISORY in writer.lines

    def test_threshold_is_exclusive(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """A volume exactly at the threshold gets no advisory."""
        provider = make_provider({"/v": VolumeSnapshot("/v", total=50 * GIB, free=0)})

        _ = VolumeReporter(provider, writer, ranker=_mock_ranker()).report("/v")

        assert LARGE_VOLUME_ADVISORY not in writer.lines

    def test_custom_threshold(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """The threshold is configurable."""
        provider = make_provider({"/v": VolumeSnapshot("/v", total=2048, free=0)})

        reporter = VolumeReporter(provider, writer, ranker=_mock_ranker(), large_volume_threshold=1024)
        _ = reporter.report("/v")

        assert LARGE_VOLUME_ADVISORY in writer.lines

    def test_ranking_recorded_on_result(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """The returned outcome carries the snapshot and the ranking."""
        snapshot = VolumeSnapshot("/v", total=100, free=40)
        entries = (DirectoryEntry(Path("/v/x"), 60),)
        provider = make_provider({"/v": snapshot})

        result = VolumeReporter(provider, writer, ranker=_mock_ranker(entries)).report("/v")

        assert result.snapshot == snapshot
        assert result.ranking is not None
        assert result.ranking.entries == entries
        assert result.elapsed_sec >= 0
        assert writer.lines[-1] == f"{Path('/v/x')}: 60.00 B"


@pytest.mark.unit
class TestVolumeReporterFailure:
    """Reports on volumes whose capacity query fails."""

    @pytest.mark.parametrize(
        ("error", "failure"),
        [
            (VolumeAccessDeniedError("/v", 5), QueryFailure.ACCESS_DENIED),
            (VolumeNotReadyError("/v", 21), QueryFailure.NOT_READY),
            (VolumeQueryError("/v", 1117), QueryFailure.UNKNOWN),
        ],
    )
    def test_failure_skips_ranking(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
        error: VolumeQueryError,
        failure: QueryFailure,
    ) -> None:
        """A failed query prints the code and a message and never ranks."""
        provider = make_provider({"/v": error})
        ranker = _mock_ranker()

        result = VolumeReporter(provider, writer, ranker=ranker).report("/v")

        assert ranker.rank.call_count == 0
        assert result.phase is ReportPhase.FAILED
        assert result.failure is failure
        assert result.snapshot is None
        assert not result.succeeded
        assert writer.errors == [str(error), FAILURE_MESSAGES[failure]]
        assert writer.lines == ["Checking volume: /v"]

    def test_access_denied_message(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """Access denied advises running with more privileges."""
        provider = make_provider({"C:\\": VolumeAccessDeniedError("C:\\", 5)})

        _ = VolumeReporter(provider, writer, ranker=_mock_ranker()).report("C:\\")

        assert writer.errors == [
            "Error getting disk free space for volume C:\\: 5",
            "Access denied. Try running the program as an administrator.",
        ]

    def test_plain_os_error_is_classified(
        self,
        writer: RecordingWriter,
    ) -> None:
        """A provider raising a raw OSError is still handled as a failure."""
        provider = MagicMock()
        provider.query_capacity.side_effect = PermissionError(13, "Permission denied")

        result = VolumeReporter(provider, writer, ranker=_mock_ranker()).report("/v")

        assert result.failure is QueryFailure.ACCESS_DENIED

    def test_failure_does_not_stop_other_volumes(
        self,
        writer: RecordingWriter,
        make_provider: Callable[..., FakeVolumeProvider],
    ) -> None:
        """report_many continues past a failed volume."""
        provider = make_provider(
            {
                "/a": VolumeSnapshot("/a", total=10, free=5),
                "/b": VolumeNotReadyError("/b", 21),
                "/c": VolumeSnapshot("/c", total=20, free=5),
            }
        )
        ranker = _mock_ranker()

        results = VolumeReporter(provider, writer, ranker=ranker).report_many(["/a", "/b", "/c"])

        assert [r.phase for r in results] == [ReportPhase.DONE, ReportPhase.FAILED, ReportPhase.DONE]
        assert provider.queried == ["/a", "/b", "/c"]
        assert ranker.rank.call_count == 2


@pytest.mark.unit
class TestStateTransitions:
    """Test the report phase guard."""

    def test_illegal_transition_raises(self, writer: RecordingWriter) -> None:
        """Leaving a terminal phase is rejected."""
        reporter = VolumeReporter(MagicMock(), writer, ranker=_mock_ranker())
        result = VolumeReport(volume_id="/v", phase=ReportPhase.FAILED)

        with pytest.raises(StateTransitionError) as exc_info:
            reporter._transition(result, ReportPhase.RANKING)  # pyright: ignore[reportPrivateUsage]

        assert exc_info.value.from_phase is ReportPhase.FAILED
        assert exc_info.value.to_phase is ReportPhase.RANKING
        assert result.phase is ReportPhase.FAILED

    def test_cannot_skip_reporting(self, writer: RecordingWriter) -> None:
        """Ranking cannot start straight from querying."""
        reporter = VolumeReporter(MagicMock(), writer, ranker=_mock_ranker())

        with pytest.raises(StateTransitionError):
            reporter._transition(VolumeReport(volume_id="/v"), ReportPhase.RANKING)  # pyright: ignore[reportPrivateUsage]


@pytest.mark.unit
class TestTotals:
    """Test aggregation over several volumes."""

    def test_aggregate_skips_failed(self) -> None:
        """Only volumes with a snapshot are summed."""
        reports = [
            VolumeReport("/a", ReportPhase.DONE, snapshot=VolumeSnapshot("/a", 100, 30)),
            VolumeReport("/b", ReportPhase.FAILED, failure=QueryFailure.NOT_READY),
            VolumeReport("/c", ReportPhase.DONE, snapshot=VolumeSnapshot("/c", 50, 20)),
        ]

        totals = aggregate_totals(reports)

        assert totals.volumes == ["/a", "/c"]
        assert totals.total == 150
        assert totals.free == 50
        assert totals.used == 100

    def test_print_totals(self, writer: RecordingWriter) -> None:
        """Totals are printed with formatted sizes."""
        reporter = VolumeReporter(MagicMock(), writer, ranker=_mock_ranker())
        totals = aggregate_totals(
            [VolumeReport("/a", ReportPhase.DONE, snapshot=VolumeSnapshot("/a", 3 * GIB, GIB))]
        )

        reporter.print_totals(totals)

        assert writer.lines == [
            "",
            "Total across 1 volume(s):",
            "Total Space: 3.00 GB",
            "Free Space: 1.00 GB",
            "Used Space: 2.00 GB",
            "",
        ]
