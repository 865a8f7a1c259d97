"""Data models for disk-report application.

This module defines immutable dataclasses used throughout the application
for type-safe data transfer between components. Every model is transient:
created fresh per scan invocation and discarded once printed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from disk_report.types.aliases import ByteCount, VolumeId
from disk_report.utils.formatting import format_size


class EntryKind(str, Enum):
    """Classification of a single traversal entry."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"  # sockets, pipes, devices
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class ScanEntry:
    """One item of the lazy sequence produced by the directory scanner.

    Error entries carry the OSError that prevented the path from being read
    and always report a size of zero. ``allocated`` is the space the file
    occupies on disk, which differs from ``size`` for sparse or small files.
    """

    path: Path
    kind: EntryKind
    size: ByteCount = 0
    allocated: ByteCount = 0
    error: OSError | None = None

    @property
    def is_error(self) -> bool:
        return self.kind is EntryKind.ERROR


@dataclass(slots=True, frozen=True)
class SizeSummary:
    """Result of a detailed directory measurement."""

    path: Path
    total_bytes: ByteCount
    files: int
    skipped: int


@dataclass(slots=True, frozen=True)
class DirectoryEntry:
    """Single report row: an immediate subdirectory and its total size."""

    path: Path
    size: ByteCount

    def render(self) -> str:
        return f"{self.path}: {format_size(self.size)}"


@dataclass(slots=True, frozen=True)
class RankedReport:
    """Subdirectories of a root ordered by size, largest first.

    Entries with equal size keep the order in which they were enumerated.
    """

    root: Path
    entries: tuple[DirectoryEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def total_bytes(self) -> ByteCount:
        return sum(entry.size for entry in self.entries)

    def lines(self) -> list[str]:
        """Render the report as ``"<path>: <formatted size>"`` lines."""
        return [entry.render() for entry in self.entries]


@dataclass(slots=True, frozen=True)
class ScanProgress:
    """Progress event emitted after each subdirectory has been sized."""

    processed: int
    total: int
    path: Path

    @property
    def finished(self) -> bool:
        return self.processed >= self.total


@dataclass(slots=True, frozen=True)
class VolumeSnapshot:
    """Point-in-time capacity of a single volume.

    Used space is always derived from total and free so the three values
    can never disagree.
    """

    volume_id: VolumeId
    total: ByteCount
    free: ByteCount

    @property
    def used(self) -> ByteCount:
        return self.total - self.free


class ReportPhase(str, Enum):
    """Phases a single volume report moves through."""

    QUERYING = "querying"
    REPORTING = "reporting"
    RANKING = "ranking"
    DONE = "done"
    FAILED = "failed"


class QueryFailure(str, Enum):
    """Classified reason a volume capacity query failed."""

    ACCESS_DENIED = "access_denied"
    NOT_READY = "not_ready"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class VolumeReport:
    """Outcome of reporting on one volume.

    Exactly one of ``snapshot`` and ``failure`` is set once the report has
    left the querying phase.
    """

    volume_id: VolumeId
    phase: ReportPhase = ReportPhase.QUERYING
    snapshot: VolumeSnapshot | None = None
    failure: QueryFailure | None = None
    ranking: RankedReport | None = None
    elapsed_sec: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.phase is ReportPhase.DONE


@dataclass(slots=True)
class AggregateTotals:
    """Summed capacity over every volume that reported successfully."""

    volumes: list[str] = field(default_factory=list)
    total: ByteCount = 0
    free: ByteCount = 0

    @property
    def used(self) -> ByteCount:
        return self.total - self.free

    def add(self, snapshot: VolumeSnapshot) -> None:
        self.volumes.append(snapshot.volume_id)
        self.total += snapshot.total
        self.free += snapshot.free
