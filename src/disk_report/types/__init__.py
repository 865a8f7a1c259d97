"""Type definitions and protocols for disk-report application.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (structural subtyping interfaces)
- Type aliases (PEP 695 modern syntax)
"""

from disk_report.types.aliases import ByteCount, VolumeId
from disk_report.types.models import (
    AggregateTotals,
    DirectoryEntry,
    EntryKind,
    QueryFailure,
    RankedReport,
    ReportPhase,
    ScanEntry,
    ScanProgress,
    SizeSummary,
    VolumeReport,
    VolumeSnapshot,
)
from disk_report.types.protocols import (
    ProgressCallback,
    ReportWriter,
    VolumeProvider,
)

__all__ = [
    # Type aliases
    "ByteCount",
    "ProgressCallback",
    "VolumeId",
    # Data models
    "AggregateTotals",
    "DirectoryEntry",
    "EntryKind",
    "QueryFailure",
    "RankedReport",
    "ReportPhase",
    "ScanEntry",
    "ScanProgress",
    "SizeSummary",
    "VolumeReport",
    "VolumeSnapshot",
    # Protocols
    "ReportWriter",
    "VolumeProvider",
]
