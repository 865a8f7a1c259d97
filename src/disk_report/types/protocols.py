"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols that establish
contracts for the collaborators the core consumes without requiring
inheritance: the platform volume provider, the progress sink and the
console writer.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from disk_report.types.models import ScanProgress, VolumeSnapshot

# Invoked once per sized subdirectory
type ProgressCallback = Callable[[ScanProgress], None]


@runtime_checkable
class VolumeProvider(Protocol):
    """Protocol for platform volume enumeration and capacity queries.

    Implementations hide the host-specific querying so that the reporting
    core can be exercised against a fake provider.
    """

    def list_volumes(self) -> list[str]:
        """Return identifiers of all currently mounted volumes.

        Returns:
            Volume identifiers in a stable display order
        """
        ...

    def primary_volume(self) -> str:
        """Return the identifier of the system volume.

        Returns:
            Identifier of the volume holding the operating system
        """
        ...

    def query_capacity(self, volume_id: str) -> VolumeSnapshot:
        """Query total and free space for a volume.

        Args:
            volume_id: Identifier returned by list_volumes()

        Returns:
            Capacity snapshot for the volume

        Raises:
            VolumeQueryError: Classified failure (access denied, not ready, unknown)
        """
        ...


class ReportWriter(Protocol):
    """Protocol for line-oriented report output.

    Report lines and failure messages go to separate channels; progress is
    rendered as a single line that is rewritten in place.
    """

    def line(self, text: str = "") -> None:
        """Write one line of primary report output."""
        ...

    def error(self, text: str) -> None:
        """Write one line to the error channel."""
        ...

    def progress(self, event: ScanProgress) -> None:
        """Render a progress update, replacing the previous one."""
        ...
