"""Shared utility modules for common operations.

This package provides:
- Data size formatting (bytes to human-readable)
- Time duration formatting (seconds to human-readable)
- Logging setup with per-scan identifiers
"""

from disk_report.utils.formatting import (
    SIZE_UNITS,
    format_duration,
    format_size,
)

__all__ = [
    "SIZE_UNITS",
    "format_duration",
    "format_size",
]
