"""Pure formatting utilities for human-readable output.

This module provides stateless formatting functions for converting raw byte
counts and durations into the strings printed in volume reports. All
functions are pure with no side effects.
"""

from typing import Final

# Binary unit suffixes (1024-based), smallest first
# TB is the largest unit: petabyte-scale values keep the TB suffix
SIZE_UNITS: Final[tuple[str, ...]] = ("B", "KB", "MB", "GB", "TB")

# A value is promoted to the next unit once its numeral reaches this width
_PROMOTE_AT: Final[float] = 1000.0
_UNIT_STEP: Final[float] = 1024.0

# Time unit constants
_MINUTE = 60
_HOUR = _MINUTE * 60  # 3,600
_DAY = _HOUR * 24  # 86,400


def format_size(bytes: int) -> str:
    """Convert bytes to human-readable size format.

    Uses binary units (1024-based). The value is divided by 1024 until the
    numeral, rounded to the two printed decimals, drops below 1000 or the
    TB unit is reached, so at most four divisions ever happen and the
    suffix table is never overrun.

    Args:
        bytes: Number of bytes to format (must be non-negative)

    Returns:
        Scaled value with exactly two decimals, a space and the unit suffix.

    Examples:
        >>> format_size(0)
        '0.00 B'
        >>> format_size(1536)
        '1.50 KB'
        >>> format_size(1000)
        '0.98 KB'
        >>> format_size(1023995)
        '0.98 MB'
        >>> format_size(4 * 1024**3)
        '4.00 GB'
        >>> format_size(1024**5)
        '1024.00 TB'
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)

    value = float(bytes)
    unit_index = 0
    while round(value, 2) >= _PROMOTE_AT and unit_index < len(SIZE_UNITS) - 1:
        value /= _UNIT_STEP
        unit_index += 1

    return f"{value:.2f} {SIZE_UNITS[unit_index]}"


def format_duration(seconds: float) -> str:
    """Convert seconds to human-readable duration format.

    Shows the two most significant units for values over one minute.

    Args:
        seconds: Duration in seconds (must be non-negative)

    Returns:
        Human-readable duration string such as "45s", "1m 30s", "1h 1m" or "1d 1h".

    Examples:
        >>> format_duration(0.4)
        '0s'
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(3665)
        '1h 1m'
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    total_seconds = int(seconds)

    for unit_seconds, unit, sub_seconds, sub_unit in (
        (_DAY, "d", _HOUR, "h"),
        (_HOUR, "h", _MINUTE, "m"),
        (_MINUTE, "m", 1, "s"),
    ):
        if total_seconds >= unit_seconds:
            major = total_seconds // unit_seconds
            minor = (total_seconds % unit_seconds) // sub_seconds
            if minor > 0:
                return f"{major}{unit} {minor}{sub_unit}"
            return f"{major}{unit}"

    return f"{total_seconds}s"
