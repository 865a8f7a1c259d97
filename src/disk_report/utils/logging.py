"""Logging infrastructure with optional syslog integration and scan id tracking.

Diagnostics (unreadable entries, failed volume queries, phase changes) are
written through the standard logging module to stderr so they never mix
with the report printed on stdout. Every record carries the id of the
volume scan that produced it, tracked with a ContextVar.
"""

import contextvars
import logging
import logging.handlers
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final, override

# Identifier of the volume scan currently in progress
scan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id",
    default=None,
)

# Log format constants
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"

SYSLOG_LOG_FORMAT: Final[str] = "disk-report[%(process)d]: %(levelname)s - [%(scan_id)s] - %(name)s - %(message)s"

DEFAULT_SYSLOG_ADDRESS: Final[str] = "/dev/log"


class ScanIdFilter(logging.Filter):
    """Logging filter that adds the current scan id to log records.

    Records emitted outside of a volume scan are stamped with "N/A".
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        scan_id = scan_id_var.get()
        record.scan_id = scan_id if scan_id is not None else "N/A"
        return True


def configure_logging(
    *,
    log_level: str = "WARNING",
    enable_syslog: bool = False,
    syslog_address: str = DEFAULT_SYSLOG_ADDRESS,
    enable_console: bool = True,
) -> None:
    """Configure application logging.

    Sets up logging infrastructure with:
    - Scan id tracking via ContextVar
    - Console output on stderr, separate from the report on stdout
    - Optional syslog integration

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_syslog: Enable syslog handler
        syslog_address: Syslog socket address
        enable_console: Enable console output handler

    Example:
        >>> configure_logging(log_level="INFO")
        >>> with scan_id_context():
        ...     logging.getLogger(__name__).info("Scanning volume")
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    scan_filter = ScanIdFilter()

    if enable_syslog:
        try:
            syslog_handler = logging.handlers.SysLogHandler(
                address=syslog_address,
                facility=logging.handlers.SysLogHandler.LOG_USER,
            )
            syslog_handler.setFormatter(logging.Formatter(SYSLOG_LOG_FORMAT))
            syslog_handler.addFilter(scan_filter)
            root_logger.addHandler(syslog_handler)

        except OSError as exc:
            # Syslog not available (e.g. Windows or a container)
            print(
                f"Warning: Could not connect to syslog at {syslog_address}: {exc}",
                file=sys.stderr,
            )

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        console_handler.addFilter(scan_filter)
        root_logger.addHandler(console_handler)


def generate_scan_id() -> str:
    """Return a short random identifier for one volume scan."""
    return uuid.uuid4().hex[:8]


def get_scan_id() -> str | None:
    """Get the scan id of the current context, if any."""
    return scan_id_var.get()


@contextmanager
def scan_id_context(scan_id: str | None = None) -> Iterator[str]:
    """Attach a scan id to every record logged inside the block.

    Args:
        scan_id: Identifier to use (a new one is generated when omitted)

    Yields:
        The scan id in effect inside the block
    """
    current = scan_id or generate_scan_id()
    token = scan_id_var.set(current)
    try:
        yield current
    finally:
        scan_id_var.reset(token)
