"""Console output for reports, failure messages and progress."""

from __future__ import annotations

import logging
from typing import override

import click

from disk_report.types.models import ScanProgress


class ConsoleWriter:
    """ReportWriter that prints to the terminal through click.

    Report lines go to stdout and failure messages to stderr. Progress is
    drawn on a single stdout line that is rewritten with a carriage return
    and terminated once the last directory has been sized.
    """

    def __init__(self) -> None:
        self._progress_open: bool = False

    def line(self, text: str = "") -> None:
        self.close_progress()
        click.echo(text)

    def error(self, text: str) -> None:
        self.close_progress()
        click.echo(text, err=True)

    def progress(self, event: ScanProgress) -> None:
        click.echo(f"\rProcessed {event.processed}/{event.total} directories", nl=False)
        self._progress_open = True
        if event.finished:
            self.close_progress()

    def close_progress(self) -> None:
        """End an unfinished progress line so the next output starts on its own line."""
        if self._progress_open:
            click.echo()
            self._progress_open = False

    def watch_logging(self, logger: logging.Logger | None = None) -> None:
        """Close the progress line before any record reaches a terminal stream.

        Args:
            logger: Logger whose stream handlers are watched (root when omitted)
        """
        target = logger or logging.getLogger()
        for handler in target.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.addFilter(ProgressLineFilter(self))


class ProgressLineFilter(logging.Filter):
    """Logging filter that ends an open progress line before a record is emitted.

    Records are never dropped.
    """

    def __init__(self, writer: ConsoleWriter) -> None:
        super().__init__()
        self.writer: ConsoleWriter = writer

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        self.writer.close_progress()
        return True
