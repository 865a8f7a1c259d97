"""Interactive text menu driving the volume reporter."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import IntEnum
from typing import Final

import click

from disk_report.core.reporter import VolumeReporter, aggregate_totals
from disk_report.core.volumes import same_volume
from disk_report.types.models import AggregateTotals, VolumeReport
from disk_report.types.protocols import ReportWriter, VolumeProvider

logger = logging.getLogger(__name__)

EXIT_SUCCESS: Final[int] = 0


class MenuChoice(IntEnum):
    """Options offered by the interactive menu."""

    SCAN_PRIMARY = 1
    SCAN_ATTACHED = 2
    SCAN_ALL = 3
    LIST_VOLUMES = 4
    EXIT = 5


MENU_LABELS: Final[Mapping[MenuChoice, str]] = {
    MenuChoice.SCAN_PRIMARY: "Scan main volume",
    MenuChoice.SCAN_ATTACHED: "Scan attached volumes",
    MenuChoice.SCAN_ALL: "Scan all volumes",
    MenuChoice.LIST_VOLUMES: "Show all volumes",
    MenuChoice.EXIT: "Exit",
}


class InteractiveMenu:
    """Menu loop that selects which volumes the reporter runs on.

    The loop is the top-level recovery boundary: invalid input re-prompts,
    and an unexpected error inside one action is logged before the menu is
    shown again. Only the exit option (or end of input) leaves the loop.
    """

    def __init__(
        self,
        provider: VolumeProvider,
        reporter: VolumeReporter,
        writer: ReportWriter,
    ) -> None:
        self.provider: VolumeProvider = provider
        self.reporter: VolumeReporter = reporter
        self.writer: ReportWriter = writer
        self._actions: Mapping[MenuChoice, Callable[[], object]] = {
            MenuChoice.SCAN_PRIMARY: self.scan_primary,
            MenuChoice.SCAN_ATTACHED: self.scan_attached,
            MenuChoice.SCAN_ALL: self.scan_all,
            MenuChoice.LIST_VOLUMES: self.list_volumes,
        }

    def run(self) -> int:
        """Show the menu until the operator exits.

        Returns:
            Process exit code
        """
        while True:
            choice = self.prompt()
            if choice is MenuChoice.EXIT:
                self.writer.line("Exiting program.")
                return EXIT_SUCCESS

            try:
                _ = self._actions[choice]()
            except Exception:
                logger.exception("Menu action '%s' failed", MENU_LABELS[choice])

    def prompt(self) -> MenuChoice:
        """Print the options and read a valid choice.

        Returns:
            Selected option; EXIT when input ends or is interrupted
        """
        self.writer.line()
        self.writer.line("Select an option:")
        primary = self.provider.primary_volume()
        for choice, label in MENU_LABELS.items():
            suffix = f" ({primary})" if choice is MenuChoice.SCAN_PRIMARY else ""
            self.writer.line(f"{choice.value}. {label}{suffix}")

        try:
            value: int = click.prompt(
                "Enter your choice",
                type=click.IntRange(MenuChoice.SCAN_PRIMARY, MenuChoice.EXIT),
            )
        except click.Abort:
            self.writer.line()
            return MenuChoice.EXIT

        return MenuChoice(value)

    def scan_primary(self) -> list[VolumeReport]:
        return [self.reporter.report(self.provider.primary_volume())]

    def scan_attached(self) -> list[VolumeReport]:
        """Report on every volume except the primary one."""
        primary = self.provider.primary_volume()
        attached = [v for v in self.provider.list_volumes() if not same_volume(v, primary)]
        if not attached:
            self.writer.line("No attached volumes found.")
            return []

        self.writer.line("Please wait while the program scans attached volumes.")
        return self.reporter.report_many(attached)

    def scan_all(self) -> AggregateTotals:
        """Report on every volume, then print the combined capacity."""
        self.writer.line("Please wait while the program scans all volumes.")
        reports = self.reporter.report_many(self.provider.list_volumes())
        totals = aggregate_totals(reports)
        self.reporter.print_totals(totals)
        return totals

    def list_volumes(self) -> list[str]:
        volumes = self.provider.list_volumes()
        self.writer.line()
        self.writer.line("Current volumes on the system:")
        for volume_id in volumes:
            self.writer.line(volume_id)
        self.writer.line()
        return volumes
