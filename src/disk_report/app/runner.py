"""Application runner for disk-report."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from disk_report.app.console import ConsoleWriter
from disk_report.app.menu import EXIT_SUCCESS, InteractiveMenu
from disk_report.core.config import MainConfig, load_main_config
from disk_report.core.data.filesystem import DirectoryScanner, SizeCalculator
from disk_report.core.ranking import DirectoryRanker
from disk_report.core.reporter import VolumeReporter, aggregate_totals
from disk_report.core.volumes import PsutilVolumeProvider
from disk_report.types.models import VolumeReport
from disk_report.types.protocols import ReportWriter, VolumeProvider
from disk_report.utils.logging import configure_logging

logger = logging.getLogger(__name__)


class ApplicationRunner:
    """Main application runner that wires configuration, logging and the core."""

    def __init__(
        self,
        config_path: Path | None = None,
        log_level: str | None = None,
        provider: VolumeProvider | None = None,
        writer: ReportWriter | None = None,
    ) -> None:
        """Initialize the application runner.

        Args:
            config_path: Path to the configuration file (None for defaults)
            log_level: Override of the configured logging level
            provider: Volume provider (psutil-backed when omitted)
            writer: Report output (console when omitted)

        Raises:
            ConfigurationError: If the configuration file is missing or invalid
        """
        self.config_path: Path | None = config_path
        self.config: MainConfig = load_main_config(config_path) if config_path is not None else MainConfig()
        if log_level is not None:
            self.config.application.log_level = log_level

        self.provider: VolumeProvider = provider or PsutilVolumeProvider()
        self.writer: ReportWriter = writer or ConsoleWriter()

    def configure_logging(self) -> None:
        configure_logging(
            log_level=self.config.application.log_level,
            enable_syslog=self.config.application.syslog_enabled,
        )
        # Warnings logged mid-scan must not share the progress line
        if isinstance(self.writer, ConsoleWriter):
            self.writer.watch_logging()
        logger.info(
            "Configuration loaded",
            extra={"config_path": str(self.config_path) if self.config_path else None},
        )

    def build_reporter(self) -> VolumeReporter:
        """Create a VolumeReporter from the scan configuration."""
        scan = self.config.scan
        calculator = SizeCalculator(
            scanner=DirectoryScanner(strategy=scan.strategy),
            mode=scan.size_mode,
        )
        return VolumeReporter(
            self.provider,
            self.writer,
            ranker=DirectoryRanker(calculator),
            large_volume_threshold=scan.large_volume_threshold,
            show_progress=scan.show_progress,
        )

    def run(self) -> int:
        """Run the interactive menu until the operator exits.

        Returns:
            Process exit code
        """
        self.configure_logging()
        menu = InteractiveMenu(self.provider, self.build_reporter(), self.writer)
        return menu.run()

    def scan(self, volume_ids: Sequence[str] = (), *, all_volumes: bool = False) -> list[VolumeReport]:
        """Report on volumes without the menu.

        Args:
            volume_ids: Volumes to report on (primary volume when empty)
            all_volumes: Report on every mounted volume and print the combined total

        Returns:
            One outcome per volume
        """
        self.configure_logging()
        reporter = self.build_reporter()

        if all_volumes:
            reports = reporter.report_many(self.provider.list_volumes())
            reporter.print_totals(aggregate_totals(reports))
            return reports

        targets = list(volume_ids) or [self.provider.primary_volume()]
        return reporter.report_many(targets)

    def list_volumes(self) -> int:
        self.configure_logging()
        for volume_id in self.provider.list_volumes():
            self.writer.line(volume_id)
        return EXIT_SUCCESS
