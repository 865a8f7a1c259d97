"""Application module for disk-report: CLI, interactive menu and console output."""

from __future__ import annotations

from disk_report.app.cli import cli
from disk_report.app.console import ConsoleWriter
from disk_report.app.menu import InteractiveMenu, MenuChoice
from disk_report.app.runner import ApplicationRunner

__all__ = [
    "cli",
    "ApplicationRunner",
    "ConsoleWriter",
    "InteractiveMenu",
    "MenuChoice",
]
