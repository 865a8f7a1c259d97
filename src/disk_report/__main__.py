"""Application entry point for disk-report.

Allows running the CLI with ``python -m disk_report``.
"""

from __future__ import annotations

from disk_report.app.cli import cli

__all__ = ["main"]


def main() -> None:
    """Main entry point for disk-report application."""
    cli(prog_name="disk-report")


if __name__ == "__main__":
    main()
