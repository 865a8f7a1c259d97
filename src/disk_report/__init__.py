"""disk-report - Report volume capacity and the largest top-level directories.

This package sizes the immediate subdirectories of a volume, tolerating
unreadable entries, and prints them largest first together with the
volume's total, free and used space.
"""

from disk_report.__main__ import main

__all__ = ["main"]
