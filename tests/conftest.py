"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import override

import pytest

from disk_report.core.data.filesystem import DirectoryScanner
from disk_report.core.volumes import VolumeQueryError
from disk_report.types.models import ScanProgress, VolumeSnapshot

# Directory tree description: name -> file size in bytes, or nested mapping for a directory
type TreeLayout = Mapping[str, int | TreeLayout]


class RecordingWriter:
    """ReportWriter that keeps everything it is given."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.errors: list[str] = []
        self.progress_events: list[ScanProgress] = []

    def line(self, text: str = "") -> None:
        self.lines.append(text)

    def error(self, text: str) -> None:
        self.errors.append(text)

    def progress(self, event: ScanProgress) -> None:
        self.progress_events.append(event)


class FakeVolumeProvider:
    """VolumeProvider serving canned snapshots or failures."""

    def __init__(
        self,
        volumes: Mapping[str, VolumeSnapshot | VolumeQueryError],
        primary: str,
    ) -> None:
        self.volumes: dict[str, VolumeSnapshot | VolumeQueryError] = dict(volumes)
        self.primary: str = primary
        self.queried: list[str] = []

    def list_volumes(self) -> list[str]:
        return list(self.volumes)

    def primary_volume(self) -> str:
        return self.primary

    def query_capacity(self, volume_id: str) -> VolumeSnapshot:
        self.queried.append(volume_id)
        outcome = self.volumes[volume_id]
        if isinstance(outcome, VolumeQueryError):
            raise outcome
        return outcome


class DenyingStatScanner(DirectoryScanner):
    """DirectoryScanner that cannot stat entries with the given names."""

    def __init__(self, denied: set[str]) -> None:
        super().__init__()
        self.denied: set[str] = denied

    @override
    def _stat_entry(self, entry: os.DirEntry[str]) -> os.stat_result:
        if entry.name in self.denied:
            raise PermissionError(13, "Permission denied", entry.path)
        return super()._stat_entry(entry)


def build_tree(root: Path, layout: TreeLayout) -> Path:
    """Create files and directories under ``root`` as described by ``layout``."""
    root.mkdir(parents=True, exist_ok=True)
    for name, content in layout.items():
        if isinstance(content, int):
            _ = (root / name).write_bytes(b"x" * content)
        else:
            _ = build_tree(root / name, content)
    return root


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[logging.Logger]:
    """Drop handlers installed by configure_logging and restore the root level."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def writer() -> RecordingWriter:
    """Create a recording report writer."""
    return RecordingWriter()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeLayout], Path]:
    """Factory building a directory tree inside a temporary directory."""

    def factory(layout: TreeLayout) -> Path:
        return build_tree(tmp_path / "root", layout)

    return factory


@pytest.fixture
def make_provider() -> Callable[..., FakeVolumeProvider]:
    """Factory for fake volume providers."""

    def factory(
        volumes: Mapping[str, VolumeSnapshot | VolumeQueryError],
        primary: str | None = None,
    ) -> FakeVolumeProvider:
        return FakeVolumeProvider(volumes, primary if primary is not None else next(iter(volumes)))

    return factory


@pytest.fixture
def make_denying_scanner() -> Callable[[set[str]], DenyingStatScanner]:
    """Factory for scanners that hit a permission error on the named entries."""

    def factory(denied: set[str]) -> DenyingStatScanner:
        return DenyingStatScanner(denied)

    return factory
