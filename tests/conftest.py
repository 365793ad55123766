"""Pytest configuration and fixtures."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Sequence

import pytest

from spritepress.app import BuildConfig
from spritepress.assets import PlaceholderGenerator
from spritepress.types import SpriteAsset

DEMO_NAMES = ["player", "wall", "coin", "grass", "enemy"]


class RecordingCompositor:
    """Fake compositor that records calls and writes a text stand-in sheet."""

    def __init__(self):
        self.calls: list[tuple[list[Path], int, int, Path]] = []

    def composite(
        self,
        source_paths: Sequence[Path],
        tile_size: int,
        columns: int,
        output_path: Path,
    ) -> None:
        self.calls.append((list(source_paths), tile_size, columns, Path(output_path)))
        body = ",".join(p.stem for p in source_paths) + f"|{tile_size}|{columns}"
        Path(output_path).write_bytes(body.encode("utf-8"))


class FailingCompositor:
    """Fake compositor that writes half a file, then fails."""

    def composite(self, source_paths, tile_size, columns, output_path) -> None:
        Path(output_path).write_bytes(b"partial")
        raise RuntimeError("tool crashed")


class BlockingCompositor(RecordingCompositor):
    """Fake compositor that waits until released."""

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def composite(self, source_paths, tile_size, columns, output_path) -> None:
        self.started.set()
        self.release.wait(timeout=5)
        super().composite(source_paths, tile_size, columns, output_path)


def make_sprites(names: Sequence[str], tile_size: int = 32) -> list[SpriteAsset]:
    """Create SpriteAssets without touching the disk."""
    return [SpriteAsset(name=n, path=Path(f"/src/{n}.png"), tile_size=tile_size) for n in names]


def visible_files(directory: Path) -> list[str]:
    """Names of all files in a directory, hidden temporaries included."""
    return sorted(p.name for p in directory.iterdir()) if directory.exists() else []


@pytest.fixture
def sprite_dir(tmp_path) -> Path:
    """A source folder with a handful of placeholder sprites."""
    directory = tmp_path / "sprites"
    PlaceholderGenerator(directory, tile_size=16).generate(DEMO_NAMES)
    return directory


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Build output folder (not created yet)."""
    return tmp_path / "dist"


@pytest.fixture
def build_config(sprite_dir, output_dir) -> BuildConfig:
    """A basic build configuration for the demo sprites."""
    return BuildConfig(
        source_dir=sprite_dir,
        output_dir=output_dir,
        tile_size=16,
        columns=2,
    )


@pytest.fixture
def recording_compositor() -> RecordingCompositor:
    return RecordingCompositor()
