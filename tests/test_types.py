"""Tests for type definitions."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from spritepress.errors import (
    ArtifactWriteError,
    BuildError,
    CompositeToolError,
    MissingKeyError,
    NameCollisionError,
    NotFoundError,
)
from spritepress.types import PositionManifest, SpriteAsset, SpriteSheet, TemplateDocument


class TestSpriteAsset:
    """Tests for SpriteAsset."""

    def test_string_path_is_converted(self):
        """Test string paths become Path objects."""
        asset = SpriteAsset(name="player", path="src/player.png", tile_size=32)
        assert isinstance(asset.path, Path)
        assert asset.path.name == "player.png"

    def test_asset_is_hashable(self):
        """Test assets can be used in sets."""
        asset = SpriteAsset(name="player", path=Path("player.png"), tile_size=32)
        assert asset in {asset}


class TestSpriteSheet:
    """Tests for SpriteSheet dimensions."""

    def test_rows_round_up(self):
        """Test a partial last row still counts as a row."""
        sprites = [SpriteAsset(name=str(i), path=f"{i}.png", tile_size=16) for i in range(5)]
        sheet = SpriteSheet(sprites=sprites, columns=2, tile_size=16, output_path="out.png")
        assert sheet.rows == 3
        assert sheet.width == 32
        assert sheet.height == 48

    def test_width_uses_all_columns(self):
        """Test width is columns * tile even with fewer sprites."""
        sprites = [SpriteAsset(name="a", path="a.png", tile_size=16)]
        sheet = SpriteSheet(sprites=sprites, columns=4, tile_size=16, output_path="out.png")
        assert sheet.width == 64
        assert sheet.height == 16


class TestPositionManifest:
    """Tests for the two manifest representations."""

    @pytest.fixture
    def manifest(self) -> PositionManifest:
        return PositionManifest(
            sheet_path="sprites.png",
            tile_size=32,
            columns=2,
            rows=2,
            offsets={"coin": (0, 0), "player": (-32, 0), "wall": (0, -32)},
            class_names={"coin": "sprite-coin", "player": "sprite-player", "wall": "sprite-wall"},
        )

    def test_stylesheet_has_rule_per_sprite(self, manifest):
        """Test one CSS rule is written per sprite, in order."""
        lines = manifest.to_stylesheet().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith(".sprite-coin ")
        assert lines[1] == (
            '.sprite-player { background: url("sprites.png") -32px 0px no-repeat; '
            "width: 32px; height: 32px; }"
        )

    def test_data_form_matches_offsets(self, manifest):
        """Test the data form carries the same offsets."""
        data = manifest.to_data()
        assert data["sheet"] == "sprites.png"
        assert data["tileSize"] == 32
        assert data["sprites"]["wall"] == {"x": 0, "y": -32}
        assert list(data["sprites"]) == ["coin", "player", "wall"]

    def test_json_is_stable(self, manifest):
        """Test JSON output is deterministic and newline terminated."""
        first = manifest.to_json()
        assert first == manifest.to_json()
        assert first.endswith("\n")
        assert json.loads(first)["rows"] == 2


class TestTemplateDocument:
    """Tests for TemplateDocument."""

    def test_label_from_source(self):
        """Test label reports the source path."""
        doc = TemplateDocument(text="x", source=Path("index.tmpl"))
        assert doc.label == "index.tmpl"

    def test_label_none_for_inline(self):
        """Test inline documents have no label."""
        assert TemplateDocument(text="x").label is None


class TestErrors:
    """Tests for the error taxonomy."""

    def test_all_errors_are_build_errors(self):
        """Test every error derives from BuildError."""
        for cls in (NotFoundError, MissingKeyError, NameCollisionError, CompositeToolError, ArtifactWriteError):
            assert issubclass(cls, BuildError)

    def test_message_names_stage(self):
        """Test the message starts with the stage."""
        err = NotFoundError("scan", "missing/dir", what="source directory")
        assert str(err) == "[scan] source directory not found: missing/dir"
        assert isinstance(err, FileNotFoundError)

    def test_missing_key_names_key(self):
        """Test MissingKeyError exposes the key and a readable message."""
        err = MissingKeyError("title")
        assert err.key == "title"
        assert isinstance(err, KeyError)
        assert "'title'" in str(err)
        assert str(err).startswith("[render]")

    def test_composite_error_lists_assets(self):
        """Test CompositeToolError names the asset set."""
        err = CompositeToolError("boom", [Path("a/player.png"), Path("a/wall.png")])
        assert err.stage == "pack"
        assert "player, wall" in str(err)

    def test_write_error_is_os_error(self):
        """Test ArtifactWriteError can be caught as OSError."""
        err = ArtifactWriteError("commit", "dist/sprites.png", "disk full")
        assert isinstance(err, OSError)
        assert "dist/sprites.png" in str(err)
