"""Position manifest generation."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from spritepress.errors import NameCollisionError
from spritepress.types import PositionManifest, SpriteAsset, TileGeometry

from .packer import compute_geometry, rows_for
from .staging import atomic_write_text

logger = logging.getLogger("spritepress.pipeline.manifest")

_CSS_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def css_class_name(prefix: str, name: str) -> str:
    """Turn a sprite name into a CSS class.

    Args:
        prefix: Class prefix, e.g. ``sprite``.
        name: Sprite name.

    Returns:
        Class name such as ``sprite-player``.
    """
    safe = _CSS_UNSAFE.sub("-", name)
    return f"{prefix}-{safe}" if prefix else safe


def _as_ref(path: Path | str) -> str:
    return path.as_posix() if isinstance(path, Path) else str(path)


class ManifestGenerator:
    """Builds the sprite offset table and its two output forms."""

    def __init__(self, class_prefix: str = "sprite"):
        """Initialize the generator.

        Args:
            class_prefix: Prefix for generated CSS class names.
        """
        self.class_prefix = class_prefix

    def generate(
        self,
        sprites: Sequence[SpriteAsset],
        tile_size: int,
        columns: int,
        sheet_path: Path | str,
        geometry: Optional[Sequence[TileGeometry]] = None,
        stylesheet_sheet_path: Optional[Path | str] = None,
    ) -> PositionManifest:
        """Compute the offset table for an ordered sprite list.

        Args:
            sprites: Sprites in sheet order.
            tile_size: Tile edge length in pixels.
            columns: Tiles per row.
            sheet_path: Sheet location as referenced from the data form.
            geometry: Precomputed table for the same sprites, if available.
            stylesheet_sheet_path: Sheet location as referenced from the
                stylesheet, when it lives in another folder than the data
                form. Defaults to ``sheet_path``.

        Returns:
            The PositionManifest.

        Raises:
            NameCollisionError: If two files share a sprite name or CSS class.
        """
        self._check_collisions(sprites)
        if geometry is None:
            geometry = compute_geometry(len(sprites), tile_size, columns)

        offsets: dict[str, tuple[int, int]] = {}
        class_names: dict[str, str] = {}
        for sprite, slot in zip(sprites, geometry):
            offsets[sprite.name] = (slot.x, slot.y)
            class_names[sprite.name] = css_class_name(self.class_prefix, sprite.name)

        sheet_ref = _as_ref(sheet_path)
        manifest = PositionManifest(
            sheet_path=sheet_ref,
            stylesheet_sheet_path=_as_ref(stylesheet_sheet_path) if stylesheet_sheet_path is not None else None,
            tile_size=tile_size,
            columns=columns,
            rows=rows_for(len(sprites), columns),
            offsets=offsets,
            class_names=class_names,
        )
        logger.debug("[MANIFEST] %d offset(s) for %s", len(offsets), sheet_ref)
        return manifest

    def write(
        self,
        manifest: PositionManifest,
        stylesheet_path: Path | str,
        data_path: Path | str,
    ) -> None:
        """Write both manifest forms, each through a temporary file.

        Args:
            manifest: Manifest to write.
            stylesheet_path: Target for the CSS form.
            data_path: Target for the JSON form.
        """
        atomic_write_text(Path(stylesheet_path), manifest.to_stylesheet(), "manifest")
        atomic_write_text(Path(data_path), manifest.to_json(), "manifest")

    def _check_collisions(self, sprites: Sequence[SpriteAsset]) -> None:
        by_name: dict[str, SpriteAsset] = {}
        by_class: dict[str, SpriteAsset] = {}
        for sprite in sprites:
            seen = by_name.get(sprite.name)
            if seen is not None and seen.path != sprite.path:
                raise NameCollisionError(sprite.name, [seen.path, sprite.path])
            by_name[sprite.name] = sprite

            css_class = css_class_name(self.class_prefix, sprite.name)
            seen = by_class.get(css_class)
            if seen is not None and seen.name != sprite.name:
                raise NameCollisionError(css_class, [seen.path, sprite.path])
            by_class[css_class] = sprite
