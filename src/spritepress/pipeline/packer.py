"""Sprite sheet geometry and packing."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from spritepress.errors import BuildError, CompositeToolError
from spritepress.types import SpriteAsset, SpriteSheet, TileGeometry

from .compositor import Compositor, PillowCompositor
from .staging import discard, promote, temp_sibling

logger = logging.getLogger("spritepress.pipeline.packer")


def _check_positive(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def compute_geometry(count: int, tile_size: int, columns: int) -> list[TileGeometry]:
    """Compute the grid slot and pixel offset of every sprite.

    For index ``i``: column ``i % columns``, row ``i // columns`` and offset
    ``(-column * tile_size, -row * tile_size)``.

    Args:
        count: Number of sprites.
        tile_size: Tile edge length in pixels.
        columns: Tiles per row.

    Returns:
        One TileGeometry per sprite, in index order.
    """
    _check_positive(tile_size, "tile_size")
    _check_positive(columns, "columns")

    indices = np.arange(count, dtype=np.int64)
    cols = indices % columns
    rows = indices // columns
    xs = -cols * tile_size
    ys = -rows * tile_size

    return [
        TileGeometry(index=int(i), column=int(c), row=int(r), x=int(x), y=int(y))
        for i, c, r, x, y in zip(indices, cols, rows, xs, ys)
    ]


class SpriteSheetPacker:
    """Lays sprites out on a grid and drives a compositor to draw them."""

    def __init__(self, compositor: Optional[Compositor] = None):
        """Initialize the packer.

        Args:
            compositor: Pixel backend, Pillow by default.
        """
        self.compositor = compositor or PillowCompositor()

    def layout(
        self,
        sprites: Sequence[SpriteAsset],
        tile_size: int,
        columns: int,
    ) -> list[TileGeometry]:
        """Geometry table for an ordered sprite list."""
        return compute_geometry(len(sprites), tile_size, columns)

    def pack(
        self,
        sprites: Sequence[SpriteAsset],
        tile_size: int,
        columns: int,
        output_path: Path | str,
        promote_output: bool = True,
        staged_path: Optional[Path] = None,
    ) -> SpriteSheet:
        """Composite the sprites into one sheet.

        The compositor always writes a temporary sibling of ``output_path``.
        With ``promote_output`` the finished file is renamed over the target;
        otherwise it stays at ``staged_path`` for the caller to commit.

        Args:
            sprites: Sprites in sheet order.
            tile_size: Tile edge length in pixels.
            columns: Tiles per row.
            output_path: Final sheet location.
            promote_output: Rename the result into place when done.
            staged_path: Temporary file to draw into; reserved if omitted.

        Returns:
            The packed SpriteSheet.

        Raises:
            BuildError: If there are no sprites.
            CompositeToolError: If the compositor fails.
            ArtifactWriteError: If the temporary sheet cannot be created.
        """
        output_path = Path(output_path)
        geometry = self.layout(sprites, tile_size, columns)
        if not sprites:
            raise BuildError("pack", f"no sprites to pack into {output_path}")

        sheet = SpriteSheet(
            sprites=list(sprites),
            columns=columns,
            tile_size=tile_size,
            output_path=output_path,
            geometry=geometry,
        )
        source_paths = [sprite.path for sprite in sprites]
        temp = staged_path or temp_sibling(output_path, "pack")

        logger.info(
            "[PACK] Compositing %d sprite(s) into %dx%d tiles (%d x %d px)",
            len(sprites), columns, sheet.rows, sheet.width, sheet.height,
        )
        try:
            self.compositor.composite(source_paths, tile_size, columns, temp)
        except CompositeToolError:
            discard(temp)
            raise
        except Exception as exc:
            discard(temp)
            raise CompositeToolError(f"compositor failed: {exc}", source_paths) from exc
        except BaseException:
            # Cancellation or interrupt: never leave a half-written sheet
            discard(temp)
            raise

        if promote_output:
            promote(temp, output_path, "pack")
        return sheet


def rows_for(count: int, columns: int) -> int:
    """Number of rows needed for ``count`` sprites."""
    return math.ceil(count / columns)
