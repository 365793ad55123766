"""Pixel compositing backends.

The packer only owns geometry; anything that touches pixels lives behind the
``Compositor`` protocol so tests can swap in a fake.
"""

from __future__ import annotations

import logging
import math
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from PIL import Image, UnidentifiedImageError

from spritepress.errors import CompositeToolError

logger = logging.getLogger("spritepress.pipeline.compositor")


@runtime_checkable
class Compositor(Protocol):
    """Draws ordered sprites onto one grid image."""

    def composite(
        self,
        source_paths: Sequence[Path],
        tile_size: int,
        columns: int,
        output_path: Path,
    ) -> None:
        """Write the composite sheet to ``output_path``.

        Sprite ``i`` goes to column ``i % columns``, row ``i // columns``.
        An incomplete final row is padded with transparent pixels.
        """
        ...


class PillowCompositor:
    """Composites sprites in-process with Pillow."""

    def composite(
        self,
        source_paths: Sequence[Path],
        tile_size: int,
        columns: int,
        output_path: Path,
    ) -> None:
        """Paste each sprite at its tile origin on a transparent canvas.

        Args:
            source_paths: Sprite files in sheet order.
            tile_size: Tile edge length in pixels.
            columns: Tiles per row.
            output_path: Where to save the sheet.

        Raises:
            CompositeToolError: If a sprite cannot be read or does not fit
                in one tile.
        """
        rows = math.ceil(len(source_paths) / columns)
        sheet = Image.new("RGBA", (columns * tile_size, rows * tile_size), (0, 0, 0, 0))

        for index, path in enumerate(source_paths):
            try:
                with Image.open(path) as img:
                    tile = img.convert("RGBA")
            except (OSError, UnidentifiedImageError) as exc:
                raise CompositeToolError(f"cannot read sprite image: {exc}", [path]) from exc

            if tile.width > tile_size or tile.height > tile_size:
                raise CompositeToolError(
                    f"sprite is {tile.width}x{tile.height}, larger than the {tile_size}px tile",
                    [path],
                )
            x = (index % columns) * tile_size
            y = (index // columns) * tile_size
            sheet.paste(tile, (x, y))

        try:
            sheet.save(output_path, format="PNG", optimize=False)
        except OSError as exc:
            raise CompositeToolError(f"cannot save sheet: {exc}", source_paths) from exc


class MontageCompositor:
    """Composites sprites with ImageMagick's ``montage`` command."""

    def __init__(self, executable: str = "montage", timeout: Optional[float] = 120.0):
        """Initialize the backend.

        Args:
            executable: Name or path of the montage binary.
            timeout: Seconds to wait for the tool before giving up.
        """
        self.executable = executable
        self.timeout = timeout

    def command(
        self,
        source_paths: Sequence[Path],
        tile_size: int,
        columns: int,
        output_path: Path,
    ) -> list[str]:
        """Build the montage argument list."""
        return [
            self.executable,
            *[str(p) for p in source_paths],
            "-tile", f"{columns}x",
            "-geometry", f"{tile_size}x{tile_size}+0+0",
            "-gravity", "NorthWest",
            "-background", "none",
            f"PNG32:{output_path}",
        ]

    def composite(
        self,
        source_paths: Sequence[Path],
        tile_size: int,
        columns: int,
        output_path: Path,
    ) -> None:
        """Run montage over the sprites.

        Raises:
            CompositeToolError: If montage is missing, fails or times out.
        """
        if shutil.which(self.executable) is None:
            raise CompositeToolError(f"{self.executable} not found on PATH", source_paths)

        cmd = self.command(source_paths, tile_size, columns, output_path)
        logger.debug("[PACK] Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            raise CompositeToolError(f"{self.executable} timed out after {self.timeout}s", source_paths) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise CompositeToolError(
                f"{self.executable} exited with {result.returncode}: {stderr}",
                source_paths,
            )


COMPOSITORS = {
    "pillow": PillowCompositor,
    "montage": MontageCompositor,
}


def get_compositor(name: str = "pillow") -> Compositor:
    """Create a compositor backend by name.

    Args:
        name: Backend name (``pillow`` or ``montage``).

    Returns:
        A new compositor.

    Raises:
        ValueError: If name is not a known backend.
    """
    if name not in COMPOSITORS:
        raise ValueError(f"Unknown compositor: {name}. Available: {', '.join(COMPOSITORS)}")
    return COMPOSITORS[name]()
