"""Generate placeholder sprite tiles for demos and tests."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw

# Colors for common tile-game sprite names
SPRITE_COLORS: dict[str, Tuple[int, int, int]] = {
    "player": (200, 150, 100),  # Tan
    "enemy": (200, 60, 60),  # Red
    "grass": (60, 170, 60),  # Green
    "water": (60, 110, 220),  # Blue
    "wall": (120, 120, 120),  # Gray
    "coin": (255, 210, 60),  # Gold
}


def color_for(name: str) -> Tuple[int, int, int]:
    """Pick a stable color for a sprite name.

    Args:
        name: Sprite name.

    Returns:
        RGB color tuple.
    """
    for keyword, color in SPRITE_COLORS.items():
        if keyword in name:
            return color
    digest = hashlib.md5(name.encode("utf-8")).digest()
    # Keep channels away from black so tiles stay visible
    return (64 + digest[0] % 192, 64 + digest[1] % 192, 64 + digest[2] % 192)


class PlaceholderGenerator:
    """Generates placeholder sprite images."""

    def __init__(self, output_dir: Optional[Path] = None, tile_size: int = 32):
        """Initialize the generator.

        Args:
            output_dir: Output directory for generated sprites.
            tile_size: Edge length of each square tile in pixels.
        """
        self.output_dir = Path(output_dir) if output_dir else Path("assets/sprites")
        self.tile_size = tile_size

    def generate(self, names: Iterable[str]) -> dict[str, Path]:
        """Generate one tile per name.

        Args:
            names: Sprite names; each becomes ``<name>.png``.

        Returns:
            Dictionary of sprite name to generated file path.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return {name: self.generate_sprite(name) for name in names}

    def generate_sprite(self, name: str, size: Optional[Tuple[int, int]] = None) -> Path:
        """Generate a single placeholder tile.

        Args:
            name: Sprite name.
            size: Optional (width, height) override, defaults to the tile size.

        Returns:
            Path to the generated file.
        """
        width, height = size or (self.tile_size, self.tile_size)
        img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)
        color = color_for(name)
        outline = (color[0] // 2, color[1] // 2, color[2] // 2)

        if "player" in name or "enemy" in name:
            # Simple character: body and head
            margin = width // 8
            draw.ellipse(
                [margin, height // 3, width - margin - 1, height - 2],
                fill=color,
                outline=outline,
            )
            head = width // 3
            head_x = width // 2 - head // 2
            draw.ellipse(
                [head_x, height // 8, head_x + head, height // 8 + head],
                fill=color,
                outline=outline,
            )
        elif "coin" in name:
            draw.ellipse([1, 1, width - 2, height - 2], fill=color, outline=outline)
        else:
            draw.rectangle([0, 0, width - 1, height - 1], fill=color, outline=outline)

        output_path = self.output_dir / f"{name}.png"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        img.save(output_path)
        return output_path


def generate_placeholders(
    names: Iterable[str],
    output_dir: Optional[Path] = None,
    tile_size: int = 32,
) -> dict[str, Path]:
    """Convenience function to generate placeholder tiles.

    Args:
        names: Sprite names to generate.
        output_dir: Output directory.
        tile_size: Tile edge length in pixels.

    Returns:
        Dictionary of sprite name to generated file path.
    """
    generator = PlaceholderGenerator(output_dir, tile_size=tile_size)
    return generator.generate(names)
