"""Sprite, sheet and manifest types."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class SpriteAsset:
    """A single source image identified by its stripped filename."""

    name: str
    path: Path
    tile_size: int

    def __post_init__(self):
        if isinstance(self.path, str):
            object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True)
class TileGeometry:
    """Placement of one sprite inside the sheet grid."""

    index: int
    column: int
    row: int
    x: int  # offset, <= 0
    y: int  # offset, <= 0


@dataclass
class SpriteSheet:
    """An ordered set of sprites laid out on a fixed grid."""

    sprites: list[SpriteAsset]
    columns: int
    tile_size: int
    output_path: Path
    geometry: list[TileGeometry] = field(default_factory=list)

    def __post_init__(self):
        if isinstance(self.output_path, str):
            self.output_path = Path(self.output_path)

    @property
    def rows(self) -> int:
        """Number of tile rows, counting a partially filled last row."""
        return math.ceil(len(self.sprites) / self.columns)

    @property
    def width(self) -> int:
        return self.columns * self.tile_size

    @property
    def height(self) -> int:
        return self.rows * self.tile_size


@dataclass
class PositionManifest:
    """Sprite name to pixel offset table, with its stylesheet and data forms.

    Both representations read from ``offsets``; neither recomputes positions.
    ``sheet_path`` is the sheet as seen from the data form.
    ``stylesheet_sheet_path`` overrides it for the stylesheet when the two
    files live in different folders.
    """

    sheet_path: str
    tile_size: int
    columns: int
    rows: int
    offsets: dict[str, tuple[int, int]]
    class_names: dict[str, str] = field(default_factory=dict)
    stylesheet_sheet_path: Optional[str] = None

    def to_stylesheet(self) -> str:
        """Render one CSS rule per sprite, in sheet order.

        Returns:
            Stylesheet text ending with a newline.
        """
        sheet_ref = self.stylesheet_sheet_path or self.sheet_path
        lines = []
        for name, (x, y) in self.offsets.items():
            css_class = self.class_names.get(name, name)
            lines.append(
                f'.{css_class} {{ background: url("{sheet_ref}") {x}px {y}px no-repeat; '
                f"width: {self.tile_size}px; height: {self.tile_size}px; }}"
            )
        return "\n".join(lines) + "\n"

    def to_data(self) -> dict[str, Any]:
        """Structured form for a runtime renderer.

        Returns:
            Dictionary with sheet metadata and a name -> {x, y} mapping.
        """
        return {
            "sheet": self.sheet_path,
            "tileSize": self.tile_size,
            "columns": self.columns,
            "rows": self.rows,
            "sprites": {name: {"x": x, "y": y} for name, (x, y) in self.offsets.items()},
        }

    def to_json(self) -> str:
        """Serialize the data form deterministically."""
        return json.dumps(self.to_data(), indent=2) + "\n"
