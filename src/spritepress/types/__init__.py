"""Type definitions for spritepress."""

from .sprites import (
    SpriteAsset,
    SpriteSheet,
    TileGeometry,
    PositionManifest,
)
from .templates import (
    RenderContext,
    TemplateDocument,
)

__all__ = [
    # Sprites
    "SpriteAsset",
    "SpriteSheet",
    "TileGeometry",
    "PositionManifest",
    # Templates
    "RenderContext",
    "TemplateDocument",
]
