"""Sheet packing and manifest pipeline for spritepress."""

from __future__ import annotations

from .compositor import (
    COMPOSITORS,
    Compositor,
    MontageCompositor,
    PillowCompositor,
    get_compositor,
)
from .packer import SpriteSheetPacker, compute_geometry
from .manifest import ManifestGenerator, css_class_name
from .staging import ArtifactTransaction, atomic_write_text

__all__ = [
    "COMPOSITORS",
    "Compositor",
    "MontageCompositor",
    "PillowCompositor",
    "get_compositor",
    "SpriteSheetPacker",
    "compute_geometry",
    "ManifestGenerator",
    "css_class_name",
    "ArtifactTransaction",
    "atomic_write_text",
]
