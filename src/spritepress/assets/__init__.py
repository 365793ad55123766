"""Source asset discovery for spritepress."""

from __future__ import annotations

from .scanner import AssetScanner, DEFAULT_EXTENSIONS, scan
from .placeholder_generator import PlaceholderGenerator, generate_placeholders

__all__ = [
    "AssetScanner",
    "DEFAULT_EXTENSIONS",
    "scan",
    "PlaceholderGenerator",
    "generate_placeholders",
]
