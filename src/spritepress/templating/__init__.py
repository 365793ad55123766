"""Template rendering for spritepress."""

from __future__ import annotations

from .engine import TemplateEngine, render
from .pages import PageRenderer, PageSpec, load_document

__all__ = [
    "TemplateEngine",
    "render",
    "PageRenderer",
    "PageSpec",
    "load_document",
]
