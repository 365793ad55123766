"""Loading and rendering HTML pages from template files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from spritepress.errors import BuildError, NotFoundError
from spritepress.types import TemplateDocument

from .engine import TemplateEngine

logger = logging.getLogger("spritepress.templating.pages")


def load_document(path: Path | str) -> TemplateDocument:
    """Read a template from disk.

    Args:
        path: Template file.

    Returns:
        A fresh TemplateDocument.

    Raises:
        NotFoundError: If the file does not exist.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError("render", path, what="template") from exc
    except OSError as exc:
        raise BuildError("render", f"cannot read template {path}: {exc}", subject=str(path)) from exc
    return TemplateDocument(text=text, source=path)


@dataclass
class PageSpec:
    """One page to render: template file, output name and its own context."""

    template: Path
    output: Path
    context: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.template, str):
            self.template = Path(self.template)
        if isinstance(self.output, str):
            self.output = Path(self.output)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_dir: Optional[Path] = None) -> "PageSpec":
        """Build a PageSpec from config data.

        Args:
            data: Mapping with ``template``, optional ``output`` and ``context``.
            base_dir: Directory relative template paths are resolved against.

        Returns:
            The PageSpec.
        """
        template = Path(data["template"])
        if base_dir is not None and not template.is_absolute():
            template = base_dir / template
        output = Path(data.get("output") or template.with_suffix(".html").name)
        context = {str(k): str(v) for k, v in dict(data.get("context") or {}).items()}
        return cls(template=template, output=output, context=context)


class PageRenderer:
    """Renders PageSpecs with a shared build context."""

    def __init__(self, engine: Optional[TemplateEngine] = None):
        """Initialize the renderer.

        Args:
            engine: Template engine to use.
        """
        self.engine = engine or TemplateEngine()

    def render_page(self, page: PageSpec, build_context: Mapping[str, str]) -> str:
        """Render one page.

        The template is re-read on every call. Keys in the page's own context
        take precedence over the build context.

        Args:
            page: The page to render.
            build_context: Values every page can use.

        Returns:
            Rendered HTML.
        """
        document = load_document(page.template)
        context = {**build_context, **page.context}
        logger.info("[RENDER] %s -> %s", page.template, page.output)
        return self.engine.render(document, context)
