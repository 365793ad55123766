"""Placeholder substitution for page templates.

Templates contain ``{{name}}`` tokens and nothing else: no loops,
conditionals or expressions. Rendering is a single left-to-right pass, so a
substituted value is never scanned again and ``{{a}}`` can never match part
of ``{{ab}}``.
"""

from __future__ import annotations

import logging
from typing import Iterator, Union

from spritepress.errors import MissingKeyError, TemplateSyntaxError
from spritepress.types import RenderContext, TemplateDocument

logger = logging.getLogger("spritepress.templating.engine")

OPEN = "{{"
CLOSE = "}}"


def _tokens(text: str, source: str | None) -> Iterator[tuple[int, int, str]]:
    """Yield (start, end, identifier) for each placeholder, left to right."""
    pos = 0
    while True:
        start = text.find(OPEN, pos)
        if start < 0:
            return
        end = text.find(CLOSE, start + len(OPEN))
        if end < 0:
            raise TemplateSyntaxError("unterminated placeholder", start, source)
        identifier = text[start + len(OPEN):end].strip()
        if not identifier:
            raise TemplateSyntaxError("empty placeholder", start, source)
        yield start, end + len(CLOSE), identifier
        pos = end + len(CLOSE)


class TemplateEngine:
    """Renders TemplateDocuments against a context mapping."""

    def render(
        self,
        document: Union[TemplateDocument, str],
        context: RenderContext,
    ) -> str:
        """Substitute every placeholder in the document.

        Args:
            document: Template text or TemplateDocument.
            context: Placeholder identifier to replacement text.

        Returns:
            The rendered text.

        Raises:
            MissingKeyError: If a placeholder has no value (or ``None``).
            TemplateSyntaxError: If a ``{{`` is never closed or is empty.
        """
        if isinstance(document, str):
            document = TemplateDocument(text=document)
        text = document.text
        source = document.label

        parts: list[str] = []
        pos = 0
        for start, end, identifier in _tokens(text, source):
            value = context.get(identifier)
            if value is None:
                raise MissingKeyError(identifier, source)
            parts.append(text[pos:start])
            parts.append(str(value))
            pos = end
        parts.append(text[pos:])

        logger.debug("[RENDER] Rendered %s", source or "<inline>")
        return "".join(parts)

    def placeholders(self, document: Union[TemplateDocument, str]) -> list[str]:
        """List placeholder identifiers in order of first appearance.

        Args:
            document: Template text or TemplateDocument.

        Returns:
            Unique identifiers.
        """
        if isinstance(document, str):
            document = TemplateDocument(text=document)
        seen: dict[str, None] = {}
        for _, _, identifier in _tokens(document.text, document.label):
            seen.setdefault(identifier, None)
        return list(seen)


_default_engine = TemplateEngine()


def render(document: Union[TemplateDocument, str], context: RenderContext) -> str:
    """Render a document with the shared engine."""
    return _default_engine.render(document, context)
