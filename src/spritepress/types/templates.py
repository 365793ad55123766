"""Template document types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Placeholder identifier -> replacement text.
RenderContext = Mapping[str, str]


@dataclass(frozen=True)
class TemplateDocument:
    """Raw template text and where it came from."""

    text: str
    source: Optional[Path] = None

    @property
    def label(self) -> Optional[str]:
        """Source name used in error messages."""
        return str(self.source) if self.source is not None else None
