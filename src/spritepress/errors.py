"""Build error taxonomy.

Every error raised while building carries the pipeline stage that failed
(``scan``, ``pack``, ``manifest``, ``render`` or ``commit``) and the asset or
key involved, so a single message tells the user where to look.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence


class BuildError(Exception):
    """Base class for all build failures."""

    def __init__(self, stage: str, message: str, subject: Optional[str] = None):
        """Initialize the error.

        Args:
            stage: Pipeline stage that failed.
            message: Human-readable description.
            subject: The asset path or key the failure is about.
        """
        super().__init__(f"[{stage}] {message}")
        self.stage = stage
        self.message = message
        self.subject = subject

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class NotFoundError(BuildError, FileNotFoundError):
    """A source directory, sprite or template does not exist."""

    def __init__(self, stage: str, path: Path | str, what: str = "path"):
        super().__init__(stage, f"{what} not found: {path}", subject=str(path))
        self.path = Path(path)


class MissingKeyError(BuildError, KeyError):
    """A template placeholder has no value in the render context."""

    def __init__(self, key: str, source: Optional[str] = None):
        where = f" in {source}" if source else ""
        super().__init__("render", f"missing value for placeholder '{key}'{where}", subject=key)
        self.key = key
        self.source = source


class TemplateSyntaxError(BuildError):
    """A template contains an unterminated or empty placeholder."""

    def __init__(self, message: str, position: int, source: Optional[str] = None):
        where = f"{source}:" if source else "offset "
        super().__init__("render", f"{message} at {where}{position}", subject=source)
        self.position = position


class NameCollisionError(BuildError):
    """Two distinct source files reduce to the same sprite identity."""

    def __init__(self, name: str, paths: Sequence[Path | str]):
        joined = ", ".join(str(p) for p in paths)
        super().__init__("manifest", f"sprite name '{name}' is used by more than one file: {joined}", subject=name)
        self.name = name
        self.paths = [Path(p) for p in paths]


class CompositeToolError(BuildError):
    """The compositing backend failed or is unavailable."""

    def __init__(self, message: str, assets: Iterable[Path | str] = ()):
        self.assets = [Path(p) for p in assets]
        names = ", ".join(p.stem for p in self.assets)
        detail = f"{message} (assets: {names})" if names else message
        super().__init__("pack", detail, subject=names or None)


class ArtifactWriteError(BuildError, OSError):
    """Writing, renaming or restoring an output artifact failed."""

    def __init__(self, stage: str, path: Path | str, reason: object):
        super().__init__(stage, f"could not write {path}: {reason}", subject=str(path))
        self.path = Path(path)
