"""Source sprite discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from spritepress.errors import BuildError, NotFoundError
from spritepress.types import SpriteAsset

logger = logging.getLogger("spritepress.assets.scanner")

DEFAULT_EXTENSIONS = (".png",)


def _normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        normalized.append(ext)
    return tuple(normalized)


class AssetScanner:
    """Enumerates sprite files in a directory in a stable order."""

    def __init__(
        self,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        recursive: bool = False,
        tile_size: int = 32,
    ):
        """Initialize the scanner.

        Args:
            extensions: File extensions to accept, with or without the dot.
            recursive: Also look inside sub-folders.
            tile_size: Tile size recorded on each SpriteAsset.
        """
        self.extensions = _normalize_extensions(extensions)
        self.recursive = recursive
        self.tile_size = tile_size

    def scan(self, directory: Path | str) -> list[SpriteAsset]:
        """List sprites under a directory.

        Sprites are sorted by filename, then by path relative to the
        directory, so the order never depends on the filesystem.

        Args:
            directory: Folder holding the source images.

        Returns:
            Ordered SpriteAssets; empty if nothing matches.

        Raises:
            NotFoundError: If the directory does not exist.
            BuildError: If the directory cannot be read.
        """
        root = Path(directory)
        if not root.is_dir():
            raise NotFoundError("scan", root, what="source directory")

        try:
            candidates = root.rglob("*") if self.recursive else root.iterdir()
            matches = [
                path
                for path in candidates
                if path.is_file() and self._accepts(path.relative_to(root))
            ]
        except OSError as exc:
            raise BuildError("scan", f"cannot read source directory {root}: {exc}", subject=str(root)) from exc
        matches.sort(key=lambda p: (p.name, p.relative_to(root).as_posix()))

        sprites = [SpriteAsset(name=p.stem, path=p, tile_size=self.tile_size) for p in matches]
        logger.debug("[SCAN] %d sprite(s) in %s", len(sprites), root)
        return sprites

    def _accepts(self, relative: Path) -> bool:
        if any(part.startswith(".") for part in relative.parts):
            return False
        return relative.suffix.lower() in self.extensions


def scan(
    directory: Path | str,
    extensions: Optional[Iterable[str]] = None,
    recursive: bool = False,
    tile_size: int = 32,
) -> list[SpriteAsset]:
    """Convenience function to scan a directory.

    Args:
        directory: Folder holding the source images.
        extensions: Accepted extensions (defaults to PNG).
        recursive: Also look inside sub-folders.
        tile_size: Tile size recorded on each SpriteAsset.

    Returns:
        Ordered SpriteAssets.
    """
    scanner = AssetScanner(extensions or DEFAULT_EXTENSIONS, recursive=recursive, tile_size=tile_size)
    return scanner.scan(directory)
