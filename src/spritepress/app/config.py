"""Build configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from spritepress.assets.scanner import DEFAULT_EXTENSIONS
from spritepress.templating.pages import PageSpec


@dataclass
class BuildConfig:
    """Everything one build needs, passed explicitly to the orchestrator."""

    source_dir: Path
    output_dir: Path
    tile_size: int = 32
    columns: int = 8
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    recursive: bool = False
    sheet_name: str = "sprites.png"
    stylesheet_name: str = "sprites.css"
    manifest_name: str = "sprites.json"
    class_prefix: str = "sprite"
    pages: list[PageSpec] = field(default_factory=list)

    def __post_init__(self):
        if isinstance(self.source_dir, str):
            self.source_dir = Path(self.source_dir)
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if isinstance(self.extensions, str):
            self.extensions = (self.extensions,)
        self.extensions = tuple(self.extensions)
        for name in ("tile_size", "columns"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @property
    def sheet_path(self) -> Path:
        return self.output_dir / self.sheet_name

    @property
    def stylesheet_path(self) -> Path:
        return self.output_dir / self.stylesheet_name

    @property
    def manifest_path(self) -> Path:
        return self.output_dir / self.manifest_name

    def page_output(self, page: PageSpec) -> Path:
        """Where a rendered page is written."""
        return page.output if page.output.is_absolute() else self.output_dir / page.output

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_dir: Optional[Path] = None) -> "BuildConfig":
        """Create a config from a mapping, e.g. parsed JSON.

        Args:
            data: Config values; unknown keys are rejected.
            base_dir: Directory relative paths are resolved against.

        Returns:
            The BuildConfig.

        Raises:
            ValueError: On unknown keys or missing directories.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        for required in ("source_dir", "output_dir"):
            if required not in data:
                raise ValueError(f"Missing config key: {required}")

        values = dict(data)
        for key in ("source_dir", "output_dir"):
            path = Path(values[key])
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            values[key] = path
        if "extensions" in values:
            values["extensions"] = tuple(values["extensions"])
        values["pages"] = [PageSpec.from_dict(p, base_dir) for p in values.get("pages", [])]
        return cls(**values)


def load_config(path: Path | str) -> BuildConfig:
    """Load a JSON build config.

    Relative paths inside the file are resolved against its folder.

    Args:
        path: Config file path.

    Returns:
        The BuildConfig.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return BuildConfig.from_dict(data, base_dir=path.parent)
