"""Build orchestration: scan, pack, manifest and pages as one transaction."""

from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Optional, Sequence

from spritepress.assets import AssetScanner
from spritepress.errors import ArtifactWriteError, BuildError
from spritepress.pipeline import (
    ArtifactTransaction,
    Compositor,
    ManifestGenerator,
    SpriteSheetPacker,
)
from spritepress.templating import PageRenderer, TemplateEngine
from spritepress.types import PositionManifest, SpriteAsset, SpriteSheet, TileGeometry

from .config import BuildConfig

logger = logging.getLogger("spritepress.app.orchestrator")


def _relative_ref(target: Path, from_dir: Path) -> str:
    """Path of ``target`` as referenced from files in ``from_dir``."""
    return Path(os.path.relpath(target, from_dir)).as_posix()


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    sprites: list[SpriteAsset]
    sheet: SpriteSheet
    manifest: PositionManifest
    pages: list[Path] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if any artifact on disk was replaced."""
        return bool(self.written)


class BuildOrchestrator:
    """Runs one complete build from a BuildConfig.

    Either every artifact (sheet, stylesheet, JSON manifest, pages) is
    replaced, or none is. Artifacts whose content did not change are left
    untouched.
    """

    def __init__(
        self,
        config: BuildConfig,
        compositor: Optional[Compositor] = None,
        engine: Optional[TemplateEngine] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Build configuration.
            compositor: Pixel backend for the packer.
            engine: Template engine for page rendering.
        """
        self.config = config
        self.scanner = AssetScanner(
            config.extensions,
            recursive=config.recursive,
            tile_size=config.tile_size,
        )
        self.packer = SpriteSheetPacker(compositor)
        self.manifest_generator = ManifestGenerator(class_prefix=config.class_prefix)
        self.page_renderer = PageRenderer(engine)

    def run(self) -> BuildResult:
        """Run the build to completion.

        Returns:
            The BuildResult.

        Raises:
            BuildError: On any failure; previous outputs are left as they were.
        """
        return asyncio.run(self.run_async())

    async def run_async(self) -> BuildResult:
        """Run the build, compositing and manifest work in parallel.

        Filesystem work runs in worker threads so the event loop stays free.
        Only the final commit, a handful of renames, runs on the loop itself
        so that it cannot be interrupted half way.
        """
        config = self.config
        logger.info("[BUILD] Starting build: %s -> %s", config.source_dir, config.output_dir)

        try:
            sprites = await asyncio.to_thread(self.scanner.scan, config.source_dir)
            geometry = self.packer.layout(sprites, config.tile_size, config.columns)
            result = await self._build(sprites, geometry)
        except BuildError as exc:
            logger.error("[BUILD] Build failed at %s stage: %s", exc.stage, exc.message)
            raise

        logger.info(
            "[BUILD] Done: %d sprite(s), %d artifact(s) written, %d unchanged",
            len(result.sprites), len(result.written), len(result.unchanged),
        )
        return result

    async def _build(
        self,
        sprites: list[SpriteAsset],
        geometry: list[TileGeometry],
    ) -> BuildResult:
        config = self.config
        transaction = ArtifactTransaction()
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="spritepress-build")
        committed = False

        try:
            sheet_temp = transaction.stage(config.sheet_path)
            stylesheet_temp = transaction.stage(config.stylesheet_path)
            manifest_temp = transaction.stage(config.manifest_path)

            pack_job = loop.run_in_executor(
                executor,
                partial(
                    self.packer.pack,
                    sprites,
                    config.tile_size,
                    config.columns,
                    config.sheet_path,
                    promote_output=False,
                    staged_path=sheet_temp,
                ),
            )
            manifest_job = loop.run_in_executor(
                executor,
                partial(self._emit_manifest, sprites, geometry, stylesheet_temp, manifest_temp),
            )
            sheet, manifest = await asyncio.gather(pack_job, manifest_job)

            page_paths = await loop.run_in_executor(
                executor, self._render_pages, transaction, sprites
            )
            written, unchanged = transaction.commit()
            committed = True
        finally:
            if committed:
                executor.shutdown(wait=True)
            else:
                await asyncio.shield(
                    loop.run_in_executor(None, self._abandon, executor, transaction)
                )

        return BuildResult(
            sprites=sprites,
            sheet=sheet,
            manifest=manifest,
            pages=page_paths,
            written=written,
            unchanged=unchanged,
        )

    @staticmethod
    def _abandon(executor: ThreadPoolExecutor, transaction: ArtifactTransaction) -> None:
        # Workers must finish before their temporaries can be removed
        executor.shutdown(wait=True, cancel_futures=True)
        transaction.discard()

    def _emit_manifest(
        self,
        sprites: Sequence[SpriteAsset],
        geometry: Sequence[TileGeometry],
        stylesheet_temp: Path,
        manifest_temp: Path,
    ) -> PositionManifest:
        config = self.config
        manifest = self.manifest_generator.generate(
            sprites,
            config.tile_size,
            config.columns,
            _relative_ref(config.sheet_path, config.manifest_path.parent),
            geometry=geometry,
            stylesheet_sheet_path=_relative_ref(config.sheet_path, config.stylesheet_path.parent),
        )
        for temp, text, target in (
            (stylesheet_temp, manifest.to_stylesheet(), config.stylesheet_path),
            (manifest_temp, manifest.to_json(), config.manifest_path),
        ):
            try:
                temp.write_text(text, encoding="utf-8", newline="\n")
            except OSError as exc:
                raise ArtifactWriteError("manifest", target, exc) from exc
        return manifest

    def _render_pages(
        self,
        transaction: ArtifactTransaction,
        sprites: Sequence[SpriteAsset],
    ) -> list[Path]:
        config = self.config
        outputs = []
        for page in config.pages:
            output = config.page_output(page)
            build_context = {
                "sprite_sheet": _relative_ref(config.sheet_path, output.parent),
                "sprite_stylesheet": _relative_ref(config.stylesheet_path, output.parent),
                "sprite_manifest": _relative_ref(config.manifest_path, output.parent),
                "sprite_count": str(len(sprites)),
                "tile_size": str(config.tile_size),
                "columns": str(config.columns),
            }
            html = self.page_renderer.render_page(page, build_context)
            transaction.stage_text(output, html, stage="render")
            outputs.append(output)
        return outputs


def run_build(config: BuildConfig, compositor: Optional[Compositor] = None) -> BuildResult:
    """Convenience function to run one build.

    Args:
        config: Build configuration.
        compositor: Optional pixel backend.

    Returns:
        The BuildResult.
    """
    return BuildOrchestrator(config, compositor=compositor).run()
