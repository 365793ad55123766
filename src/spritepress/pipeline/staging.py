"""Temporary-file-then-rename helpers for build artifacts.

Artifacts are always written next to their final location and moved into
place with ``os.replace`` so readers only ever see complete files.
"""

from __future__ import annotations

import filecmp
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from spritepress.errors import ArtifactWriteError

logger = logging.getLogger("spritepress.pipeline.staging")


def temp_sibling(target: Path, stage: str = "commit") -> Path:
    """Reserve a hidden temporary file beside ``target``.

    The suffix is kept so image backends can infer the output format.

    Args:
        target: Final artifact path.
        stage: Stage reported if the file cannot be created.

    Returns:
        Path of the new, empty temporary file.

    Raises:
        ArtifactWriteError: If the folder or the file cannot be created.
    """
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.stem}.", suffix=target.suffix)
    except OSError as exc:
        raise ArtifactWriteError(stage, target, exc) from exc
    os.close(fd)
    try:
        os.chmod(name, 0o644)
    except OSError as exc:
        discard(Path(name))
        raise ArtifactWriteError(stage, target, exc) from exc
    return Path(name)


def discard(path: Optional[Path]) -> None:
    """Remove a temporary file if it exists."""
    if path is None:
        return
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def promote(temp: Path, target: Path, stage: str) -> None:
    """Atomically move a finished temporary file onto its target.

    Raises:
        ArtifactWriteError: If the rename fails; the temporary is removed.
    """
    try:
        os.replace(temp, target)
    except OSError as exc:
        discard(temp)
        raise ArtifactWriteError(stage, target, exc) from exc


def atomic_write_text(target: Path, text: str, stage: str) -> None:
    """Write text to ``target`` through a temporary sibling."""
    target = Path(target)
    temp = temp_sibling(target, stage)
    try:
        temp.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        discard(temp)
        raise ArtifactWriteError(stage, target, exc) from exc
    promote(temp, target, stage)


class ArtifactTransaction:
    """A set of staged artifacts committed together or not at all.

    Each artifact is written to a temporary sibling first. ``commit`` moves
    them into place one by one, keeping a copy of every file it replaces so
    that a failure part way through can restore the earlier ones.
    """

    def __init__(self, stage: str = "commit"):
        """Initialize an empty transaction.

        Args:
            stage: Stage name reported by commit failures.
        """
        self.stage_name = stage
        self._staged: dict[Path, Path] = {}
        self._closed = False

    @property
    def staged(self) -> dict[Path, Path]:
        """Target path -> temporary path for every staged artifact."""
        return dict(self._staged)

    def stage(self, target: Path | str, stage: Optional[str] = None) -> Path:
        """Reserve a temporary file for ``target``.

        Args:
            target: Final artifact path.
            stage: Stage reported if the file cannot be reserved.

        Returns:
            Temporary path the caller should write to.

        Raises:
            ArtifactWriteError: If the output folder is not writable.
        """
        if self._closed:
            raise RuntimeError("transaction already committed or discarded")
        target = Path(target)
        if target in self._staged:
            discard(self._staged.pop(target))
        temp = temp_sibling(target, stage or self.stage_name)
        self._staged[target] = temp
        return temp

    def stage_text(self, target: Path | str, text: str, stage: Optional[str] = None) -> Path:
        """Stage a text artifact.

        Args:
            target: Final artifact path.
            text: File contents.
            stage: Stage reported if the write fails.

        Returns:
            The temporary path holding the text.
        """
        temp = self.stage(target, stage)
        try:
            temp.write_text(text, encoding="utf-8", newline="\n")
        except OSError as exc:
            raise ArtifactWriteError(stage or self.stage_name, target, exc) from exc
        return temp

    def commit(self) -> tuple[list[Path], list[Path]]:
        """Move every staged artifact into place.

        Artifacts whose bytes already match the existing file are dropped
        without touching the target.

        Returns:
            (written, unchanged) target paths.

        Raises:
            ArtifactWriteError: If any replace fails; earlier replacements
                are rolled back and all temporaries removed.
        """
        if self._closed:
            raise RuntimeError("transaction already committed or discarded")

        written: list[Path] = []
        unchanged: list[Path] = []
        replaced: list[tuple[Path, Optional[Path]]] = []
        current: Optional[Path] = None
        try:
            for target, temp in self._staged.items():
                current = target
                if target.is_file() and filecmp.cmp(target, temp, shallow=False):
                    discard(temp)
                    unchanged.append(target)
                    continue

                backup = None
                if target.exists():
                    backup = temp_sibling(target, self.stage_name)
                    try:
                        shutil.copy2(target, backup)
                    except OSError:
                        discard(backup)
                        raise
                try:
                    os.replace(temp, target)
                except OSError:
                    discard(backup)
                    raise
                replaced.append((target, backup))
                written.append(target)
        except OSError as exc:
            logger.warning("[COMMIT] Failed on %s, rolling back %d artifact(s)", current, len(replaced))
            self._rollback(replaced)
            self.discard()
            if isinstance(exc, ArtifactWriteError):
                raise
            raise ArtifactWriteError(self.stage_name, current, exc) from exc

        for _, backup in replaced:
            discard(backup)
        self._staged.clear()
        self._closed = True
        return written, unchanged

    def discard(self) -> None:
        """Remove every staged temporary file."""
        for temp in self._staged.values():
            discard(temp)
        self._staged.clear()
        self._closed = True

    def _rollback(self, replaced: list[tuple[Path, Optional[Path]]]) -> None:
        for target, backup in reversed(replaced):
            try:
                if backup is not None:
                    os.replace(backup, target)
                else:
                    # Target did not exist before this commit
                    discard(target)
            except OSError as exc:
                logger.error("[COMMIT] Could not restore %s: %s", target, exc)
