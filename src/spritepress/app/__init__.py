"""Build application package."""

from __future__ import annotations

from .config import BuildConfig, load_config
from .orchestrator import BuildOrchestrator, BuildResult, run_build
from .cli import main

__all__ = [
    "BuildConfig",
    "load_config",
    "BuildOrchestrator",
    "BuildResult",
    "run_build",
    "main",
]
