"""Command-line entry point for running a build."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from spritepress.errors import BuildError
from spritepress.pipeline import COMPOSITORS, get_compositor

from .config import BuildConfig, load_config
from .orchestrator import BuildOrchestrator


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="spritepress",
        description="Pack sprite images into a sheet, write its CSS/JSON manifest and render pages.",
    )
    parser.add_argument("source_dir", nargs="?", help="Directory of sprite images")
    parser.add_argument("output_dir", nargs="?", help="Directory for built artifacts")
    parser.add_argument("--config", type=Path, help="JSON build config file")
    parser.add_argument("--tile-size", type=int, help="Tile edge length in pixels (default: 32)")
    parser.add_argument("--columns", type=int, help="Tiles per row (default: 8)")
    parser.add_argument(
        "--ext",
        action="append",
        dest="extensions",
        help="Sprite file extension, may be repeated (default: .png)",
    )
    parser.add_argument("--recursive", action="store_true", help="Scan sub-folders too")
    parser.add_argument(
        "--compositor",
        choices=sorted(COMPOSITORS),
        default="pillow",
        help="Compositing backend (default: pillow)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set up root logging for command-line use."""
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    """Merge the config file (if any) with command-line overrides.

    Raises:
        ValueError: If required settings are missing or invalid.
    """
    overrides = {}
    if args.tile_size is not None:
        overrides["tile_size"] = args.tile_size
    if args.columns is not None:
        overrides["columns"] = args.columns
    if args.extensions:
        overrides["extensions"] = tuple(args.extensions)
    if args.recursive:
        overrides["recursive"] = True
    if args.source_dir:
        overrides["source_dir"] = Path(args.source_dir)
    if args.output_dir:
        overrides["output_dir"] = Path(args.output_dir)

    if args.config is not None:
        config = load_config(args.config)
        # replace() re-runs __post_init__ validation
        return replace(config, **overrides)

    if "source_dir" not in overrides or "output_dir" not in overrides:
        raise ValueError("source_dir and output_dir are required without --config")
    return BuildConfig(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a full build.

    Args:
        argv: Arguments, defaults to ``sys.argv[1:]``.

    Returns:
        Process exit code: 0 on success, 1 on build failure, 2 on bad usage.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        config = config_from_args(args)
    except FileNotFoundError as exc:
        print(f"error: config file not found: {exc.filename}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    orchestrator = BuildOrchestrator(config, compositor=get_compositor(args.compositor))
    try:
        result = orchestrator.run()
    except BuildError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("error: build cancelled", file=sys.stderr)
        return 130

    state = "updated" if result.changed else "up to date"
    print(f"Built {len(result.sprites)} sprite(s) into {config.sheet_path} ({state})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
