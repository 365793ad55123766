#!/usr/bin/env python3
"""Run a full asset build.

Usage:
    python scripts/build_assets.py assets/sprites dist --tile-size 32 --columns 8
    python scripts/build_assets.py --config spritepress.json
"""

from pathlib import Path
import sys

# Add src to path for running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spritepress.app.cli import main


if __name__ == "__main__":
    sys.exit(main())
