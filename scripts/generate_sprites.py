#!/usr/bin/env python3
"""Generate placeholder sprites for a demo build."""

from pathlib import Path
import sys

# Add src to path for running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spritepress.assets.placeholder_generator import generate_placeholders

DEMO_SPRITES = ["player", "enemy", "grass", "water", "wall", "coin", "tree", "door"]


def main():
    """Generate the demo placeholder sprites."""
    output_dir = Path(__file__).parent.parent / "assets" / "sprites"
    print(f"Generating placeholder sprites in {output_dir}")

    generated = generate_placeholders(DEMO_SPRITES, output_dir, tile_size=32)

    print(f"Generated {len(generated)} sprites:")
    for name, path in generated.items():
        print(f"  - {name}: {path}")


if __name__ == "__main__":
    main()
