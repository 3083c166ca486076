#!/usr/bin/env python3
"""
Create test images for Poster Atlas.

Run directly to fill an images/ directory with sample posters of different
shapes, or import the helpers from the tests.
"""

import sys
from pathlib import Path
from typing import Tuple

from PIL import Image, ImageDraw, ImageFont

# (name, width, height, colour): tall, wide, square, exact 9:16
SAMPLE_POSTERS = [
    ("poster_tall.png", 600, 1200, "red"),
    ("poster_wide.jpg", 1600, 900, "blue"),
    ("poster_square.png", 800, 800, "green"),
    ("poster_9x16.jpeg", 450, 800, "purple"),
]


def create_test_image(path: Path, width: int, height: int, color="red",
                      border: bool = False) -> Path:
    """
    Create a solid-colour image, saved in the format given by its suffix.

    Args:
        path: Output file path (.png, .jpg or .jpeg)
        width: Image width in pixels
        height: Image height in pixels
        color: Fill colour
        border: Draw a labelled black border, for manual inspection

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    img = Image.new('RGB', (width, height), color=color)
    if border:
        draw = ImageDraw.Draw(img)
        font = ImageFont.load_default()
        draw.text((10, 10), f"{path.stem}\n{width}x{height}", fill='white', font=font)
        draw.rectangle([0, 0, width - 1, height - 1], outline='black', width=3)

    if path.suffix.lower() in ('.jpg', '.jpeg'):
        img.save(path, format='JPEG', quality=95)
    else:
        img.save(path, format='PNG')
    return path


def create_corrupt_image(path: Path) -> Path:
    """Write a file with an image extension that Pillow cannot decode."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\x89PNG\r\n\x1a\nthis is not really a png")
    return path


def create_test_scenario(output_dir: Path, posters=SAMPLE_POSTERS) -> Tuple[Path, ...]:
    """Create the sample posters in a directory."""
    created = []
    for name, width, height, color in posters:
        created.append(create_test_image(Path(output_dir) / name, width, height, color, border=True))
        print(f"Created: {created[-1]} ({width}x{height})")
    return tuple(created)


def main():
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("images")
    print(f"Creating sample posters in {output_dir}")
    create_test_scenario(output_dir)
    print("\nBuild the atlas with:")
    print("  python create_atlas.py")


if __name__ == "__main__":
    main()
