from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple

from PIL import Image, ImageColor

from .errors import DecodeError, EncodeWriteError, ResizeError
from .geometry import CanvasSpec
from .loader import SourceFile

DEFAULT_BACKGROUND = "white"

RGBA = Tuple[int, int, int, int]


@dataclass
class SourceImage:
    """Decoded source image with its native pixel size."""
    name: str
    width: int
    height: int
    image: Image.Image

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


def parse_background(value: str) -> RGBA:
    """
    Parse a Pillow colour string into a fully opaque RGBA tuple.

    Args:
        value: Colour name, hex (#rrggbb) or rgb() string

    Returns:
        (r, g, b, 255)
    """
    rgb = ImageColor.getrgb(value)
    return rgb[0], rgb[1], rgb[2], 255


def decode_image(source: SourceFile) -> SourceImage:
    """Decode raw image bytes, forcing a full pixel load."""
    try:
        img = Image.open(io.BytesIO(source.data))
        img.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Cannot decode image: {e}", name=source.name, stage="decode") from e

    width, height = img.size
    logging.debug(f"Decoded {source.name}: {width}x{height} {img.mode}")
    return SourceImage(name=source.name, width=width, height=height, image=img)


def resize_image(source: SourceImage, fit_size: Tuple[int, int]) -> Image.Image:
    """
    Resize a decoded image to exactly its fit size.

    The fit size already preserves the native aspect ratio, so the whole image
    is kept. Enlargement is allowed.
    """
    fit_width, fit_height = fit_size
    try:
        rgba = source.image.convert("RGBA")
        resized = rgba.resize((fit_width, fit_height), Image.LANCZOS)
    except (OSError, ValueError) as e:
        raise ResizeError(f"Cannot resize to {fit_width}x{fit_height}: {e}",
                          name=source.name, stage="resize") from e

    logging.debug(f"Resized {source.name}: {source.width}x{source.height} -> {fit_width}x{fit_height}")
    return resized


def create_canvas(canvas_spec: CanvasSpec, background: RGBA) -> Image.Image:
    logging.debug(f"Creating canvas: {canvas_spec.width}x{canvas_spec.height} RGBA, background={background}")
    return Image.new("RGBA", canvas_spec.size, color=background)


def assemble(canvas_spec: CanvasSpec, background: RGBA, slot_results: Iterable) -> Image.Image:
    """
    Compose resized images onto a background canvas.

    Slots are drawn in order. A slot that failed earlier is skipped and its
    cell keeps the background colour.

    Args:
        canvas_spec: Canvas size
        background: Opaque RGBA fill
        slot_results: SlotResult items in slot order

    Returns:
        Composed RGBA canvas
    """
    base = create_canvas(canvas_spec, background)

    placed = 0
    for slot in slot_results:
        if not slot.ok:
            logging.warning(f"Skipping {slot.name} in slot {slot.index}: {slot.error}")
            continue

        pl = slot.placement
        base.alpha_composite(slot.image, dest=(pl.x, pl.y))
        placed += 1
        logging.info(f"Placing {pl.name} at position ({pl.x}, {pl.y}) - size: {pl.fit_width}x{pl.fit_height}")

    logging.info(f"Composed {placed} image(s) onto {canvas_spec.width}x{canvas_spec.height} canvas")
    return base


def save_png(img: Image.Image, path: Path) -> None:
    try:
        img.save(path, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeWriteError(f"Cannot write atlas {path}: {e}", stage="writing") from e
    logging.info(f"Wrote atlas: {path}")
