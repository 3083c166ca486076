#!/usr/bin/env python3
"""
Tests for decoding, resizing and compositing.
"""

import numpy as np
import pytest
from PIL import Image

from create_test_files import create_corrupt_image, create_test_image
from posteratlas.builder import SlotResult
from posteratlas.errors import DecodeError, EncodeWriteError
from posteratlas.geometry import CanvasSpec, Placement
from posteratlas.loader import SourceFile
from posteratlas.render import (
    assemble,
    create_canvas,
    decode_image,
    parse_background,
    resize_image,
    save_png,
)

WHITE = (255, 255, 255, 255)


def _source(path):
    return SourceFile(name=path.name, path=path, data=path.read_bytes())


def test_parse_background():
    assert parse_background("white") == WHITE
    assert parse_background("#102030") == (16, 32, 48, 255)
    assert parse_background("rgb(1, 2, 3)") == (1, 2, 3, 255)
    with pytest.raises(ValueError):
        parse_background("not-a-colour")


def test_decode_image(tmp_path):
    source = _source(create_test_image(tmp_path / "a.jpg", 120, 80, color="green"))

    decoded = decode_image(source)

    assert decoded.name == "a.jpg"
    assert decoded.size == (120, 80)


def test_decode_corrupt_image(tmp_path):
    source = _source(create_corrupt_image(tmp_path / "bad.png"))

    with pytest.raises(DecodeError) as excinfo:
        decode_image(source)

    assert excinfo.value.name == "bad.png"
    assert excinfo.value.stage == "decode"
    assert "bad.png" in str(excinfo.value)


def test_decode_truncated_image(tmp_path):
    path = create_test_image(tmp_path / "cut.png", 300, 300, color="red")
    data = path.read_bytes()
    source = SourceFile(name="cut.png", path=path, data=data[: len(data) // 2])

    with pytest.raises(DecodeError):
        decode_image(source)


def test_resize_image_upscales_to_fit_size(tmp_path):
    decoded = decode_image(_source(create_test_image(tmp_path / "small.png", 9, 16, color="blue")))

    resized = resize_image(decoded, (576, 1024))

    assert resized.mode == "RGBA"
    assert resized.size == (576, 1024)
    assert resized.getpixel((288, 512)) == (0, 0, 255, 255)


def test_create_canvas():
    canvas = create_canvas(CanvasSpec(width=20, height=40), (1, 2, 3, 255))
    assert canvas.mode == "RGBA"
    assert canvas.size == (20, 40)
    assert canvas.getpixel((19, 39)) == (1, 2, 3, 255)


def test_assemble_without_slots_is_background_only():
    spec = CanvasSpec()
    canvas = assemble(spec, WHITE, [])

    pixels = np.asarray(canvas)
    assert pixels.shape == (2048, 2024, 4)
    assert (pixels == WHITE).all()


def test_assemble_skips_failed_slots():
    spec = CanvasSpec(width=200, height=200)
    placed = Placement(index=0, name="red.png", fit_width=50, fit_height=80, x=25, y=10,
                       columns=2)
    slots = [
        SlotResult(index=0, name="red.png", placement=placed,
                   image=Image.new("RGBA", (50, 80), (255, 0, 0, 255))),
        SlotResult(index=1, name="bad.png", error=DecodeError("broken", name="bad.png", stage="decode")),
    ]

    pixels = np.asarray(assemble(spec, WHITE, slots))

    assert (pixels[10:90, 25:75] == (255, 0, 0, 255)).all()
    assert (pixels[:, 100:] == WHITE).all()
    assert (pixels[:10, :] == WHITE).all()


def test_assemble_composites_over_background():
    spec = CanvasSpec(width=100, height=100)
    placed = Placement(index=0, name="clear.png", fit_width=20, fit_height=20, x=0, y=0,
                       columns=2)
    clear = Image.new("RGBA", (20, 20), (0, 0, 0, 0))

    canvas = assemble(spec, WHITE, [SlotResult(index=0, name="clear.png", placement=placed, image=clear)])

    assert canvas.getpixel((5, 5)) == WHITE


def test_save_png(tmp_path):
    path = tmp_path / "out.png"
    save_png(Image.new("RGBA", (8, 8), WHITE), path)

    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size == (8, 8)


def test_save_png_missing_directory(tmp_path):
    with pytest.raises(EncodeWriteError):
        save_png(Image.new("RGBA", (8, 8), WHITE), tmp_path / "missing" / "out.png")
