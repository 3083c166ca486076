#!/usr/bin/env python3
"""
Tests for the placement geometry: fit size, cell lookup and centering.
"""

import pytest

from posteratlas.geometry import (
    CanvasSpec,
    Placement,
    TargetBox,
    compute_cell_origin,
    compute_centered_offset,
    compute_fit_size,
    placement_fits,
    plan_placement,
    target_region,
)


@pytest.fixture
def canvas_spec():
    return CanvasSpec()


@pytest.fixture
def target(canvas_spec):
    return TargetBox.for_canvas(canvas_spec)


def test_default_canvas_and_target_box(canvas_spec, target):
    assert canvas_spec.size == (2024, 2048)
    assert (canvas_spec.cell_width, canvas_spec.cell_height) == (1012, 1024)
    assert canvas_spec.capacity == 4
    assert target.ratio == 9 / 16
    assert (target.width, target.height) == (576, 1024)


def test_canvas_must_divide_evenly_into_grid():
    with pytest.raises(ValueError):
        CanvasSpec(width=2025, height=2048)
    with pytest.raises(ValueError):
        CanvasSpec(width=2024, height=2047)


@pytest.mark.parametrize("width,height", [(0, 2048), (2024, -2)])
def test_canvas_rejects_non_positive_size(width, height):
    with pytest.raises(ValueError):
        CanvasSpec(width=width, height=height)


def test_target_box_wider_than_cell_is_rejected():
    narrow = CanvasSpec(width=200, height=2048)
    with pytest.raises(ValueError):
        TargetBox.for_canvas(narrow)


def test_target_box_width_is_floored():
    # cell height 1000 -> 562.5 wide
    box = TargetBox.for_canvas(CanvasSpec(width=2024, height=2000))
    assert (box.width, box.height) == (562, 1000)


@pytest.mark.parametrize("native,expected", [
    ((200, 100), (576, 288)),     # wide: width constrained
    ((100, 200), (512, 1024)),    # taller than 9:16: height constrained
    ((300, 300), (576, 576)),     # square is wider than 9:16
    ((450, 800), (576, 1024)),    # exactly 9:16 takes the height branch
    ((9, 16), (576, 1024)),       # small images are enlarged
    ((4000, 8000), (512, 1024)),  # large images are reduced
])
def test_compute_fit_size_branches(target, native, expected):
    assert compute_fit_size(native[0], native[1], target) == expected


def test_compute_fit_size_clamps_degenerate_axis(target):
    assert compute_fit_size(100000, 1, target) == (576, 1)
    assert compute_fit_size(1, 100000, target) == (1, 1024)


@pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-5, 100)])
def test_compute_fit_size_rejects_invalid_dimensions(target, width, height):
    with pytest.raises(ValueError):
        compute_fit_size(width, height, target)


def test_compute_fit_size_fits_without_cropping(target):
    for width in range(1, 3000, 37):
        for height in range(1, 3000, 53):
            fit_w, fit_h = compute_fit_size(width, height, target)

            assert fit_w <= target.width and fit_h <= target.height
            assert fit_w == target.width or fit_h == target.height

            if fit_w == target.width and width / height > target.ratio:
                assert abs(fit_h - fit_w * height / width) <= 1
            else:
                assert abs(fit_w - fit_h * width / height) <= 1


def test_cell_origins_follow_arrival_order(canvas_spec):
    origins = [compute_cell_origin(i, canvas_spec) for i in range(4)]
    assert origins == [(0, 0), (1012, 0), (0, 1024), (1012, 1024)]


@pytest.mark.parametrize("index", [-1, 4, 10])
def test_cell_origin_rejects_out_of_range_slot(canvas_spec, index):
    with pytest.raises(IndexError):
        compute_cell_origin(index, canvas_spec)


def test_centered_offset_full_height_image(canvas_spec, target):
    # (1012 - 576) // 2 = 218
    assert compute_centered_offset((0, 0), target, canvas_spec, (576, 1024)) == (218, 0)
    assert compute_centered_offset((0, 0), target, canvas_spec, (512, 1024)) == (250, 0)


def test_centered_offset_wide_image_in_last_cell(canvas_spec, target):
    origin = compute_cell_origin(3, canvas_spec)
    assert compute_centered_offset(origin, target, canvas_spec, (576, 288)) == (1230, 1392)


def test_centered_offset_even_padding_is_symmetric(canvas_spec, target):
    x, y = compute_centered_offset((0, 0), target, canvas_spec, (500, 1000))
    box_x = (canvas_spec.cell_width - target.width) // 2
    left = x - box_x
    right = target.width - 500 - left
    top = y
    bottom = target.height - 1000 - top
    assert (left, right) == (38, 38)
    assert (top, bottom) == (12, 12)


def test_centered_offset_odd_padding_biases_top_left():
    canvas_spec = CanvasSpec(width=2026, height=2048)  # 1013px cells
    target = TargetBox.for_canvas(canvas_spec)
    x, y = compute_centered_offset((0, 0), target, canvas_spec, (575, 1023))

    box_x = (1013 - 576) // 2
    assert box_x == 218  # 219 px remain on the right of the box
    assert x == box_x  # 1px of padding, all on the right
    assert y == 0


def test_slot_assignment_independent_of_content(canvas_spec, target):
    sizes = [(100, 200), (300, 300), (200, 100), (9, 16)]
    placements = [plan_placement(i, f"img{i}", size, canvas_spec, target) for i, size in enumerate(sizes)]
    assert [(p.row, p.col) for p in placements] == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_plan_placement(canvas_spec, target):
    placement = plan_placement(2, "tall.png", (100, 200), canvas_spec, target)
    assert placement == Placement(index=2, name="tall.png", fit_width=512, fit_height=1024,
                                  x=250, y=1024, columns=2)
    assert placement.fit_size == (512, 1024)
    assert placement.box == (250, 1024, 762, 2048)


def test_target_region_bounds(canvas_spec, target):
    assert target_region(1, canvas_spec, target).bounds == (1230.0, 0.0, 1806.0, 1024.0)


def test_placement_fits_target_box(canvas_spec, target):
    for i, size in enumerate([(100, 200), (300, 300), (200, 100), (9, 16)]):
        assert placement_fits(plan_placement(i, "x", size, canvas_spec, target), canvas_spec, target)

    shifted = Placement(index=0, name="x", fit_width=576, fit_height=1024, x=219, y=0,
                        columns=2)
    assert not placement_fits(shifted, canvas_spec, target)
