"""
Placement geometry for the poster atlas.

Every source image goes into one cell of a fixed grid. Inside the cell a
target box with a fixed aspect ratio (9:16) is centered, and the image is
scaled to fit entirely inside that box and centered again within it.

All functions here are pure: they take the canvas and box specs explicitly
and never touch pixels or files.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from shapely.geometry import box as shapely_box
from shapely.geometry import Polygon

ATLAS_WIDTH = 2024
ATLAS_HEIGHT = 2048
GRID_COLUMNS = 2
GRID_ROWS = 2
TARGET_ASPECT_RATIO = 9 / 16


@dataclass(frozen=True)
class CanvasSpec:
    """Atlas canvas size and grid shape."""
    width: int = ATLAS_WIDTH
    height: int = ATLAS_HEIGHT
    columns: int = GRID_COLUMNS
    rows: int = GRID_ROWS

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas dimensions must be positive: {self.width}x{self.height}")
        if self.columns <= 0 or self.rows <= 0:
            raise ValueError(f"Grid shape must be positive: {self.columns}x{self.rows}")
        # Remainder pixels would silently shift cell boundaries
        if self.width % self.columns or self.height % self.rows:
            raise ValueError(f"Canvas {self.width}x{self.height} is not divisible "
                             f"into a {self.columns}x{self.rows} grid")

    @property
    def cell_width(self) -> int:
        return self.width // self.columns

    @property
    def cell_height(self) -> int:
        return self.height // self.rows

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class TargetBox:
    """Fixed aspect-ratio region centered in every cell."""
    ratio: float
    width: int
    height: int

    @classmethod
    def for_canvas(cls, canvas_spec: CanvasSpec, ratio: float = TARGET_ASPECT_RATIO) -> "TargetBox":
        """
        Build the largest box of the given ratio that spans the cell height.

        Args:
            canvas_spec: Canvas the box is placed in
            ratio: Width/height ratio of the box

        Returns:
            TargetBox with height equal to the cell height
        """
        if ratio <= 0:
            raise ValueError(f"Target ratio must be positive: {ratio}")
        height = canvas_spec.cell_height
        width = math.floor(height * ratio)
        if width > canvas_spec.cell_width:
            raise ValueError(f"Target box {width}x{height} is wider than the "
                             f"{canvas_spec.cell_width}px cell")
        return cls(ratio=ratio, width=width, height=height)


@dataclass(frozen=True)
class Placement:
    """Fit size and absolute top-left offset of one image on the canvas."""
    index: int
    name: str
    fit_width: int
    fit_height: int
    x: int
    y: int
    columns: int

    @property
    def row(self) -> int:
        return self.index // self.columns

    @property
    def col(self) -> int:
        return self.index % self.columns

    @property
    def fit_size(self) -> Tuple[int, int]:
        return self.fit_width, self.fit_height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(x0, y0, x1, y1) rectangle covered on the canvas."""
        return self.x, self.y, self.x + self.fit_width, self.y + self.fit_height


def compute_fit_size(native_width: int, native_height: int, target_box: TargetBox) -> Tuple[int, int]:
    """
    Scale an image to fit inside the target box without cropping.

    The image touches the box on its constrained axis and falls short (or
    equal) on the other. Small images are scaled up.

    Args:
        native_width: Decoded image width in pixels
        native_height: Decoded image height in pixels
        target_box: Box the image must fit in

    Returns:
        (fit_width, fit_height) in pixels
    """
    if native_width <= 0 or native_height <= 0:
        raise ValueError(f"Image dimensions must be positive: {native_width}x{native_height}")

    source_ratio = native_width / native_height

    if source_ratio > target_box.ratio:
        # Wider than the box: width is the constraint
        fit_width = target_box.width
        fit_height = math.floor(fit_width / source_ratio)
    else:
        fit_height = target_box.height
        fit_width = math.floor(fit_height * source_ratio)

    return max(1, fit_width), max(1, fit_height)


def compute_cell_origin(index: int, canvas_spec: CanvasSpec) -> Tuple[int, int]:
    """Top-left pixel of the grid cell for a zero-based slot index."""
    if not 0 <= index < canvas_spec.capacity:
        raise IndexError(f"Slot {index} outside {canvas_spec.columns}x{canvas_spec.rows} grid")
    row = index // canvas_spec.columns
    col = index % canvas_spec.columns
    return col * canvas_spec.cell_width, row * canvas_spec.cell_height


def compute_box_origin(cell_origin: Tuple[int, int], target_box: TargetBox,
                       canvas_spec: CanvasSpec) -> Tuple[int, int]:
    """Top-left pixel of the target box centered in a cell."""
    cell_x, cell_y = cell_origin
    box_x = cell_x + (canvas_spec.cell_width - target_box.width) // 2
    box_y = cell_y + (canvas_spec.cell_height - target_box.height) // 2
    return box_x, box_y


def compute_centered_offset(cell_origin: Tuple[int, int], target_box: TargetBox,
                            canvas_spec: CanvasSpec, fit_size: Tuple[int, int]) -> Tuple[int, int]:
    """
    Center the target box in the cell, then the fitted image in the box.

    Both stages floor the padding, so odd padding leaves the image up to one
    pixel toward the top-left.

    Args:
        cell_origin: (cell_x, cell_y) from compute_cell_origin
        target_box: Box centered in the cell
        canvas_spec: Canvas providing the cell size
        fit_size: (fit_width, fit_height) from compute_fit_size

    Returns:
        (x, y) absolute top-left offset on the canvas
    """
    box_x, box_y = compute_box_origin(cell_origin, target_box, canvas_spec)
    fit_width, fit_height = fit_size
    x = box_x + (target_box.width - fit_width) // 2
    y = box_y + (target_box.height - fit_height) // 2
    return x, y


def plan_placement(index: int, name: str, native_size: Tuple[int, int],
                   canvas_spec: CanvasSpec, target_box: TargetBox) -> Placement:
    """Compute the full placement of one image in its slot."""
    fit_width, fit_height = compute_fit_size(native_size[0], native_size[1], target_box)
    cell_origin = compute_cell_origin(index, canvas_spec)
    x, y = compute_centered_offset(cell_origin, target_box, canvas_spec, (fit_width, fit_height))
    return Placement(
        index=index,
        name=name,
        fit_width=fit_width,
        fit_height=fit_height,
        x=x,
        y=y,
        columns=canvas_spec.columns,
    )


def target_region(index: int, canvas_spec: CanvasSpec, target_box: TargetBox) -> Polygon:
    """Target box of a slot as a shapely rectangle in canvas pixels."""
    box_x, box_y = compute_box_origin(compute_cell_origin(index, canvas_spec), target_box, canvas_spec)
    return shapely_box(box_x, box_y, box_x + target_box.width, box_y + target_box.height)


def placement_fits(placement: Placement, canvas_spec: CanvasSpec, target_box: TargetBox) -> bool:
    """True when the placed image lies entirely inside its slot's target box."""
    region = target_region(placement.index, canvas_spec, target_box)
    return region.covers(shapely_box(*placement.box))
