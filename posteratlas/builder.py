"""
Atlas build orchestration.

Loads up to one image per grid slot, plans and resizes each image on its own,
composes the survivors onto the canvas and writes the atlas and its page.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image

from . import report
from .errors import AtlasError, LayoutError, OutputSetupError
from .geometry import (
    TARGET_ASPECT_RATIO,
    CanvasSpec,
    Placement,
    TargetBox,
    placement_fits,
    plan_placement,
)
from .loader import SourceFile, load_images
from .render import (
    DEFAULT_BACKGROUND,
    RGBA,
    assemble,
    decode_image,
    parse_background,
    resize_image,
    save_png,
)

ATLAS_FILENAME = "packed-images.png"
REPORT_FILENAME = "index.html"


class BuildStage(Enum):
    """Stages of one atlas build."""
    IDLE = "idle"
    SETUP = "setup"
    LOADING = "loading"
    EMPTY_FALLBACK = "empty_fallback"
    PLANNING = "planning"
    COMPOSING = "composing"
    WRITING = "writing"
    DONE = "done"


@dataclass
class SlotResult:
    """Outcome of planning one image: a placement or the error that stopped it."""
    index: int
    name: str
    placement: Optional[Placement] = None
    image: Optional[Image.Image] = field(default=None, repr=False)
    error: Optional[AtlasError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stage(self) -> Optional[str]:
        return self.error.stage if self.error is not None else None


@dataclass
class BuildResult:
    """Summary of a finished build."""
    output_path: Path
    report_path: Optional[Path]
    canvas_size: Tuple[int, int]
    capacity: int
    images_found: int
    images_placed: int
    skipped: List[Tuple[str, str, str]]
    elapsed: float


class AtlasBuilder:
    """Builds a poster atlas from a directory of images."""

    def __init__(self, canvas_spec: Optional[CanvasSpec] = None,
                 target_ratio: float = TARGET_ASPECT_RATIO,
                 background: Optional[RGBA] = None):
        """Initialize builder with an immutable canvas layout."""
        self.canvas_spec = canvas_spec or CanvasSpec()
        self.target_box = TargetBox.for_canvas(self.canvas_spec, target_ratio)
        self.background = background or parse_background(DEFAULT_BACKGROUND)
        self.logger = logging.getLogger(__name__)

    def _enter(self, stage: BuildStage) -> None:
        self.logger.debug(f"Build stage: {stage.value}")

    def _failed(self, index: int, name: str, error: AtlasError) -> SlotResult:
        self.logger.error(f"Error processing image {name}: {error}")
        return SlotResult(index=index, name=name, error=error)

    def plan_image(self, index: int, source: SourceFile) -> SlotResult:
        """
        Decode, fit and resize one image for its slot.

        Failures are returned as an error SlotResult instead of raised, so one
        bad image never stops the others.

        Args:
            index: Zero-based slot index
            source: Raw image from the loader

        Returns:
            SlotResult with placement and resized image, or with the error
        """
        row, col = divmod(index, self.canvas_spec.columns)
        self.logger.info(f"Processing {source.name} for cell ({row}, {col})")

        try:
            decoded = decode_image(source)
        except AtlasError as e:
            return self._failed(index, source.name, e)

        try:
            try:
                placement = plan_placement(index, source.name, decoded.size,
                                           self.canvas_spec, self.target_box)
            except (ValueError, IndexError) as e:
                raise LayoutError(str(e), name=source.name, stage="layout") from e

            if not placement_fits(placement, self.canvas_spec, self.target_box):
                raise LayoutError(f"Placement {placement.box} outside target box of slot {index}",
                                  name=source.name, stage="layout")

            resized = resize_image(decoded, placement.fit_size)
        except AtlasError as e:
            return self._failed(index, source.name, e)
        finally:
            decoded.image.close()

        self.logger.debug(f"{source.name}: native {decoded.width}x{decoded.height}, "
                          f"fit {placement.fit_width}x{placement.fit_height}, "
                          f"offset ({placement.x}, {placement.y})")
        return SlotResult(index=index, name=source.name, placement=placement, image=resized)

    def plan(self, sources: Sequence[SourceFile]) -> List[SlotResult]:
        """Plan every source in slot order; extras beyond the grid are ignored."""
        capacity = self.canvas_spec.capacity
        if len(sources) > capacity:
            self.logger.warning(f"Ignoring {len(sources) - capacity} image(s) beyond {capacity} slots")
        return [self.plan_image(index, source) for index, source in enumerate(sources[:capacity])]

    def compose(self, slot_results: Sequence[SlotResult]) -> Image.Image:
        """Assemble planned slots onto a fresh background canvas."""
        return assemble(self.canvas_spec, self.background, slot_results)

    @staticmethod
    def release(slot_results: Sequence[SlotResult]) -> None:
        """Close the resized images held by planned slots."""
        for slot in slot_results:
            if slot.image is not None:
                slot.image.close()

    def build(self, images_dir: Path, output_dir: Path, write_report: bool = True) -> BuildResult:
        """
        Run a full build: setup, load, plan, compose, write.

        Args:
            images_dir: Directory with source images
            output_dir: Directory receiving the atlas and index page
            write_report: Also write the HTML index page

        Returns:
            BuildResult describing the written files

        Raises:
            OutputSetupError: output directory cannot be created
            EncodeWriteError: atlas file cannot be written
        """
        start_time = time.perf_counter()
        self._enter(BuildStage.IDLE)
        self.logger.info("Starting atlas creation...")

        self._enter(BuildStage.SETUP)
        output_dir = Path(output_dir)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputSetupError(f"Cannot create output directory {output_dir}: {e}",
                                   stage=BuildStage.SETUP.value) from e

        self._enter(BuildStage.LOADING)
        sources = load_images(Path(images_dir), limit=self.canvas_spec.capacity)

        if not sources:
            self._enter(BuildStage.EMPTY_FALLBACK)
            self.logger.info("No images found. Creating empty atlas...")
            slot_results = []
        else:
            self._enter(BuildStage.PLANNING)
            slot_results = self.plan(sources)

        try:
            self._enter(BuildStage.COMPOSING)
            atlas = self.compose(slot_results)

            self._enter(BuildStage.WRITING)
            output_path = output_dir / ATLAS_FILENAME
            try:
                save_png(atlas, output_path)
            finally:
                atlas.close()
        finally:
            self.release(slot_results)

        images_placed = sum(1 for slot in slot_results if slot.ok)
        report_path = None
        if write_report:
            try:
                report_path = report.write_report(output_dir, self.canvas_spec, images_placed,
                                                   self.canvas_spec.capacity, ATLAS_FILENAME,
                                                   filename=REPORT_FILENAME)
            except OSError as e:
                self.logger.error(f"Failed to write report in {output_dir}: {e}")

        self._enter(BuildStage.DONE)
        return BuildResult(
            output_path=output_path,
            report_path=report_path,
            canvas_size=self.canvas_spec.size,
            capacity=self.canvas_spec.capacity,
            images_found=len(sources),
            images_placed=images_placed,
            skipped=[(slot.name, slot.stage or "", str(slot.error)) for slot in slot_results if not slot.ok],
            elapsed=time.perf_counter() - start_time,
        )
