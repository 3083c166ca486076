from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from . import __version__
from .builder import AtlasBuilder
from .errors import EncodeWriteError, OutputSetupError
from .geometry import ATLAS_HEIGHT, ATLAS_WIDTH, CanvasSpec
from .loader import load_images
from .logger import DEFAULT_LOG_FILE, log_build_summary, setup_logging
from .render import DEFAULT_BACKGROUND, parse_background

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_OUTPUT = 5


def _make_builder(args: argparse.Namespace) -> AtlasBuilder:
    canvas_spec = CanvasSpec(width=args.width, height=args.height)
    background = getattr(args, "background", None)
    return AtlasBuilder(canvas_spec=canvas_spec, background=background)


def cli_build(args: argparse.Namespace) -> int:
    """Build the atlas PNG and its index page."""
    logging.info("Starting build operation")
    logging.debug(f"Args: {vars(args)}")

    try:
        builder = _make_builder(args)
    except ValueError as e:
        logging.error(f"Invalid canvas configuration: {e}")
        return EXIT_USAGE

    try:
        result = builder.build(args.images_dir, args.output_dir, write_report=not args.no_report)
    except (OutputSetupError, EncodeWriteError) as e:
        logging.error(f"Error creating atlas: {e}")
        return EXIT_OUTPUT

    log_build_summary(result)
    return EXIT_OK


def cli_plan(args: argparse.Namespace) -> int:
    """Show where each image would be placed, without writing anything."""
    try:
        builder = _make_builder(args)
    except ValueError as e:
        logging.error(f"Invalid canvas configuration: {e}")
        return EXIT_USAGE

    spec = builder.canvas_spec
    target = builder.target_box
    sources = load_images(args.images_dir, limit=spec.capacity)
    slot_results = builder.plan(sources)

    print(f"Canvas: {spec.width}x{spec.height}, grid {spec.columns}x{spec.rows}, "
          f"cell {spec.cell_width}x{spec.cell_height}, target box {target.width}x{target.height}")
    if not slot_results:
        print("No images found; the atlas would be background only.")
    for slot in slot_results:
        row, col = divmod(slot.index, spec.columns)
        if slot.ok:
            pl = slot.placement
            print(f"  [{slot.index}] cell ({row}, {col}) {slot.name}: "
                  f"{pl.fit_width}x{pl.fit_height} at ({pl.x}, {pl.y})")
        else:
            print(f"  [{slot.index}] cell ({row}, {col}) {slot.name}: SKIPPED [{slot.stage}] {slot.error}")
    builder.release(slot_results)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="posteratlas", description="Pack up to four poster images into a 2x2 PNG atlas")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="cmd")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--images-dir", type=Path, default=Path("images"), help="Directory with source PNG/JPEG images (default: images)")
    common.add_argument("--width", type=int, default=ATLAS_WIDTH, help=f"Atlas width in pixels (default: {ATLAS_WIDTH})")
    common.add_argument("--height", type=int, default=ATLAS_HEIGHT, help=f"Atlas height in pixels (default: {ATLAS_HEIGHT})")
    common.add_argument("--log-file", type=Path, default=Path(DEFAULT_LOG_FILE), help=f"Debug log path (default: {DEFAULT_LOG_FILE})")
    common.add_argument("--verbose", action="store_true", help="Show debug messages on the console")

    b = sub.add_parser("build", parents=[common], help="Build packed-images.png and index.html")
    b.add_argument("--output-dir", type=Path, default=Path("dist"), help="Output directory, created if missing (default: dist)")
    b.add_argument("--background", type=parse_background, default=parse_background(DEFAULT_BACKGROUND),
                   help=f"Canvas background colour (default: {DEFAULT_BACKGROUND})")
    b.add_argument("--no-report", action="store_true", help="Do not write index.html")
    b.set_defaults(func=cli_build)

    d = sub.add_parser("plan", parents=[common], help="Print the placement of each image without writing files")
    d.set_defaults(func=cli_plan)

    return p


def main(argv: List[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # Bare invocation (or options only) means "build"
    if not argv or (argv[0].startswith("-") and argv[0] not in ("-h", "--help", "--version")):
        argv = ["build"] + argv

    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_file=args.log_file, verbose=args.verbose)

    try:
        result = args.func(args)
        logging.info(f"Operation completed with exit code: {result}")
        return result
    except Exception as e:
        logging.error(f"Unhandled exception: {e}", exc_info=True)
        print(f"Fatal error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
