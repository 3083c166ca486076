"""
Logging utilities for Poster Atlas.

Console output for progress, a debug log file for everything else.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FILE = "posteratlas_debug.log"


def setup_logging(log_file: Optional[Path] = Path(DEFAULT_LOG_FILE), verbose: bool = False) -> None:
    """
    Setup logging to both file and console.

    Args:
        log_file: Debug log path, or None for console only
        verbose: Show DEBUG messages on the console
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler - progress messages
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    # File handler - detailed logs
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
        ))
        logger.addHandler(file_handler)
        logging.info(f"Logging initialized. Debug log: {log_file}")
    else:
        logging.info("Logging initialized")


def log_build_summary(result) -> None:
    """
    Log the outcome of an atlas build.

    Args:
        result: BuildResult returned by AtlasBuilder.build
    """
    logger = logging.getLogger(__name__)

    width, height = result.canvas_size
    logger.info("Atlas creation completed successfully")
    logger.info(f"  Images processed: {result.images_placed}/{result.capacity}")
    logger.info(f"  Images found: {result.images_found}")
    logger.info(f"  Output files created in {result.output_path.parent}:")
    logger.info(f"    - {result.output_path.name} ({width}x{height})")
    if result.report_path is not None:
        logger.info(f"    - {result.report_path.name}")
    logger.info(f"  Build time: {result.elapsed:.2f} seconds")

    if result.skipped:
        logger.warning(f"Skipped {len(result.skipped)} image(s):")
        for name, stage, message in result.skipped:
            logger.warning(f"  - {name} [{stage}]: {message}")
