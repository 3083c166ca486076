"""
Source image discovery for the atlas.

Reads up to a fixed number of PNG/JPEG files from a directory, in directory
listing order. That order decides which grid slot each image gets.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import DirectoryListError

SUPPORTED_EXTENSIONS = {'.png', '.jpg', '.jpeg'}

logger = logging.getLogger(__name__)


@dataclass
class SourceFile:
    """Raw encoded image read from the images directory."""
    name: str
    path: Path
    data: bytes = field(repr=False)


def list_image_files(images_dir: Path) -> List[Path]:
    """
    List image files in a directory, unsorted.

    Args:
        images_dir: Directory to scan

    Returns:
        Paths of regular files with a supported extension, in listing order
    """
    try:
        entries = os.listdir(images_dir)
    except OSError as e:
        raise DirectoryListError(f"Cannot list images directory {images_dir}: {e}",
                                 stage="loading") from e

    image_files = []
    for entry in entries:
        file_path = Path(images_dir) / entry
        if file_path.suffix.lower() in SUPPORTED_EXTENSIONS and file_path.is_file():
            image_files.append(file_path)
    return image_files


def load_images(images_dir: Path, limit: int = 4) -> List[SourceFile]:
    """
    Read the first ``limit`` image files of a directory.

    An unreadable directory yields an empty list. An unreadable file is
    skipped; it still counts toward the limit.

    Args:
        images_dir: Directory containing source images
        limit: Maximum number of files to read

    Returns:
        SourceFile list in discovery order
    """
    try:
        image_files = list_image_files(images_dir)
    except DirectoryListError as e:
        logger.error(f"Error loading images: {e}")
        return []

    selected = image_files[:limit]
    if len(image_files) > limit:
        logger.info(f"Found {len(image_files)} image(s), using the first {limit}")
    logger.info(f"Found {len(selected)} image(s): {[p.name for p in selected]}")

    sources = []
    for file_path in selected:
        try:
            data = file_path.read_bytes()
        except OSError as e:
            logger.error(f"Cannot read image {file_path.name}: {e}")
            continue
        sources.append(SourceFile(name=file_path.name, path=file_path, data=data))
        logger.debug(f"Read {file_path.name}: {len(data):,} bytes")

    return sources
