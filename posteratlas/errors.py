"""
Error types raised while building an atlas.

Per-image errors (decode, resize, layout) are isolated by the builder and only
skip the affected image. Output errors abort the build.
"""

from typing import Optional


class AtlasError(Exception):
    """Base class for atlas build failures."""

    def __init__(self, message: str, name: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message)
        self.name = name
        self.stage = stage

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.stage:
            context.append(f"stage={self.stage}")
        if self.name:
            context.append(f"image={self.name}")
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class DirectoryListError(AtlasError):
    """Source image directory cannot be listed."""


class DecodeError(AtlasError):
    """Source image bytes cannot be decoded."""


class ResizeError(AtlasError):
    """Decoded image cannot be resized to its fit size."""


class LayoutError(AtlasError):
    """Computed placement falls outside its target box."""


class OutputSetupError(AtlasError):
    """Output directory cannot be created."""


class EncodeWriteError(AtlasError):
    """Atlas cannot be encoded or written."""
