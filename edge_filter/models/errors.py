from __future__ import annotations
from pathlib import Path


class EdgeFilterError(Exception):
    """Base class for every failure the edge filter surfaces to callers."""


class DecodeError(EdgeFilterError):
    """The input image could not be read (missing, unsupported or corrupt)."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot decode image {self.path}: {reason}")


class InvalidImageSize(EdgeFilterError, ValueError):
    """Image is too small for a 3x3 window (width or height below 3)."""

    def __init__(self, width: int, height: int, path: str | Path | None = None):
        self.width = width
        self.height = height
        self.path = Path(path) if path is not None else None
        source = f" ({self.path})" if self.path else ""
        super().__init__(
            f"Image{source} is {width}x{height}; edge detection needs at least 3x3"
        )


class EncodeError(EdgeFilterError):
    """The edge map could not be written to its destination."""

    def __init__(self, path: str | Path | None, reason: str):
        self.path = Path(path) if path is not None else None
        self.reason = reason
        super().__init__(f"Cannot encode image {self.path}: {reason}")
