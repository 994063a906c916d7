"""Sobel edge filter: RGB image → black / grey / white edge map."""

__version__ = "1.0.0"
