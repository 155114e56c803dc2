"""
Frame Data Model
=================

Decoded single-frame pixel source for the OCR pipeline.

This module defines the typed Frame class that is used as the interface
between video sources and the feature extractor.

Design Rules:
    - Frames are created once per capture and never modified
    - Images are stored as RGB uint8 arrays of shape (H, W, 3)
    - Sampling outside the image returns None, never a default color
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


Point = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Pixel:
    """
    A sampled RGB color.

    Attributes:
        r, g, b: Channel values in [0, 255]
    """

    r: int
    g: int
    b: int

    @property
    def average(self) -> float:
        """Brightness as the mean of the three channels."""
        return (self.r + self.g + self.b) / 3


def color_distance(a: Pixel, b: Pixel) -> float:
    """Euclidean distance between two colors in RGB space."""
    return math.sqrt((a.r - b.r) ** 2 + (a.g - b.g) ** 2 + (a.b - b.b) ** 2)


@dataclass(frozen=True, slots=True, eq=False)
class Frame:
    """
    A single decoded capture.

    It is immutable (frozen) to prevent accidental modification.

    Attributes:
        frame_id: Monotonically increasing frame counter from the source
        timestamp: Capture time in seconds
        image: RGB image, shape (H, W, 3), dtype uint8
    """

    frame_id: int
    timestamp: float
    image: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.image.ndim != 3 or self.image.shape[2] != 3:
            raise ValueError(f"Frame image must be (H, W, 3), got {self.image.shape}")
        if self.image.dtype != np.uint8:
            raise ValueError(f"Frame image must be uint8, got {self.image.dtype}")

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    def get_pixel_at(self, point: Point) -> Optional[Pixel]:
        """
        Sample the pixel at (x, y).

        Returns:
            The pixel color, or None if the point lies outside the frame
        """
        x, y = point
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return None
        r, g, b = self.image[y, x]
        return Pixel(int(r), int(g), int(b))

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the full image."""
        return (
            f"Frame(frame_id={self.frame_id}, "
            f"timestamp={self.timestamp:.3f}, "
            f"size={self.width}x{self.height})"
        )
