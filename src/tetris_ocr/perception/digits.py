"""
Digit Classification
====================

Pluggable readers for on-screen numbers (the level counter).

This module provides a black-box abstraction for digit OCR. The extractor
consumes ONLY the reader's output: an integer, or None when the reading is
not trustworthy. None is a normal outcome, not an error.

Components:
    - DigitClassifier: Protocol (frame, region) -> Optional[int]
    - TemplateDigitClassifier: Brightness-thresholded 7x7 glyph matching
    - NullDigitClassifier: Always fails; for captures without a level counter
"""

import logging
from typing import Dict, List, Optional, Protocol

import numpy as np

from tetris_ocr.calibration.calibration import Rect
from tetris_ocr.calibration.ocr_boxes import DIGIT_GRID_SIZE, LevelOCRBox
from tetris_ocr.errors import PixelOutOfBoundsError
from tetris_ocr.stream.frame import Frame


logger = logging.getLogger(__name__)


def _glyph(*rows: str) -> np.ndarray:
    grid = np.array([[1 if char == "#" else 0 for char in row] for row in rows], dtype=np.uint8)
    if grid.shape != (DIGIT_GRID_SIZE, DIGIT_GRID_SIZE):
        raise ValueError(f"Glyph must be {DIGIT_GRID_SIZE}x{DIGIT_GRID_SIZE}")
    return grid


DIGIT_GLYPHS: Dict[int, np.ndarray] = {
    0: _glyph(".#####.", "##...##", "##...##", "##...##", "##...##", "##...##", ".#####."),
    1: _glyph("...##..", "..###..", "...##..", "...##..", "...##..", "...##..", ".######"),
    2: _glyph(".#####.", "##...##", ".....##", "..####.", ".##....", "##.....", "#######"),
    3: _glyph("######.", "....##.", "...##..", "..####.", ".....##", "##...##", ".#####."),
    4: _glyph("...###.", "..####.", ".##.##.", "##..##.", "#######", "....##.", "....##."),
    5: _glyph("######.", "##.....", "######.", ".....##", ".....##", "##...##", ".#####."),
    6: _glyph("..####.", ".##....", "##.....", "######.", "##...##", "##...##", ".#####."),
    7: _glyph("#######", "##...##", "....##.", "...##..", "..##...", "..##...", "..##..."),
    8: _glyph(".####..", "##...#.", "###..#.", ".####..", "#..####", "#....##", ".#####."),
    9: _glyph(".#####.", "##...##", "##...##", ".######", ".....##", "....##.", ".####.."),
}


class DigitClassifier(Protocol):
    """
    Protocol for number readers.

    Implementations return the number shown in the region, or None when it
    cannot be read with confidence. Out-of-bounds sampling raises
    PixelOutOfBoundsError like every other sampler.
    """

    def read_number(self, frame: Frame, region: Rect) -> Optional[int]:
        ...


class NullDigitClassifier:
    """Reader that never recognizes anything."""

    def read_number(self, frame: Frame, region: Rect) -> Optional[int]:
        return None


class TemplateDigitClassifier:
    """
    Glyph-template digit reader.

    The region is split into num_digits equal cells. Each cell is sampled on
    a 7x7 grid, thresholded by brightness and matched against DIGIT_GLYPHS by
    mismatch count. If any digit's best distance exceeds max_distance the
    whole reading fails.

    Attributes:
        num_digits: Number of digits in the region
        brightness_threshold: Average brightness above which a cell is lit
        max_distance: Largest accepted mismatch count per digit
    """

    def __init__(
        self,
        num_digits: int = 2,
        brightness_threshold: float = 100.0,
        max_distance: int = 6,
    ) -> None:
        if num_digits < 1:
            raise ValueError("num_digits must be >= 1")
        if max_distance < 0:
            raise ValueError("max_distance must be >= 0")

        self.num_digits = num_digits
        self.brightness_threshold = brightness_threshold
        self.max_distance = max_distance

    def sample_digit_grid(self, frame: Frame, box: LevelOCRBox, digit_index: int) -> np.ndarray:
        """Binary 7x7 grid for one digit cell."""
        rows: List[List[int]] = []
        for row in box.get_digit_grid_points(digit_index):
            values = []
            for point in row:
                pixel = frame.get_pixel_at(point)
                if pixel is None:
                    raise PixelOutOfBoundsError(point[0], point[1], frame.frame_id)
                values.append(1 if pixel.average > self.brightness_threshold else 0)
            rows.append(values)
        return np.array(rows, dtype=np.uint8)

    def classify_grid(self, grid: np.ndarray) -> Optional[int]:
        """Closest digit for a 7x7 grid, or None if too far from all."""
        best_digit: Optional[int] = None
        best_distance = -1
        for digit, glyph in DIGIT_GLYPHS.items():
            distance = int(np.count_nonzero(grid != glyph))
            if best_digit is None or distance < best_distance:
                best_digit, best_distance = digit, distance

        if best_distance > self.max_distance:
            return None
        return best_digit

    def read_number(self, frame: Frame, region: Rect) -> Optional[int]:
        box = LevelOCRBox(region, self.num_digits)

        value = 0
        for digit_index in range(self.num_digits):
            digit = self.classify_grid(self.sample_digit_grid(frame, box, digit_index))
            if digit is None:
                logger.debug(f"Digit {digit_index} unreadable in frame {frame.frame_id}")
                return None
            value = value * 10 + digit
        return value
