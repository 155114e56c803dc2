"""
Sampling Geometry
=================

Pure functions translating logical board, next-box and digit coordinates
into physical sample points for a given calibration.

All sample points are floored to integer pixel coordinates.

Board layout:
    The board rect is divided into a 10x20 grid of minos. Each rendered
    block has a bright "shine" near its top-left corner, which is used to
    decide whether a mino exists. Two further points inside the block body
    are compared for color consistency (the noise score).

Next box layout:
    The next box is sampled on a 4x8 grid at half-mino resolution. Three
    wide pieces are rendered offset by half a mino relative to the I and O
    pieces, which a half-mino grid represents exactly.

Level layout:
    The level rect is split horizontally into equal digit cells, each
    sampled on a 7x7 glyph grid.
"""

import math
from typing import List, Tuple

from tetris_ocr.calibration.calibration import Rect
from tetris_ocr.models.board import BOARD_HEIGHT, BOARD_WIDTH
from tetris_ocr.stream.frame import Point


# Fractional position of the block shine within a mino
SHINE_OFFSET = (0.125, 0.125)

# Fractional positions of the two body points compared for noise
MINO_POINT_OFFSETS = ((0.375, 0.625), (0.625, 0.375))

NEXT_GRID_ROWS = 4
NEXT_GRID_COLS = 8

DIGIT_GRID_SIZE = 7


def _floor_point(x: float, y: float) -> Point:
    return int(math.floor(x)), int(math.floor(y))


class BoardOCRBox:
    """
    Sample points for the 10x20 board.

    Attributes:
        rect: Calibrated board rectangle
        mino_width: Width of one mino in pixels
        mino_height: Height of one mino in pixels
    """

    def __init__(self, rect: Rect) -> None:
        self.rect = rect
        self.mino_width = rect.width / BOARD_WIDTH
        self.mino_height = rect.height / BOARD_HEIGHT

    def _point_in_mino(self, x: int, y: int, offset: Tuple[float, float]) -> Point:
        return _floor_point(
            self.rect.left + (x + offset[0]) * self.mino_width,
            self.rect.top + (y + offset[1]) * self.mino_height,
        )

    def get_block_shine(self, point: Tuple[int, int]) -> Point:
        """Pixel used to decide whether the mino at (x, y) exists."""
        x, y = point
        return self._point_in_mino(x, y, SHINE_OFFSET)

    def get_mino_points(self, point: Tuple[int, int]) -> Tuple[Point, Point]:
        """Pair of body pixels compared for the noise score."""
        x, y = point
        first, second = MINO_POINT_OFFSETS
        return self._point_in_mino(x, y, first), self._point_in_mino(x, y, second)


class NextOCRBox:
    """Sample points for the next-piece preview box."""

    def __init__(self, rect: Rect) -> None:
        self.rect = rect

    def get_grid_points(self) -> List[List[Point]]:
        """Cell-center points of the 4x8 grid, row by row."""
        cell_width = self.rect.width / NEXT_GRID_COLS
        cell_height = self.rect.height / NEXT_GRID_ROWS
        return [
            [
                _floor_point(
                    self.rect.left + (col + 0.5) * cell_width,
                    self.rect.top + (row + 0.5) * cell_height,
                )
                for col in range(NEXT_GRID_COLS)
            ]
            for row in range(NEXT_GRID_ROWS)
        ]


class LevelOCRBox:
    """Sample points for the level digits."""

    def __init__(self, rect: Rect, num_digits: int = 2) -> None:
        if num_digits < 1:
            raise ValueError("num_digits must be >= 1")
        self.rect = rect
        self.num_digits = num_digits

    def get_digit_grid_points(self, digit_index: int) -> List[List[Point]]:
        """Cell-center points of the 7x7 glyph grid for one digit."""
        digit_width = self.rect.width / self.num_digits
        left = self.rect.left + digit_index * digit_width
        cell_width = digit_width / DIGIT_GRID_SIZE
        cell_height = self.rect.height / DIGIT_GRID_SIZE
        return [
            [
                _floor_point(
                    left + (col + 0.5) * cell_width,
                    self.rect.top + (row + 0.5) * cell_height,
                )
                for col in range(DIGIT_GRID_SIZE)
            ]
            for row in range(DIGIT_GRID_SIZE)
        ]
