"""
Test Configuration
==================

Pytest fixtures and test configuration for tetris-ocr.

Frames are painted synthetically on a fixed layout:

    frame:  160 x 192 px
    board:  (16, 16) - (96, 176), 8 px minos
    next:   (112, 32) - (144, 48), 4 px grid cells
    level:  (112, 64) - (140, 78), two 14 px digits, 2 px glyph cells
"""

import copy
from typing import Optional, Sequence

import numpy as np
import pytest

from tetris_ocr.calibration import Calibration
from tetris_ocr.models.board import TetrisBoard
from tetris_ocr.models.tetromino import TetrominoType
from tetris_ocr.perception.digits import DIGIT_GLYPHS
from tetris_ocr.perception.next_similarity import NEXT_TEMPLATES
from tetris_ocr.stream.frame import Frame


FRAME_WIDTH = 160
FRAME_HEIGHT = 192

MINO_COLOR = (200, 200, 200)
LIT_COLOR = (255, 255, 255)

CALIBRATION_DATA = {
    "rects": {
        "board": {"left": 16, "top": 16, "right": 96, "bottom": 176},
        "next": {"left": 112, "top": 32, "right": 144, "bottom": 48},
        "level": {"left": 112, "top": 64, "right": 140, "bottom": 78},
    }
}


class ScreenPainter:
    """Paints synthetic game screens matching a calibration."""

    def __init__(self, calibration: Calibration) -> None:
        self.calibration = calibration

    def blank(self) -> np.ndarray:
        return np.zeros((FRAME_HEIGHT, FRAME_WIDTH, 3), dtype=np.uint8)

    def noise(self, seed: int = 0) -> np.ndarray:
        rng = np.random.default_rng(seed)
        return rng.integers(0, 256, size=(FRAME_HEIGHT, FRAME_WIDTH, 3), dtype=np.uint8)

    def draw_board(self, image: np.ndarray, rows: Sequence[str]) -> None:
        rect = self.calibration.rects.board
        mino_w = rect.width // 10
        mino_h = rect.height // 20
        board = TetrisBoard.from_rows(rows)
        for x, y in board.iterate_minos():
            if board.exists(x, y):
                top = rect.top + y * mino_h
                left = rect.left + x * mino_w
                image[top:top + mino_h, left:left + mino_w] = MINO_COLOR

    def draw_next(self, image: np.ndarray, tetromino_type: TetrominoType) -> None:
        rect = self.calibration.rects.next
        cell_w = rect.width // 8
        cell_h = rect.height // 4
        template = NEXT_TEMPLATES[tetromino_type][0]
        for row in range(4):
            for col in range(8):
                if template[row, col]:
                    top = rect.top + row * cell_h
                    left = rect.left + col * cell_w
                    image[top:top + cell_h, left:left + cell_w] = LIT_COLOR

    def draw_level(self, image: np.ndarray, level: int) -> None:
        rect = self.calibration.rects.level
        digit_w = rect.width // 2
        cell_w = digit_w // 7
        cell_h = rect.height // 7
        for index, char in enumerate(f"{level:02d}"):
            glyph = DIGIT_GLYPHS[int(char)]
            digit_left = rect.left + index * digit_w
            for row in range(7):
                for col in range(7):
                    if glyph[row, col]:
                        top = rect.top + row * cell_h
                        left = digit_left + col * cell_w
                        image[top:top + cell_h, left:left + cell_w] = LIT_COLOR

    def screen(
        self,
        board_rows: Sequence[str] = (),
        next_type: Optional[TetrominoType] = None,
        level: Optional[int] = None,
    ) -> np.ndarray:
        image = self.blank()
        self.draw_board(image, board_rows)
        if next_type is not None:
            self.draw_next(image, next_type)
        if level is not None:
            self.draw_level(image, level)
        return image

    def frame(self, frame_id: int = 0, **kwargs) -> Frame:
        return Frame(frame_id=frame_id, timestamp=frame_id / 60.0, image=self.screen(**kwargs))

    def noise_frame(self, frame_id: int = 0) -> Frame:
        return Frame(frame_id=frame_id, timestamp=frame_id / 60.0, image=self.noise(seed=frame_id))


class CountingFrame:
    """Frame wrapper that counts pixel samples."""

    def __init__(self, frame: Frame) -> None:
        self._frame = frame
        self.samples = 0

    @property
    def frame_id(self) -> int:
        return self._frame.frame_id

    def get_pixel_at(self, point):
        self.samples += 1
        return self._frame.get_pixel_at(point)


class FixedDigitClassifier:
    """Digit classifier returning a fixed reading."""

    def __init__(self, value: Optional[int]) -> None:
        self.value = value
        self.calls = 0

    def read_number(self, frame, region) -> Optional[int]:
        self.calls += 1
        return self.value


@pytest.fixture
def calibration_data() -> dict:
    """Raw calibration mapping."""
    return copy.deepcopy(CALIBRATION_DATA)


@pytest.fixture
def calibration(calibration_data) -> Calibration:
    """Calibration for the synthetic screen layout."""
    return Calibration.model_validate(calibration_data)


@pytest.fixture
def painter(calibration) -> ScreenPainter:
    """Synthetic screen painter."""
    return ScreenPainter(calibration)


@pytest.fixture
def counting_frame():
    """Factory wrapping a Frame in a sample counter."""
    return CountingFrame


@pytest.fixture
def fixed_digits():
    """Factory for fixed-reading digit classifiers."""
    return FixedDigitClassifier


@pytest.fixture
def small_frame() -> Frame:
    """Frame too small for the calibration; every board sample is out of bounds."""
    return Frame(frame_id=99, timestamp=0.0, image=np.zeros((8, 8, 3), dtype=np.uint8))
