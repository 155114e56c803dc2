"""
OCR Frame
=========

Per-frame lazy feature extractor.

An OCRFrame stores a single RGB frame of a video together with the session
calibration, and derives game signals from it through lazily computed,
write-once cache slots: each feature is only computed when requested, and
at most once.

Accessor contract (every get_* method):
    - Already cached → return the cached Feature regardless of the flag
    - Not cached, load_if_not_loaded=True → compute, cache, return
    - Not cached, load_if_not_loaded=False → Feature.not_computed(),
      without sampling a single pixel

Errors:
    A sample point outside the frame raises PixelOutOfBoundsError. The
    slot stays NOT_COMPUTED and the error propagates to the caller.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from tetris_ocr.calibration.calibration import Calibration
from tetris_ocr.calibration.ocr_boxes import BoardOCRBox, NextOCRBox
from tetris_ocr.errors import PixelOutOfBoundsError
from tetris_ocr.models.board import ColorType, TetrisBoard
from tetris_ocr.models.feature import Feature, FeatureSlot
from tetris_ocr.models.tetromino import PlacedTetromino, TetrominoType
from tetris_ocr.perception.board_isolation import extract_single_tetromino
from tetris_ocr.perception.digits import DigitClassifier, TemplateDigitClassifier
from tetris_ocr.perception.next_similarity import find_similar_tetromino_type
from tetris_ocr.stream.frame import Frame, Pixel, Point, color_distance


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OCRThresholds:
    """
    Sampling thresholds for feature extraction.

    Attributes:
        shine_brightness: Block-shine brightness above which a mino exists
        next_brightness: Brightness above which a next-box cell is lit
        next_max_distance: Largest accepted next-box template mismatch
    """

    shine_brightness: float = 130.0
    next_brightness: float = 30.0
    next_max_distance: int = 4


class OCRFrame:
    """
    Lazy feature extractor for one frame.

    Attributes:
        frame: The captured frame
        calibration: Session calibration
        board_ocr_box: Board sampling geometry
        next_ocr_box: Next-box sampling geometry

    Example:
        ocr_frame = OCRFrame(frame, calibration)
        noise = ocr_frame.get_board_noise()
        if noise.is_known and noise.value < 20:
            board = ocr_frame.get_binary_board().value
    """

    def __init__(
        self,
        frame: Frame,
        calibration: Calibration,
        thresholds: Optional[OCRThresholds] = None,
        digit_classifier: Optional[DigitClassifier] = None,
    ) -> None:
        """
        Args:
            frame: The singular frame to extract OCR information from
            calibration: The calibration data for the frame to use for OCR
            thresholds: Sampling thresholds (defaults if None)
            digit_classifier: Level reader (template matching if None)
        """
        self.frame = frame
        self.calibration = calibration
        self.thresholds = thresholds or OCRThresholds()
        self.digit_classifier: DigitClassifier = digit_classifier or TemplateDigitClassifier()

        self.board_ocr_box = BoardOCRBox(calibration.rects.board)
        self.next_ocr_box = NextOCRBox(calibration.rects.next)

        self._binary_board: FeatureSlot[TetrisBoard] = FeatureSlot(self._compute_binary_board)
        self._board_noise: FeatureSlot[float] = FeatureSlot(self._compute_board_noise)
        self._next_grid: FeatureSlot[List[List[int]]] = FeatureSlot(self._compute_next_grid)
        self._next_type: FeatureSlot[TetrominoType] = FeatureSlot(self._compute_next_type)
        self._level: FeatureSlot[int] = FeatureSlot(self._compute_level)
        self._board_only_tetromino: FeatureSlot[PlacedTetromino] = FeatureSlot(
            self._compute_board_only_tetromino
        )

    @property
    def frame_id(self) -> int:
        return self.frame.frame_id

    def _sample(self, point: Point) -> Pixel:
        pixel = self.frame.get_pixel_at(point)
        if pixel is None:
            raise PixelOutOfBoundsError(point[0], point[1], self.frame.frame_id)
        return pixel

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_binary_board(self, load_if_not_loaded: bool = True) -> Feature[TetrisBoard]:
        """
        Board occupancy without color assignment.

        Uses the block shine to decide whether each mino exists; every
        existing mino is marked PRIMARY.

        The board is mutable, so each call returns a fresh copy of the
        cached one.
        """
        result = self._binary_board.get(load_if_not_loaded)
        if not result.is_known:
            return result
        return Feature.known(result.value.copy())

    def get_board_noise(self, load_if_not_loaded: bool = True) -> Feature[float]:
        """
        Average color difference between the two body points of each mino.

        The lower the score, the more consistent the board region is and
        the more likely a genuine board is being displayed.
        """
        return self._board_noise.get(load_if_not_loaded)

    def get_next_grid(self, load_if_not_loaded: bool = True) -> Feature[List[List[int]]]:
        """4x8 binary grid of the next box, 1 where bright."""
        return self._next_grid.get(load_if_not_loaded)

    def get_next_type(self, load_if_not_loaded: bool = True) -> Feature[TetrominoType]:
        """Shape in the next box; UNKNOWN if no template is close enough."""
        return self._next_type.get(load_if_not_loaded)

    def get_level(self, load_if_not_loaded: bool = True) -> Feature[int]:
        """Level read by the digit classifier; UNKNOWN if unreadable."""
        return self._level.get(load_if_not_loaded)

    def get_board_only_tetromino(self, load_if_not_loaded: bool = True) -> Feature[PlacedTetromino]:
        """
        The only piece on the board.

        KNOWN if the binary board holds exactly one canonical tetromino and
        no other minos, UNKNOWN otherwise.
        """
        return self._board_only_tetromino.get(load_if_not_loaded)

    def get_board_only_tetromino_type(self, load_if_not_loaded: bool = True) -> Feature[TetrominoType]:
        """Shape of get_board_only_tetromino()."""
        placed = self.get_board_only_tetromino(load_if_not_loaded)
        if not placed.is_known:
            return Feature(placed.status)
        return Feature.known(placed.value.tetromino_type)

    # ------------------------------------------------------------------
    # Computations
    # ------------------------------------------------------------------

    def _compute_binary_board(self) -> TetrisBoard:
        board = TetrisBoard()
        for point in board.iterate_minos():
            shine = self._sample(self.board_ocr_box.get_block_shine(point))
            if shine.average > self.thresholds.shine_brightness:
                board.set_at(point[0], point[1], ColorType.PRIMARY)
        return board

    def _compute_board_noise(self) -> float:
        total_difference = 0.0
        num_minos = 0
        for point in TetrisBoard().iterate_minos():
            first, second = self.board_ocr_box.get_mino_points(point)
            total_difference += color_distance(self._sample(first), self._sample(second))
            num_minos += 1
        return total_difference / num_minos

    def _compute_next_grid(self) -> List[List[int]]:
        threshold = self.thresholds.next_brightness
        return [
            [1 if self._sample(point).average > threshold else 0 for point in row]
            for row in self.next_ocr_box.get_grid_points()
        ]

    def _compute_next_type(self) -> Optional[TetrominoType]:
        grid = self.get_next_grid().value
        return find_similar_tetromino_type(grid, self.thresholds.next_max_distance)

    def _compute_level(self) -> Optional[int]:
        return self.digit_classifier.read_number(self.frame, self.calibration.rects.level)

    def _compute_board_only_tetromino(self) -> Optional[PlacedTetromino]:
        board = self.get_binary_board().value
        return extract_single_tetromino(board)

    def __repr__(self) -> str:
        return f"OCRFrame(frame_id={self.frame.frame_id})"
