"""
Recognizer Tests
================

Tests for next-box template matching, single-piece isolation and digit
classification.
"""

import numpy as np
import pytest

from tetris_ocr.calibration import Rect
from tetris_ocr.errors import PixelOutOfBoundsError
from tetris_ocr.models.board import ColorType, TetrisBoard
from tetris_ocr.models.tetromino import ROTATIONS, TetrominoType
from tetris_ocr.perception import next_similarity
from tetris_ocr.perception.board_isolation import extract_single_tetromino
from tetris_ocr.perception.digits import (
    DIGIT_GLYPHS,
    NullDigitClassifier,
    TemplateDigitClassifier,
)
from tetris_ocr.perception.next_similarity import (
    NEXT_TEMPLATES,
    find_similar_tetromino_type,
    rank_tetromino_types,
)


def _corners_lit(grid: np.ndarray, count: int) -> np.ndarray:
    """Light cells that are dark in every template but the I variants."""
    flipped = grid.copy()
    for row, col in [(0, 0), (0, 7), (3, 0), (3, 7), (1, 0)][:count]:
        flipped[row, col] = 1 - flipped[row, col]
    return flipped


class TestNextSimilarity:
    """Tests for next-box classification."""

    @pytest.mark.parametrize("tetromino_type", list(TetrominoType))
    def test_every_template_matches_itself(self, tetromino_type):
        for template in NEXT_TEMPLATES[tetromino_type]:
            assert find_similar_tetromino_type(template) == tetromino_type

    def test_rank_lists_all_shapes_in_order(self):
        ranking = rank_tetromino_types(NEXT_TEMPLATES[TetrominoType.S][0])
        assert [t for t, _ in ranking] == list(TetrominoType)
        assert dict(ranking)[TetrominoType.S] == 0

    def test_tolerates_distance_at_threshold(self):
        grid = _corners_lit(NEXT_TEMPLATES[TetrominoType.T][0], 4)
        assert find_similar_tetromino_type(grid, max_distance=4) == TetrominoType.T

    def test_rejects_distance_above_threshold(self):
        grid = _corners_lit(NEXT_TEMPLATES[TetrominoType.T][0], 5)
        assert find_similar_tetromino_type(grid, max_distance=4) is None

    def test_blank_grid_is_unrecognized(self):
        assert find_similar_tetromino_type(np.zeros((4, 8), dtype=np.uint8)) is None

    def test_ties_resolve_to_canonical_order(self, monkeypatch):
        monkeypatch.setitem(
            next_similarity.NEXT_TEMPLATES,
            TetrominoType.Z,
            NEXT_TEMPLATES[TetrominoType.J],
        )
        grid = NEXT_TEMPLATES[TetrominoType.J][0]
        assert find_similar_tetromino_type(grid) == TetrominoType.J

    def test_deterministic(self):
        grid = _corners_lit(NEXT_TEMPLATES[TetrominoType.L][0], 2)
        results = {find_similar_tetromino_type(grid) for _ in range(5)}
        assert results == {TetrominoType.L}

    def test_wrong_grid_shape_raises(self):
        with pytest.raises(ValueError):
            find_similar_tetromino_type([[0] * 8] * 3)


def _board_with(cells) -> TetrisBoard:
    board = TetrisBoard()
    for x, y in cells:
        board.set_at(x, y, ColorType.PRIMARY)
    return board


class TestBoardIsolation:
    """Tests for single-piece extraction."""

    @pytest.mark.parametrize("tetromino_type", list(TetrominoType))
    def test_every_rotation_is_recognized(self, tetromino_type):
        for rotation, shape in enumerate(ROTATIONS[tetromino_type]):
            board = _board_with((x + 3, y + 5) for x, y in shape)

            placed = extract_single_tetromino(board)
            assert placed is not None
            assert placed.tetromino_type == tetromino_type
            assert placed.rotation == rotation
            assert (placed.x, placed.y) == (3, 5)
            assert placed.cells() == frozenset((x + 3, y + 5) for x, y in shape)

    def test_empty_board(self):
        assert extract_single_tetromino(TetrisBoard()) is None

    def test_extra_mino(self):
        board = _board_with([(4, 0), (5, 0), (4, 1), (5, 1), (0, 19)])
        assert extract_single_tetromino(board) is None

    def test_disjoint_fragments(self):
        board = _board_with([(0, 0), (1, 0), (8, 19), (9, 19)])
        assert extract_single_tetromino(board) is None

    def test_malformed_four_cells(self):
        board = _board_with([(0, 0), (1, 1), (2, 2), (3, 3)])
        assert extract_single_tetromino(board) is None

    def test_color_is_ignored(self):
        board = TetrisBoard.from_rows(["...3......", "..123....."])
        placed = extract_single_tetromino(board)
        assert placed is not None
        assert placed.tetromino_type == TetrominoType.T


class TestDigitClassifier:
    """Tests for glyph-template digit reading."""

    @pytest.mark.parametrize("digit", range(10))
    def test_every_glyph_classifies(self, digit):
        classifier = TemplateDigitClassifier()
        assert classifier.classify_grid(DIGIT_GLYPHS[digit]) == digit

    def test_glyphs_are_distinct(self):
        glyphs = [glyph.tobytes() for glyph in DIGIT_GLYPHS.values()]
        assert len(set(glyphs)) == 10

    def test_far_grid_is_rejected(self):
        classifier = TemplateDigitClassifier(max_distance=6)
        assert classifier.classify_grid(np.ones((7, 7), dtype=np.uint8)) is None

    @pytest.mark.parametrize("level", [0, 7, 18, 29])
    def test_reads_rendered_level(self, painter, calibration, level):
        frame = painter.frame(level=level)
        classifier = TemplateDigitClassifier(num_digits=2)
        assert classifier.read_number(frame, calibration.rects.level) == level

    def test_blank_region_is_unreadable(self, painter, calibration):
        classifier = TemplateDigitClassifier()
        assert classifier.read_number(painter.frame(), calibration.rects.level) is None

    def test_out_of_bounds_raises(self, small_frame, calibration):
        classifier = TemplateDigitClassifier()
        with pytest.raises(PixelOutOfBoundsError):
            classifier.read_number(small_frame, calibration.rects.level)

    def test_null_classifier(self, painter, calibration):
        frame = painter.frame(level=18)
        assert NullDigitClassifier().read_number(frame, calibration.rects.level) is None

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            TemplateDigitClassifier(num_digits=0)
        with pytest.raises(ValueError):
            TemplateDigitClassifier(max_distance=-1)

    def test_region_type(self):
        region = Rect(left=0, top=0, right=14, bottom=7)
        assert (region.width, region.height) == (14, 7)
