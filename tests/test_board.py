"""
Board Tests
===========

Tests for the 10x20 board model and tetromino shapes.
"""

import pytest

from tetris_ocr.models.board import BOARD_HEIGHT, BOARD_WIDTH, ColorType, TetrisBoard
from tetris_ocr.models.tetromino import ROTATIONS, PlacedTetromino, TetrominoType


class TestTetrisBoard:
    """Tests for cell access and copying."""

    def test_new_board_is_empty(self):
        board = TetrisBoard()
        assert board.grid.shape == (BOARD_HEIGHT, BOARD_WIDTH)
        assert board.count() == 0
        assert all(not board.exists(x, y) for x, y in board.iterate_minos())

    def test_set_and_get(self):
        board = TetrisBoard()
        board.set_at(3, 7, ColorType.SECONDARY)
        assert board.get_at(3, 7) == ColorType.SECONDARY
        assert board.exists(3, 7)
        assert board.count() == 1

    @pytest.mark.parametrize("x, y", [(-1, 0), (10, 0), (0, -1), (0, 20), (100, 100)])
    def test_out_of_range_write_is_ignored(self, x, y):
        board = TetrisBoard()
        board.set_at(x, y, ColorType.PRIMARY)
        assert board.count() == 0
        assert board.grid.shape == (20, 10)

    def test_exists_out_of_range_is_false(self):
        board = TetrisBoard.from_rows(["1111111111"] * 20)
        assert not board.exists(-1, 0)
        assert not board.exists(0, 20)

    def test_iterate_minos_covers_board_once(self):
        cells = list(TetrisBoard().iterate_minos())
        assert len(cells) == 200
        assert len(set(cells)) == 200
        assert cells[0] == (0, 0)
        assert cells[1] == (1, 0)
        assert cells[-1] == (9, 19)

    def test_copy_is_independent(self):
        board = TetrisBoard.from_rows(["1........."])
        clone = board.copy()
        clone.set_at(5, 5, ColorType.WHITE)
        assert board.count() == 1
        assert clone.count() == 2
        assert not board.equals(clone)

    def test_equality(self):
        a = TetrisBoard.from_rows(["12........"])
        b = TetrisBoard.from_rows(["12........"])
        assert a == b
        b.set_at(0, 19, ColorType.WHITE)
        assert a != b

    def test_text_rows(self):
        rows = ["3.........", "1111111112"]
        board = TetrisBoard.from_rows(rows)
        rendered = board.to_rows()
        assert len(rendered) == 20
        assert rendered[-2:] == rows
        assert rendered[0] == ".........."

    def test_from_rows_rejects_bad_width(self):
        with pytest.raises(ValueError):
            TetrisBoard.from_rows(["111"])


class TestLineClears:
    """Tests for line clear processing."""

    def test_no_full_rows(self):
        board = TetrisBoard.from_rows(["111111111."])
        before = board.copy()
        assert board.process_line_clears() == 0
        assert board == before

    def test_single_bottom_row(self):
        board = TetrisBoard.from_rows([
            "1.........",
            "1111111111",
        ])
        assert board.full_rows() == [19]
        assert board.process_line_clears() == 1
        assert board.to_rows()[-1] == "1........."
        assert board.count() == 1

    def test_non_adjacent_rows_preserve_order(self):
        board = TetrisBoard.from_rows([
            "2.........",
            "1111111111",
            ".3........",
            "1111111111",
            "..1.......",
        ])
        assert board.process_line_clears() == 2

        rows = board.to_rows()
        assert rows[-3:] == ["2.........", ".3........", "..1......."]
        assert all(row == ".........." for row in rows[:-3])
        assert board.grid.shape == (20, 10)

    def test_tetris(self):
        board = TetrisBoard.from_rows(["1111111111"] * 4)
        assert board.process_line_clears() == 4
        assert board.count() == 0

    @pytest.mark.parametrize("num_full", range(BOARD_HEIGHT + 1))
    def test_any_number_of_full_rows(self, num_full):
        # spread the full rows over the board instead of stacking them
        full_ys = set(sorted(range(BOARD_HEIGHT), key=lambda y: (y * 7) % BOARD_HEIGHT)[:num_full])
        rows = []
        for y in range(BOARD_HEIGHT):
            if y in full_ys:
                rows.append("1" * BOARD_WIDTH)
            else:
                rows.append("." * (y % BOARD_WIDTH) + "1" + "." * (BOARD_WIDTH - 1 - y % BOARD_WIDTH))
        board = TetrisBoard.from_rows(rows)
        kept = [row for y, row in enumerate(rows) if y not in full_ys]

        assert board.process_line_clears() == num_full
        assert board.grid.shape == (BOARD_HEIGHT, BOARD_WIDTH)
        assert board.to_rows() == ["." * BOARD_WIDTH] * num_full + kept
        assert board.full_rows() == []

    def test_clear_is_idempotent(self):
        board = TetrisBoard.from_rows(["1111111111", "11111.1111"])
        board.process_line_clears()
        after_first = board.copy()
        assert board.process_line_clears() == 0
        assert board == after_first


class TestTetrominoes:
    """Tests for tetromino shapes."""

    def test_seven_shapes_in_canonical_order(self):
        assert [t.value for t in TetrominoType] == ["I", "J", "L", "O", "S", "T", "Z"]

    @pytest.mark.parametrize("tetromino_type, expected", [
        (TetrominoType.I, 2),
        (TetrominoType.J, 4),
        (TetrominoType.L, 4),
        (TetrominoType.O, 1),
        (TetrominoType.S, 2),
        (TetrominoType.T, 4),
        (TetrominoType.Z, 2),
    ])
    def test_distinct_rotations(self, tetromino_type, expected):
        assert len(ROTATIONS[tetromino_type]) == expected
        assert all(len(shape) == 4 for shape in ROTATIONS[tetromino_type])

    def test_shapes_never_collide(self):
        shapes = [shape for rotations in ROTATIONS.values() for shape in rotations]
        assert len(shapes) == len(set(shapes)) == 19

    def test_placed_cells(self):
        piece = PlacedTetromino(TetrominoType.O, 0, x=4, y=18)
        assert piece.cells() == {(4, 18), (5, 18), (4, 19), (5, 19)}
