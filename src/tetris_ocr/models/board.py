"""
Board Model
===========

Fixed-size 10x20 grid of placed minos.

A board is represented by a 20x10 grid of cells. A cell can be empty or be
filled with one of three color types, so each cell carries 2 bits of
information (400 bits for the whole board).

Coordinates:
    x: column in [0, 10), increasing rightward
    y: row in [0, 20), increasing downward (row 0 is the top)

Invariants:
    - Dimensions never change
    - Out-of-range writes are silently ignored
    - Copies never share storage with their source

Example:
    board = TetrisBoard()
    board.set_at(0, 19, ColorType.PRIMARY)
    assert board.exists(0, 19)
    cleared = board.process_line_clears()
"""

from enum import IntEnum
from typing import Iterator, List, Sequence, Tuple

import numpy as np


BOARD_WIDTH = 10
BOARD_HEIGHT = 20


class ColorType(IntEnum):
    """
    Color of a single board cell.

    Attributes:
        EMPTY: No mino
        PRIMARY: Mino in the level's primary color
        SECONDARY: Mino in the level's secondary color
        WHITE: White mino (with colored border)
    """

    EMPTY = 0
    PRIMARY = 1
    SECONDARY = 2
    WHITE = 3


class TetrisBoard:
    """
    Mutable 10x20 grid of ColorType cells, backed by a numpy array.

    Attributes:
        grid: (20, 10) uint8 array indexed as grid[y, x]
    """

    __slots__ = ("grid",)

    def __init__(self) -> None:
        self.grid: np.ndarray = np.zeros((BOARD_HEIGHT, BOARD_WIDTH), dtype=np.uint8)

    @staticmethod
    def in_bounds(x: int, y: int) -> bool:
        """Whether (x, y) lies on the board."""
        return 0 <= x < BOARD_WIDTH and 0 <= y < BOARD_HEIGHT

    def set_at(self, x: int, y: int, color: ColorType) -> None:
        """Set the color of a cell. Out-of-range coordinates are ignored."""
        if not self.in_bounds(x, y):
            return
        self.grid[y, x] = int(color)

    def get_at(self, x: int, y: int) -> ColorType:
        """Get the color of an in-range cell."""
        return ColorType(int(self.grid[y, x]))

    def exists(self, x: int, y: int) -> bool:
        """Whether a mino exists at (x, y). False when out of range."""
        if not self.in_bounds(x, y):
            return False
        return self.grid[y, x] != ColorType.EMPTY

    def count(self) -> int:
        """Number of occupied cells."""
        return int(np.count_nonzero(self.grid))

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != ColorType.EMPTY))

    def full_rows(self) -> List[int]:
        """Indices of all full rows, top to bottom."""
        return [int(y) for y in np.flatnonzero(np.all(self.grid != ColorType.EMPTY, axis=1))]

    def process_line_clears(self) -> int:
        """
        Remove full rows in place and return how many were removed.

        Remaining rows keep their relative order and sink to the bottom;
        the same number of empty rows is inserted at the top so the board
        stays 20 rows tall.

        Returns:
            Number of lines cleared (0-20)
        """
        full = np.all(self.grid != ColorType.EMPTY, axis=1)
        num_cleared = int(np.count_nonzero(full))
        if num_cleared == 0:
            return 0

        remaining = self.grid[~full]
        self.grid[:num_cleared] = ColorType.EMPTY
        self.grid[num_cleared:] = remaining
        return num_cleared

    def iterate_minos(self) -> Iterator[Tuple[int, int]]:
        """Yield every (x, y) board coordinate in row-major order."""
        for y in range(BOARD_HEIGHT):
            for x in range(BOARD_WIDTH):
                yield x, y

    def copy(self) -> "TetrisBoard":
        board = TetrisBoard()
        board.grid = self.grid.copy()
        return board

    def equals(self, other: "TetrisBoard") -> bool:
        """Cell-wise equality."""
        return bool(np.array_equal(self.grid, other.grid))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TetrisBoard):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # mutable

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "TetrisBoard":
        """
        Build a board from text rows.

        Rows are aligned to the bottom of the board, so fewer than 20 rows
        may be given. '.' is empty; '1', '2', '3' are the color types.

        Raises:
            ValueError: If a row is not 10 characters or there are too many rows
        """
        if len(rows) > BOARD_HEIGHT:
            raise ValueError(f"Expected at most {BOARD_HEIGHT} rows, got {len(rows)}")

        board = cls()
        offset = BOARD_HEIGHT - len(rows)
        for row_index, row in enumerate(rows):
            if len(row) != BOARD_WIDTH:
                raise ValueError(f"Row {row_index} must be {BOARD_WIDTH} characters: {row!r}")
            for x, char in enumerate(row):
                board.set_at(x, offset + row_index, ColorType(0 if char == "." else int(char)))
        return board

    def to_rows(self) -> List[str]:
        """Render the board as 20 text rows (see from_rows)."""
        return [
            "".join("." if cell == ColorType.EMPTY else str(int(cell)) for cell in row)
            for row in self.grid
        ]

    def __repr__(self) -> str:
        return f"TetrisBoard(count={self.count()})"
