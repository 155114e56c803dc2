"""
Single-Piece Isolation
======================

Detects a board that contains exactly one canonical tetromino and nothing
else, which is what the screen shows right after a piece spawns on an
empty board.

Rules:
    - The board must have exactly four occupied cells
    - Those cells, translated to the origin, must equal one rotation of a
      canonical shape
    - Anything else (empty board, disjoint fragments, stray minos, a
      malformed region) is unrecognized
"""

from typing import List, Optional, Tuple

from tetris_ocr.models.board import TetrisBoard
from tetris_ocr.models.tetromino import (
    ROTATIONS,
    PlacedTetromino,
    TetrominoType,
    normalize_cells,
)


def occupied_cells(board: TetrisBoard) -> List[Tuple[int, int]]:
    """All (x, y) cells holding a mino, row-major."""
    return [(x, y) for x, y in board.iterate_minos() if board.exists(x, y)]


def extract_single_tetromino(board: TetrisBoard) -> Optional[PlacedTetromino]:
    """
    Identify the only piece on the board.

    Args:
        board: Binary or colored board

    Returns:
        The placed tetromino, or None if the board does not hold exactly
        one well-formed canonical piece
    """
    cells = occupied_cells(board)
    if len(cells) != 4:
        return None

    shape = normalize_cells(cells)
    min_x = min(x for x, _ in cells)
    min_y = min(y for _, y in cells)

    for tetromino_type in TetrominoType:
        for rotation, candidate in enumerate(ROTATIONS[tetromino_type]):
            if candidate == shape:
                return PlacedTetromino(tetromino_type, rotation, min_x, min_y)

    return None
