"""
Next-Piece Similarity
=====================

Template classifier for the next-piece preview box.

The sampled 4x8 binary grid is compared against a fixed library of
reference bitmaps. Distance is the number of mismatching cells. The shape
with the smallest distance wins; ties go to the earlier shape in canonical
order. If the best distance exceeds max_distance the grid is unrecognized.

Reference bitmaps are drawn at half-mino resolution ('#' = bright):

    T               I
    .######.        ........
    .######.        ########
    ...##...        ########
    ...##...        ........
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from tetris_ocr.calibration.ocr_boxes import NEXT_GRID_COLS, NEXT_GRID_ROWS
from tetris_ocr.models.tetromino import TetrominoType


logger = logging.getLogger(__name__)


DEFAULT_MAX_DISTANCE = 4


def _bitmap(*rows: str) -> np.ndarray:
    grid = np.array([[1 if char == "#" else 0 for char in row] for row in rows], dtype=np.uint8)
    if grid.shape != (NEXT_GRID_ROWS, NEXT_GRID_COLS):
        raise ValueError(f"Reference bitmap must be {NEXT_GRID_ROWS}x{NEXT_GRID_COLS}")
    return grid


# One or more reference bitmaps per shape; the I piece may be drawn one
# half-mino lower depending on the capture's vertical alignment
NEXT_TEMPLATES: Dict[TetrominoType, Tuple[np.ndarray, ...]] = {
    TetrominoType.I: (
        _bitmap("........", "########", "########", "........"),
        _bitmap("........", "........", "########", "########"),
    ),
    TetrominoType.J: (
        _bitmap(".######.", ".######.", ".....##.", ".....##."),
    ),
    TetrominoType.L: (
        _bitmap(".######.", ".######.", ".##.....", ".##....."),
    ),
    TetrominoType.O: (
        _bitmap("..####..", "..####..", "..####..", "..####.."),
    ),
    TetrominoType.S: (
        _bitmap("...####.", "...####.", ".####...", ".####..."),
    ),
    TetrominoType.T: (
        _bitmap(".######.", ".######.", "...##...", "...##..."),
    ),
    TetrominoType.Z: (
        _bitmap(".####...", ".####...", "...####.", "...####."),
    ),
}


def grid_distance(grid: np.ndarray, template: np.ndarray) -> int:
    """Number of cells where grid and template disagree."""
    return int(np.count_nonzero(grid != template))


def rank_tetromino_types(grid: Sequence[Sequence[int]]) -> List[Tuple[TetrominoType, int]]:
    """
    Best distance per shape, in canonical order.

    Args:
        grid: 4x8 binary grid (1 = bright)

    Returns:
        (shape, min distance over its templates) for every shape
    """
    array = np.asarray(grid, dtype=np.uint8)
    if array.shape != (NEXT_GRID_ROWS, NEXT_GRID_COLS):
        raise ValueError(f"Next grid must be {NEXT_GRID_ROWS}x{NEXT_GRID_COLS}, got {array.shape}")

    return [
        (tetromino_type, min(grid_distance(array, template) for template in NEXT_TEMPLATES[tetromino_type]))
        for tetromino_type in TetrominoType
    ]


def find_similar_tetromino_type(
    grid: Sequence[Sequence[int]],
    max_distance: int = DEFAULT_MAX_DISTANCE,
) -> Optional[TetrominoType]:
    """
    Classify a sampled next-box grid.

    Args:
        grid: 4x8 binary grid (1 = bright)
        max_distance: Largest accepted mismatch count

    Returns:
        The closest shape, or None if no shape is within max_distance
    """
    best_type: Optional[TetrominoType] = None
    best_distance = -1
    for tetromino_type, distance in rank_tetromino_types(grid):
        # strict comparison keeps the earliest shape on ties
        if best_type is None or distance < best_distance:
            best_type, best_distance = tetromino_type, distance

    if best_distance > max_distance:
        logger.debug(f"Next box unrecognized: closest {best_type} at distance {best_distance}")
        return None
    return best_type
