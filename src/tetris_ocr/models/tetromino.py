"""
Tetromino Models
================

The seven canonical four-mino shapes and their rotations.

TetrominoType has exactly seven members. "Unrecognized" is never a shape;
recognizers express it as Feature.unknown() (or None at the function level).

The canonical order (I, J, L, O, S, T, Z) is the enum definition order and is
used to break ties deterministically wherever shapes are compared.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple


Cell = Tuple[int, int]


class TetrominoType(str, Enum):
    """Canonical tetromino shapes, in canonical order."""

    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"


# Spawn orientation of each shape as (x, y) cells, y increasing downward
_SPAWN_CELLS: Dict[TetrominoType, Tuple[Cell, ...]] = {
    TetrominoType.I: ((0, 0), (1, 0), (2, 0), (3, 0)),
    TetrominoType.J: ((0, 0), (1, 0), (2, 0), (2, 1)),
    TetrominoType.L: ((0, 0), (1, 0), (2, 0), (0, 1)),
    TetrominoType.O: ((0, 0), (1, 0), (0, 1), (1, 1)),
    TetrominoType.S: ((1, 0), (2, 0), (0, 1), (1, 1)),
    TetrominoType.T: ((0, 0), (1, 0), (2, 0), (1, 1)),
    TetrominoType.Z: ((0, 0), (1, 0), (1, 1), (2, 1)),
}


def normalize_cells(cells) -> FrozenSet[Cell]:
    """Translate cells so the minimum x and y are both zero."""
    cells = list(cells)
    min_x = min(x for x, _ in cells)
    min_y = min(y for _, y in cells)
    return frozenset((x - min_x, y - min_y) for x, y in cells)


def _rotate_clockwise(cells: FrozenSet[Cell]) -> FrozenSet[Cell]:
    return normalize_cells((-y, x) for x, y in cells)


def _distinct_rotations(spawn: Tuple[Cell, ...]) -> Tuple[FrozenSet[Cell], ...]:
    rotations: List[FrozenSet[Cell]] = []
    current = normalize_cells(spawn)
    for _ in range(4):
        if current not in rotations:
            rotations.append(current)
        current = _rotate_clockwise(current)
    return tuple(rotations)


# Distinct normalized rotations per shape: I/S/Z have 2, O has 1, J/L/T have 4
ROTATIONS: Dict[TetrominoType, Tuple[FrozenSet[Cell], ...]] = {
    tetromino_type: _distinct_rotations(cells)
    for tetromino_type, cells in _SPAWN_CELLS.items()
}


@dataclass(frozen=True)
class PlacedTetromino:
    """
    A tetromino at a fixed board position.

    Attributes:
        tetromino_type: Shape of the piece
        rotation: Index into ROTATIONS[tetromino_type]
        x: Column of the piece's bounding-box left edge
        y: Row of the piece's bounding-box top edge
    """

    tetromino_type: TetrominoType
    rotation: int
    x: int
    y: int

    def cells(self) -> FrozenSet[Cell]:
        """Absolute board cells covered by the piece."""
        shape = ROTATIONS[self.tetromino_type][self.rotation]
        return frozenset((self.x + dx, self.y + dy) for dx, dy in shape)
