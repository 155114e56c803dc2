"""
Game State Models
=================

Lifecycle identifiers and the accumulated game record.

Core Concepts:
    - OCRStateID: Discrete lifecycle states of a tracked game
    - LineClearEvent: One observed line clear
    - GameData: Mutable record accumulated across frames

Lifecycle:
    BEFORE_GAME → IN_GAME ⇄ GAME_LIMBO → GAME_END

Ownership:
    GameData is mutated ONLY by the active lifecycle state during its
    per-frame hook. Once GAME_END is reached it is finalized and handed to
    consumers as a GameRecord (see models/output.py).

Scoring:
    Classic NES scoring per line clear:
        points = BASE_POINTS[lines] * (level + 1)
    with BASE_POINTS = {1: 40, 2: 100, 3: 300, 4: 1200}.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tetris_ocr.models.board import TetrisBoard
from tetris_ocr.models.tetromino import TetrominoType


class OCRStateID(str, Enum):
    """
    Lifecycle states of a tracked game.

    Attributes:
        BEFORE_GAME: Waiting for a genuine board with a freshly spawned piece
        IN_GAME: Board readable; accumulating observations
        GAME_LIMBO: Board temporarily unreadable (animation, occlusion)
        GAME_END: Terminal; the record is final
    """

    BEFORE_GAME = "BEFORE_GAME"
    IN_GAME = "IN_GAME"
    GAME_LIMBO = "GAME_LIMBO"
    GAME_END = "GAME_END"


BASE_POINTS = {1: 40, 2: 100, 3: 300, 4: 1200}


def score_for_line_clear(num_lines: int, level: int) -> int:
    """
    Points for clearing num_lines at once on the given level.

    Raises:
        ValueError: If num_lines is not in 1-4 or level is negative
    """
    if num_lines not in BASE_POINTS:
        raise ValueError(f"num_lines must be 1-4, got {num_lines}")
    if level < 0:
        raise ValueError(f"level must be non-negative, got {level}")
    return BASE_POINTS[num_lines] * (level + 1)


@dataclass(frozen=True)
class LineClearEvent:
    """
    A single observed line clear.

    Attributes:
        frame_id: Frame on which the full rows were first seen
        lines: Number of rows cleared
        level: Level at the time of the clear, None if unreadable
        points: Points awarded, None when the level was unknown
    """

    frame_id: int
    lines: int
    level: Optional[int]
    points: Optional[int]


@dataclass
class GameData:
    """
    Accumulated record of one tracked game.

    Attributes:
        board: Board at the last readable observation
        score: Points from clears whose level was known
        level: Last level read from the screen, None until read
        lines: Total lines cleared
        pieces: Piece history (first piece, then each new next-box piece)
        next_piece: Piece last seen in the next box, None until recognized
        line_clears: Every observed line clear, in order
        frames_processed: Frames consumed by the state machine
        clear_in_progress: True while full rows remain visible
        finalized: True once GAME_END has been reached
    """

    board: TetrisBoard = field(default_factory=TetrisBoard)
    score: int = 0
    level: Optional[int] = None
    lines: int = 0
    pieces: List[TetrominoType] = field(default_factory=list)
    next_piece: Optional[TetrominoType] = None
    line_clears: List[LineClearEvent] = field(default_factory=list)
    frames_processed: int = 0
    clear_in_progress: bool = False
    finalized: bool = False

    @property
    def score_complete(self) -> bool:
        """Whether every recorded clear contributed points."""
        return all(event.points is not None for event in self.line_clears)

    def copy(self) -> "GameData":
        """Deep, independent copy."""
        return copy.deepcopy(self)
