"""
Lifecycle States
================

The four lifecycle states of a tracked game.

Each state declares its id and its permitted successors as data, and
implements advance_frame(), the per-frame hook. A hook may read any
OCRFrame feature, mutate the GameData, and return the id of the successor
it requests (or None to stay). It never applies transitions itself; the
engine validates and applies them.

Hook discipline:
    Every feature a hook needs is read BEFORE any mutation, so a sampling
    error leaves both the GameData and the state's own counters untouched.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Optional

from tetris_ocr.agent.transitions import PERMITTED_TRANSITIONS, TransitionThresholds
from tetris_ocr.models.board import TetrisBoard
from tetris_ocr.models.state import (
    GameData,
    LineClearEvent,
    OCRStateID,
    score_for_line_clear,
)
from tetris_ocr.ocr.ocr_frame import OCRFrame


logger = logging.getLogger(__name__)


# Minos in a single tetromino
PIECE_SIZE = 4


class OCRState(ABC):
    """
    Base class for lifecycle states.

    Attributes:
        state_id: Identifier of this state
        permitted_transitions: States this one may request
        thresholds: Transition thresholds
    """

    state_id: OCRStateID

    def __init__(self, thresholds: TransitionThresholds) -> None:
        self.thresholds = thresholds
        self.permitted_transitions: FrozenSet[OCRStateID] = PERMITTED_TRANSITIONS[self.state_id]

    @property
    def is_terminal(self) -> bool:
        return not self.permitted_transitions

    def on_enter(self, game_data: GameData) -> None:
        """Called by the engine when this state becomes active."""
        pass

    def is_board_readable(self, ocr_frame: OCRFrame) -> bool:
        """Whether the frame's noise score passes the board gate."""
        return ocr_frame.get_board_noise().value <= self.thresholds.max_board_noise

    @abstractmethod
    def advance_frame(self, game_data: GameData, ocr_frame: OCRFrame) -> Optional[OCRStateID]:
        """
        Run the state's logic for one frame.

        Args:
            game_data: Accumulated record, exclusively owned during the call
            ocr_frame: Extractor for the current frame

        Returns:
            The requested successor state, or None to stay
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class BeforeGameState(OCRState):
    """
    Waits for a game to start.

    A game starts when a genuine board shows exactly one tetromino and
    nothing else: the first piece spawned on an empty board.
    """

    state_id = OCRStateID.BEFORE_GAME

    def __init__(self, thresholds: TransitionThresholds) -> None:
        super().__init__(thresholds)
        self._confirmed_frames = 0

    def on_enter(self, game_data: GameData) -> None:
        self._confirmed_frames = 0

    def advance_frame(self, game_data: GameData, ocr_frame: OCRFrame) -> Optional[OCRStateID]:
        if not self.is_board_readable(ocr_frame):
            self._confirmed_frames = 0
            return None

        placed = ocr_frame.get_board_only_tetromino()
        if not placed.is_known:
            self._confirmed_frames = 0
            return None

        board = ocr_frame.get_binary_board().value
        level = ocr_frame.get_level()
        next_type = ocr_frame.get_next_type()

        self._confirmed_frames += 1
        if self._confirmed_frames < self.thresholds.game_start_confirm_frames:
            return None

        game_data.board = board
        game_data.pieces.append(placed.value.tetromino_type)
        if next_type.is_known:
            game_data.next_piece = next_type.value
            game_data.pieces.append(next_type.value)
        if level.is_known:
            game_data.level = level.value

        logger.info(
            f"Game start detected at frame {ocr_frame.frame_id}: "
            f"first={placed.value.tetromino_type.value}, "
            f"next={next_type.value.value if next_type.is_known else '?'}, "
            f"level={game_data.level}"
        )
        return OCRStateID.IN_GAME


class InGameState(OCRState):
    """
    Accumulates observations while the board is readable.

    Per frame:
        - Records the board
        - Updates the level when readable
        - Detects line clears on the rising edge of "full rows visible"
        - Appends the next-box piece whenever it changes
    """

    state_id = OCRStateID.IN_GAME

    def on_enter(self, game_data: GameData) -> None:
        game_data.clear_in_progress = False

    def advance_frame(self, game_data: GameData, ocr_frame: OCRFrame) -> Optional[OCRStateID]:
        if not self.is_board_readable(ocr_frame):
            return OCRStateID.GAME_LIMBO

        board = ocr_frame.get_binary_board().value
        level = ocr_frame.get_level()
        next_type = ocr_frame.get_next_type()

        if level.is_known:
            game_data.level = level.value

        if board.full_rows():
            if not game_data.clear_in_progress:
                self._record_line_clear(game_data, board.copy(), ocr_frame.frame_id)
                game_data.clear_in_progress = True
        else:
            game_data.clear_in_progress = False

        game_data.board = board

        if next_type.is_known and next_type.value != game_data.next_piece:
            game_data.next_piece = next_type.value
            game_data.pieces.append(next_type.value)

        return None

    def _record_line_clear(self, game_data: GameData, board: TetrisBoard, frame_id: int) -> None:
        num_lines = board.process_line_clears()
        if num_lines > PIECE_SIZE:
            logger.warning(
                f"Ignoring {num_lines} full rows at frame {frame_id}: "
                f"more than one piece can clear"
            )
            return

        points: Optional[int] = None
        if game_data.level is not None:
            points = score_for_line_clear(num_lines, game_data.level)
            game_data.score += points
        else:
            logger.warning(
                f"Line clear at frame {frame_id} with unknown level; "
                f"lines counted, no points awarded"
            )

        game_data.lines += num_lines
        game_data.line_clears.append(
            LineClearEvent(
                frame_id=frame_id,
                lines=num_lines,
                level=game_data.level,
                points=points,
            )
        )
        logger.info(
            f"Line clear at frame {frame_id}: {num_lines} lines, "
            f"points={points}, total lines={game_data.lines}, score={game_data.score}"
        )


class GameLimboState(OCRState):
    """
    Board temporarily unreadable.

    Returns to IN_GAME once the board is readable again, unless what
    reappears is a fresh single piece on an otherwise empty board while the
    tracked board held more minos, which means a new game has begun. Ends
    the game once unreadable for more than limbo_timeout_frames frames.

    The engine replays the frame that resumes the game through IN_GAME, so
    its board, level, next piece and full rows are recorded.
    """

    state_id = OCRStateID.GAME_LIMBO

    def __init__(self, thresholds: TransitionThresholds) -> None:
        super().__init__(thresholds)
        self._frames_in_limbo = 0

    @property
    def frames_in_limbo(self) -> int:
        return self._frames_in_limbo

    def on_enter(self, game_data: GameData) -> None:
        self._frames_in_limbo = 0

    def advance_frame(self, game_data: GameData, ocr_frame: OCRFrame) -> Optional[OCRStateID]:
        if self.is_board_readable(ocr_frame):
            fresh_piece = ocr_frame.get_board_only_tetromino_type()
            if fresh_piece.is_known and game_data.board.count() > PIECE_SIZE:
                logger.info(
                    f"New game visible at frame {ocr_frame.frame_id} "
                    f"(first piece {fresh_piece.value.value}); "
                    f"ending tracked game"
                )
                return OCRStateID.GAME_END
            return OCRStateID.IN_GAME

        self._frames_in_limbo += 1
        if self._frames_in_limbo > self.thresholds.limbo_timeout_frames:
            logger.info(
                f"Board unreadable for {self._frames_in_limbo} frames; game over"
            )
            return OCRStateID.GAME_END
        return None


class GameEndState(OCRState):
    """Terminal state. Entering it finalizes the record."""

    state_id = OCRStateID.GAME_END

    def on_enter(self, game_data: GameData) -> None:
        game_data.finalized = True

    def advance_frame(self, game_data: GameData, ocr_frame: OCRFrame) -> Optional[OCRStateID]:
        return None


def create_states(thresholds: TransitionThresholds) -> Dict[OCRStateID, OCRState]:
    """One instance of every lifecycle state, keyed by id."""
    states = [
        BeforeGameState(thresholds),
        InGameState(thresholds),
        GameLimboState(thresholds),
        GameEndState(thresholds),
    ]
    return {state.state_id: state for state in states}
