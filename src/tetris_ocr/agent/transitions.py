"""
State Transition Rules
======================

Thresholds and the declared transition table for the recognition lifecycle.

Transition Table:
    BEFORE_GAME → IN_GAME
    IN_GAME     → GAME_LIMBO
    GAME_LIMBO  → IN_GAME, GAME_END
    GAME_END    → (terminal)

Transition Rules:
    BEFORE_GAME → IN_GAME:
        noise <= max_board_noise AND board holds exactly one tetromino,
        sustained for game_start_confirm_frames consecutive frames
    IN_GAME → GAME_LIMBO:
        noise > max_board_noise
    GAME_LIMBO → IN_GAME:
        noise <= max_board_noise again
    GAME_LIMBO → GAME_END:
        noise > max_board_noise for more than limbo_timeout_frames
        consecutive limbo frames, OR the readable board that reappears is
        a fresh single piece while the tracked board held more minos

The engine validates every requested transition against this table.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet

from tetris_ocr.models.state import OCRStateID


PERMITTED_TRANSITIONS: Dict[OCRStateID, FrozenSet[OCRStateID]] = {
    OCRStateID.BEFORE_GAME: frozenset({OCRStateID.IN_GAME}),
    OCRStateID.IN_GAME: frozenset({OCRStateID.GAME_LIMBO}),
    OCRStateID.GAME_LIMBO: frozenset({OCRStateID.IN_GAME, OCRStateID.GAME_END}),
    OCRStateID.GAME_END: frozenset(),
}


@dataclass(frozen=True)
class TransitionThresholds:
    """
    Thresholds for lifecycle transitions.

    Loaded from configuration file.

    Attributes:
        max_board_noise: Highest noise score accepted as a genuine board
        game_start_confirm_frames: Consecutive qualifying frames needed to
            start a game
        limbo_timeout_frames: Consecutive unreadable limbo frames tolerated
            before the game is declared over
    """

    max_board_noise: float = 25.0
    game_start_confirm_frames: int = 1
    limbo_timeout_frames: int = 120

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.max_board_noise < 0:
            raise ValueError("max_board_noise must be non-negative")
        if self.game_start_confirm_frames < 1:
            raise ValueError("game_start_confirm_frames must be >= 1")
        if self.limbo_timeout_frames < 0:
            raise ValueError("limbo_timeout_frames must be non-negative")
