"""
Game Record Output
==================

Serializable snapshot of a tracked game, handed to external consumers.

Output Contract:
    {
        "state": "GAME_END",
        "finalized": true,
        "score": 25460,
        "score_complete": true,
        "level": 18,
        "lines": 7,
        "pieces": ["O", "T"],
        "next_piece": "T",
        "line_clears": [
            {"frame_id": 7, "lines": 1, "level": 18, "points": 760}
        ],
        "frames_processed": 20,
        "board": ["..........", ...]
    }

Design Rules:
    - The record is a read-only copy; mutating it never affects GameData
    - No wire or file format is imposed beyond model_dump()/model_dump_json()
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tetris_ocr.models.state import GameData, OCRStateID
from tetris_ocr.models.tetromino import TetrominoType


class LineClearRecord(BaseModel):
    """One line clear in the output record."""

    model_config = ConfigDict(frozen=True)

    frame_id: int = Field(..., description="Frame where the full rows first appeared")
    lines: int = Field(..., ge=1, le=4, description="Rows cleared at once")
    level: Optional[int] = Field(default=None, ge=0, description="Level, if read")
    points: Optional[int] = Field(default=None, ge=0, description="Points, if level known")


class GameRecord(BaseModel):
    """
    Snapshot of the accumulated game record.

    Attributes:
        state: Lifecycle state at snapshot time
        finalized: Whether the game reached GAME_END
        score: Points from clears with a known level
        score_complete: False if any clear happened at an unknown level
        level: Last level read, if any
        lines: Total lines cleared
        pieces: Piece history
        next_piece: Piece last seen in the next box
        line_clears: Every observed clear
        frames_processed: Frames consumed by the state machine
        board: Last readable board as 20 text rows
    """

    model_config = ConfigDict(frozen=True)

    state: OCRStateID
    finalized: bool
    score: int = Field(..., ge=0)
    score_complete: bool
    level: Optional[int] = Field(default=None, ge=0)
    lines: int = Field(..., ge=0)
    pieces: List[TetrominoType] = Field(default_factory=list)
    next_piece: Optional[TetrominoType] = None
    line_clears: List[LineClearRecord] = Field(default_factory=list)
    frames_processed: int = Field(..., ge=0)
    board: List[str] = Field(..., min_length=20, max_length=20)

    @classmethod
    def from_game_data(cls, game_data: GameData, state: OCRStateID) -> "GameRecord":
        return cls(
            state=state,
            finalized=game_data.finalized,
            score=game_data.score,
            score_complete=game_data.score_complete,
            level=game_data.level,
            lines=game_data.lines,
            pieces=list(game_data.pieces),
            next_piece=game_data.next_piece,
            line_clears=[
                LineClearRecord(
                    frame_id=event.frame_id,
                    lines=event.lines,
                    level=event.level,
                    points=event.points,
                )
                for event in game_data.line_clears
            ],
            frames_processed=game_data.frames_processed,
            board=game_data.board.to_rows(),
        )
