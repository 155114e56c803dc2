"""
Data Models
===========

Data models for tetris-ocr.

This module re-exports all data models for convenient access.

Models:
    Board:
        - ColorType: Cell color (EMPTY, PRIMARY, SECONDARY, WHITE)
        - TetrisBoard: 10x20 grid with line-clear mechanics

    Tetromino:
        - TetrominoType: The seven canonical shapes
        - PlacedTetromino: A shape at a board position

    Feature:
        - Feature, FeatureStatus: Three-outcome extraction result
        - FeatureSlot: Write-once lazy cache slot

    State:
        - OCRStateID: Lifecycle states
        - GameData: Accumulated game record
        - LineClearEvent: One observed clear

    Output:
        - GameRecord: Serializable snapshot for consumers
"""

from tetris_ocr.models.board import BOARD_HEIGHT, BOARD_WIDTH, ColorType, TetrisBoard
from tetris_ocr.models.tetromino import ROTATIONS, PlacedTetromino, TetrominoType
from tetris_ocr.models.feature import Feature, FeatureSlot, FeatureStatus
from tetris_ocr.models.state import (
    GameData,
    LineClearEvent,
    OCRStateID,
    score_for_line_clear,
)
from tetris_ocr.models.output import GameRecord, LineClearRecord

__all__ = [
    # Board
    "BOARD_WIDTH",
    "BOARD_HEIGHT",
    "ColorType",
    "TetrisBoard",
    # Tetromino
    "TetrominoType",
    "PlacedTetromino",
    "ROTATIONS",
    # Feature
    "Feature",
    "FeatureSlot",
    "FeatureStatus",
    # State
    "OCRStateID",
    "GameData",
    "LineClearEvent",
    "score_for_line_clear",
    # Output
    "GameRecord",
    "LineClearRecord",
]
