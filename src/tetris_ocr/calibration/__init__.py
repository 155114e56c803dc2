"""
Calibration Module
==================

Calibrated screen regions and the sampling geometry derived from them.

Components:
    - Rect, Calibration: Immutable region map (pydantic)
    - load_calibration: Load a calibration from JSON or YAML
    - BoardOCRBox, NextOCRBox, LevelOCRBox: Logical coordinate → pixel mapping
"""

from tetris_ocr.calibration.calibration import (
    Calibration,
    CalibrationRects,
    Rect,
    load_calibration,
)
from tetris_ocr.calibration.ocr_boxes import (
    DIGIT_GRID_SIZE,
    NEXT_GRID_COLS,
    NEXT_GRID_ROWS,
    BoardOCRBox,
    LevelOCRBox,
    NextOCRBox,
)

__all__ = [
    "Rect",
    "CalibrationRects",
    "Calibration",
    "load_calibration",
    "BoardOCRBox",
    "NextOCRBox",
    "LevelOCRBox",
    "NEXT_GRID_ROWS",
    "NEXT_GRID_COLS",
    "DIGIT_GRID_SIZE",
]
