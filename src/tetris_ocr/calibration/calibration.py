"""
Calibration Models
==================

Immutable description of where the logical screen regions lie in frame
pixel coordinates for one capture setup.

Calibration is EXPLICITLY DECLARED, not discovered at runtime. It is
produced by a separate calibration procedure, loaded from JSON or YAML and
shared read-only by every frame of a session.

Example calibration.json:
    {
        "rects": {
            "board": {"left": 96, "top": 40, "right": 176, "bottom": 200},
            "next":  {"left": 192, "top": 112, "right": 224, "bottom": 128},
            "level": {"left": 208, "top": 160, "right": 224, "bottom": 168}
        }
    }

Note:
    All coordinates are in IMAGE SPACE (pixels), origin top-left.
    right/bottom are exclusive.
"""

import json
import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tetris_ocr.errors import CalibrationError


logger = logging.getLogger(__name__)


class Rect(BaseModel):
    """
    Axis-aligned pixel rectangle.

    Attributes:
        left: Left edge (inclusive)
        top: Top edge (inclusive)
        right: Right edge (exclusive)
        bottom: Bottom edge (exclusive)
    """

    model_config = ConfigDict(frozen=True)

    left: int = Field(..., ge=0, description="Left edge in pixels")
    top: int = Field(..., ge=0, description="Top edge in pixels")
    right: int = Field(..., description="Right edge in pixels (exclusive)")
    bottom: int = Field(..., description="Bottom edge in pixels (exclusive)")

    @model_validator(mode="after")
    def validate_extent(self) -> "Rect":
        """Ensure the rectangle has positive area."""
        if self.right <= self.left:
            raise ValueError(f"right ({self.right}) must exceed left ({self.left})")
        if self.bottom <= self.top:
            raise ValueError(f"bottom ({self.bottom}) must exceed top ({self.top})")
        return self

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


class CalibrationRects(BaseModel):
    """Calibrated regions of the game screen."""

    model_config = ConfigDict(frozen=True)

    board: Rect = Field(..., description="10x20 playfield")
    next: Rect = Field(..., description="Next-piece preview box")
    level: Rect = Field(..., description="Level digits")


class Calibration(BaseModel):
    """
    Session-scoped calibration data.

    Attributes:
        rects: Pixel regions of the board, next box and level digits
    """

    model_config = ConfigDict(frozen=True)

    rects: CalibrationRects


def load_calibration(path: Union[str, Path]) -> Calibration:
    """
    Load calibration from a JSON or YAML file.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        Validated Calibration

    Raises:
        CalibrationError: If the file is missing, unparsable or invalid
    """
    file_path = Path(path)

    if not file_path.exists():
        raise CalibrationError(f"Calibration file not found: {path}")

    logger.info(f"Loading calibration from: {path}")

    try:
        with open(file_path, "r") as f:
            if file_path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise CalibrationError(f"Cannot read calibration file {path}: {e}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CalibrationError(f"Cannot parse calibration file {path}: {e}")

    try:
        calibration = Calibration.model_validate(data)
    except ValidationError as e:
        raise CalibrationError(f"Invalid calibration in {path}: {e}")

    logger.info(
        f"Loaded calibration: board={calibration.rects.board.width}x"
        f"{calibration.rects.board.height}px"
    )
    return calibration
