"""
tetris-ocr Configuration
========================

This module handles configuration loading for the game tracker.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    TETRIS_OCR_CONFIG               -> config file path
    TETRIS_OCR_CALIBRATION_PATH     -> calibration.path
    TETRIS_OCR_SHINE_BRIGHTNESS     -> ocr.shine_brightness
    TETRIS_OCR_NEXT_MAX_DISTANCE    -> ocr.next_max_distance
    TETRIS_OCR_DIGIT_CLASSIFIER     -> ocr.digits.classifier
    TETRIS_OCR_MAX_BOARD_NOISE      -> state_machine.max_board_noise
    TETRIS_OCR_LIMBO_TIMEOUT_FRAMES -> state_machine.limbo_timeout_frames
    TETRIS_OCR_FPS                  -> tracker.fps
    TETRIS_OCR_ON_SAMPLE_ERROR      -> tracker.on_sample_error
    TETRIS_OCR_LOG_LEVEL            -> logging.level
    TETRIS_OCR_LOG_FORMAT           -> logging.format

Example:
    from tetris_ocr.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.state_machine.max_board_noise)
    print(settings.tracker.on_sample_error)
"""

import os
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class CalibrationConfig(BaseModel):
    """Calibration file location."""

    path: str = Field(
        default="./calibration.json",
        description="Path to calibration JSON/YAML file",
    )


class DigitConfig(BaseModel):
    """Level digit reader configuration."""

    classifier: Literal["template", "none"] = Field(
        default="template",
        description="Digit classifier: 'template' or 'none' (never reads)",
    )
    num_digits: int = Field(default=2, ge=1, le=3, description="Digits in the level counter")
    brightness_threshold: float = Field(
        default=100.0,
        ge=0,
        le=255,
        description="Brightness above which a glyph cell is lit",
    )
    max_distance: int = Field(
        default=6,
        ge=0,
        description="Largest accepted glyph mismatch count per digit",
    )


class OCRConfig(BaseModel):
    """Feature extraction thresholds."""

    shine_brightness: float = Field(
        default=130.0,
        ge=0,
        le=255,
        description="Block-shine brightness above which a mino exists",
    )
    next_brightness: float = Field(
        default=30.0,
        ge=0,
        le=255,
        description="Brightness above which a next-box cell is lit",
    )
    next_max_distance: int = Field(
        default=4,
        ge=0,
        le=32,
        description="Largest accepted next-box template mismatch count",
    )
    digits: DigitConfig = Field(default_factory=DigitConfig)


class StateMachineConfig(BaseModel):
    """Lifecycle transition thresholds."""

    max_board_noise: float = Field(
        default=25.0,
        ge=0,
        description="Highest noise score accepted as a genuine board",
    )
    game_start_confirm_frames: int = Field(
        default=1,
        ge=1,
        description="Consecutive qualifying frames needed to start a game",
    )
    limbo_timeout_frames: int = Field(
        default=120,
        ge=0,
        description="Unreadable frames tolerated in limbo before game end",
    )


class TrackerConfig(BaseModel):
    """Frame driver configuration."""

    fps: float = Field(default=60.0, gt=0, description="Capture frame rate")
    on_sample_error: Literal["skip", "abort"] = Field(
        default="skip",
        description="Policy for frames with out-of-bounds samples",
    )
    log_every_n_frames: int = Field(
        default=300,
        ge=1,
        description="Log progress every N frames",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for tetris-ocr.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    calibration: CalibrationConfig = Field(default_factory=CalibrationConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    state_machine: StateMachineConfig = Field(default_factory=StateMachineConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

# (variable, config keys, cast)
ENV_OVERRIDES: List[Tuple[str, Tuple[str, ...], Callable[[str], Any]]] = [
    ("TETRIS_OCR_CALIBRATION_PATH", ("calibration", "path"), str),
    ("TETRIS_OCR_SHINE_BRIGHTNESS", ("ocr", "shine_brightness"), float),
    ("TETRIS_OCR_NEXT_MAX_DISTANCE", ("ocr", "next_max_distance"), int),
    ("TETRIS_OCR_DIGIT_CLASSIFIER", ("ocr", "digits", "classifier"), str),
    ("TETRIS_OCR_MAX_BOARD_NOISE", ("state_machine", "max_board_noise"), float),
    ("TETRIS_OCR_LIMBO_TIMEOUT_FRAMES", ("state_machine", "limbo_timeout_frames"), int),
    ("TETRIS_OCR_FPS", ("tracker", "fps"), float),
    ("TETRIS_OCR_ON_SAMPLE_ERROR", ("tracker", "on_sample_error"), str),
    ("TETRIS_OCR_LOG_LEVEL", ("logging", "level"), str),
    ("TETRIS_OCR_LOG_FORMAT", ("logging", "format"), str),
]


def _find_config_file() -> Optional[Path]:
    """First existing config.yaml in the working directory or repo root."""
    candidates = [
        Path("config.yaml"),
        Path("config.yml"),
        Path(__file__).resolve().parents[2] / "config.yaml",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to config.yaml. If None, uses TETRIS_OCR_CONFIG or
            searches the working directory and the repository root.

    Returns:
        Settings: Loaded configuration

    Raises:
        pydantic.ValidationError: If a value is out of range
    """
    path = config_path or os.environ.get("TETRIS_OCR_CONFIG")
    config_file = Path(path) if path else _find_config_file()

    config_data: Dict[str, Any] = {}
    if config_file is not None and config_file.is_file():
        logger.info(f"Loading config from: {config_file}")
        with open(config_file, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: Dict[str, Any]) -> None:
    """Apply environment variable overrides to config data."""
    for variable, keys, cast in ENV_OVERRIDES:
        value = os.environ.get(variable)
        if not value:
            continue
        section = config_data
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = cast(value)
        logger.debug(f"Config override from {variable}: {'.'.join(keys)}")


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

