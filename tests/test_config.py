"""
Configuration Tests
===================

Tests for settings loading, environment overrides and calibration files.
"""

import importlib.util
import json
import logging
import os

import pytest
from pydantic import ValidationError

from tetris_ocr import config as config_module
from tetris_ocr.calibration import BoardOCRBox, LevelOCRBox, NextOCRBox, Rect, load_calibration
from tetris_ocr.config import Settings, load_config
from tetris_ocr.errors import CalibrationError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TETRIS_OCR_* variables from the environment."""
    for name in list(os.environ):
        if name.startswith("TETRIS_OCR_"):
            monkeypatch.delenv(name)
    return monkeypatch


class TestSettings:
    """Tests for config loading."""

    def test_defaults(self):
        settings = Settings()
        assert settings.ocr.shine_brightness == 130.0
        assert settings.ocr.next_brightness == 30.0
        assert settings.ocr.digits.classifier == "template"
        assert settings.state_machine.max_board_noise == 25.0
        assert settings.state_machine.limbo_timeout_frames == 120
        assert settings.tracker.on_sample_error == "skip"
        assert settings.logging.format == "text"

    def test_load_yaml(self, clean_env, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "state_machine:\n"
            "  max_board_noise: 12.5\n"
            "tracker:\n"
            "  on_sample_error: abort\n"
        )

        settings = load_config(str(config_path))
        assert settings.state_machine.max_board_noise == 12.5
        assert settings.tracker.on_sample_error == "abort"
        assert settings.state_machine.limbo_timeout_frames == 120

    def test_empty_yaml(self, clean_env, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")
        assert load_config(str(config_path)) == Settings()

    def test_env_overrides_file(self, clean_env, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("state_machine:\n  limbo_timeout_frames: 30\n")
        clean_env.setenv("TETRIS_OCR_LIMBO_TIMEOUT_FRAMES", "45")
        clean_env.setenv("TETRIS_OCR_MAX_BOARD_NOISE", "18")
        clean_env.setenv("TETRIS_OCR_DIGIT_CLASSIFIER", "none")
        clean_env.setenv("TETRIS_OCR_CALIBRATION_PATH", "/tmp/calib.json")
        clean_env.setenv("TETRIS_OCR_LOG_FORMAT", "json")

        settings = load_config(str(config_path))
        assert settings.state_machine.limbo_timeout_frames == 45
        assert settings.state_machine.max_board_noise == 18.0
        assert settings.ocr.digits.classifier == "none"
        assert settings.calibration.path == "/tmp/calib.json"
        assert settings.logging.format == "json"

    def test_config_path_from_env(self, clean_env, tmp_path):
        config_path = tmp_path / "other.yaml"
        config_path.write_text("tracker:\n  fps: 30\n")
        clean_env.setenv("TETRIS_OCR_CONFIG", str(config_path))

        assert load_config().tracker.fps == 30.0

    def test_invalid_values_rejected(self, clean_env, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("tracker:\n  on_sample_error: retry\n")
        with pytest.raises(ValidationError):
            load_config(str(config_path))

        with pytest.raises(ValidationError):
            Settings.model_validate({"state_machine": {"game_start_confirm_frames": 0}})

    def test_import_has_no_side_effects(self, clean_env, tmp_path):
        (tmp_path / "config.yaml").write_text("tracker:\n  on_sample_error: retry\n")
        clean_env.chdir(tmp_path)
        handlers_before = list(logging.getLogger().handlers)

        module_spec = importlib.util.spec_from_file_location("fresh_config", config_module.__file__)
        module = importlib.util.module_from_spec(module_spec)
        module_spec.loader.exec_module(module)

        assert not hasattr(module, "settings")
        assert logging.getLogger().handlers == handlers_before
        with pytest.raises(ValidationError):
            module.load_config()


class TestCalibration:
    """Tests for calibration files and sampling geometry."""

    def test_load_json(self, calibration_data, tmp_path):
        path = tmp_path / "calibration.json"
        path.write_text(json.dumps(calibration_data))

        calibration = load_calibration(path)
        assert calibration.rects.board == Rect(left=16, top=16, right=96, bottom=176)
        assert calibration.rects.board.width == 80

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "calibration.yaml"
        path.write_text(
            "rects:\n"
            "  board: {left: 0, top: 0, right: 80, bottom: 160}\n"
            "  next: {left: 90, top: 0, right: 122, bottom: 16}\n"
            "  level: {left: 90, top: 20, right: 104, bottom: 27}\n"
        )
        assert load_calibration(path).rects.level.height == 7

    def test_missing_file(self, tmp_path):
        with pytest.raises(CalibrationError):
            load_calibration(tmp_path / "missing.json")

    def test_unparsable_file(self, tmp_path):
        path = tmp_path / "calibration.json"
        path.write_text("{not json")
        with pytest.raises(CalibrationError):
            load_calibration(path)

    def test_directory_path(self, tmp_path):
        path = tmp_path / "calibration.json"
        path.mkdir()
        with pytest.raises(CalibrationError):
            load_calibration(path)

    @pytest.mark.parametrize("suffix", [".json", ".yaml"])
    def test_binary_file(self, tmp_path, suffix):
        path = tmp_path / f"calibration{suffix}"
        path.write_bytes(b"\xff\xfe\x00\x81\x9f\xc3\x28")
        with pytest.raises(CalibrationError):
            load_calibration(path)

    def test_degenerate_rect(self, calibration_data, tmp_path):
        calibration_data["rects"]["next"]["right"] = calibration_data["rects"]["next"]["left"]
        path = tmp_path / "calibration.json"
        path.write_text(json.dumps(calibration_data))
        with pytest.raises(CalibrationError):
            load_calibration(path)

    def test_calibration_is_immutable(self, calibration):
        with pytest.raises(ValidationError):
            calibration.rects.board.left = 0

    def test_board_sample_points(self, calibration):
        box = BoardOCRBox(calibration.rects.board)
        assert box.get_block_shine((0, 0)) == (17, 17)
        assert box.get_block_shine((9, 19)) == (89, 169)
        assert box.get_mino_points((0, 0)) == ((19, 21), (21, 19))

    def test_sample_points_are_floored(self):
        box = BoardOCRBox(Rect(left=0, top=0, right=75, bottom=150))
        # 7.5 px minos: shine at 0.9375 floors to 0
        assert box.get_block_shine((0, 0)) == (0, 0)
        assert box.get_block_shine((1, 1)) == (8, 8)

    def test_next_grid_points(self, calibration):
        points = NextOCRBox(calibration.rects.next).get_grid_points()
        assert len(points) == 4
        assert all(len(row) == 8 for row in points)
        assert points[0][0] == (114, 34)
        assert points[3][7] == (142, 46)

    def test_level_grid_points(self, calibration):
        box = LevelOCRBox(calibration.rects.level, num_digits=2)
        assert box.get_digit_grid_points(0)[0][0] == (113, 65)
        assert box.get_digit_grid_points(1)[6][6] == (139, 77)
