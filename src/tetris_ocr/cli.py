"""
Command Line Entry Point
========================

Track a game from a directory of captured frames and print the record.

Usage:
    tetris-ocr FRAMES_DIR --calibration calib.json [--config config.yaml]
               [--on-sample-error skip|abort] [--metrics]

Exit codes:
    0: record printed (finalized or not)
    1: aborted on a sampling error
    2: bad calibration, config or frames directory
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from tetris_ocr.calibration.calibration import load_calibration
from tetris_ocr.config import load_config, setup_logging
from tetris_ocr.errors import CalibrationError, ImageDecodeError, PixelOutOfBoundsError
from tetris_ocr.stream.video_source import ImageDirectorySource
from tetris_ocr.tracker import GameTracker


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tetris-ocr",
        description="Track a falling-block game from captured frames.",
    )
    parser.add_argument("frames_dir", help="Directory of frame images, sorted by name")
    parser.add_argument(
        "--calibration",
        default=None,
        help="Calibration JSON/YAML (default: calibration.path from config)",
    )
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument(
        "--on-sample-error",
        choices=["skip", "abort"],
        default=None,
        help="Policy for frames with out-of-bounds samples",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print tracker metrics to stderr",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_config(args.config)
    except ValidationError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return 2
    setup_logging(settings)

    if args.on_sample_error is not None:
        settings.tracker.on_sample_error = args.on_sample_error

    try:
        calibration = load_calibration(args.calibration or settings.calibration.path)
        source = ImageDirectorySource(args.frames_dir, fps=settings.tracker.fps)
    except (CalibrationError, FileNotFoundError, NotADirectoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info(f"Tracking {len(source)} frames from {args.frames_dir}")
    tracker = GameTracker.from_settings(calibration, source, settings)

    try:
        record = asyncio.run(tracker.run())
    except PixelOutOfBoundsError as e:
        print(f"Aborted: {e}", file=sys.stderr)
        return 1
    except ImageDecodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(record.model_dump_json(indent=2))
    if args.metrics:
        print(json.dumps(tracker.metrics(), indent=2), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
