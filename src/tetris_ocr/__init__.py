"""
tetris-ocr
==========

Frame-by-frame recognition of a classic falling-block game from captured
video.

The package reads every frame through a calibrated, lazily evaluated
feature extractor and feeds it to a four-state lifecycle machine that
accumulates the game record: board, score, level, lines and pieces.

Components:
    - models: Board, tetrominoes, feature cache slots, game record
    - stream: Frames, image decoding and video sources
    - calibration: Screen regions and sampling geometry
    - perception: Next-box templates, single-piece isolation, digit reading
    - ocr: The per-frame lazy feature extractor
    - agent: LangGraph-driven lifecycle state machine
    - tracker: Async driver from a video source to a GameRecord

Example:
    from tetris_ocr.calibration import load_calibration
    from tetris_ocr.stream import ImageDirectorySource
    from tetris_ocr.tracker import GameTracker

    tracker = GameTracker(load_calibration("calib.json"), ImageDirectorySource("frames/"))
    record = asyncio.run(tracker.run())
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
