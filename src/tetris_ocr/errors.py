"""
Error Types
===========

Exception hierarchy for tetris-ocr.

Error Kinds:
    - PixelOutOfBoundsError: a sample point lies outside the frame. Fatal for
      the frame being processed, surfaced to the caller, never defaulted.
    - IllegalTransitionError: a lifecycle state requested a successor it did
      not declare. This is a programming defect, not a data condition.
    - CalibrationError: calibration data is missing or invalid.
    - ImageDecodeError: a video source could not decode image data.

Unrecognized classifications are NOT errors. They flow through the system
as Feature.unknown() values.
"""

from typing import Iterable, Tuple


class TetrisOCRError(Exception):
    """Base class for all tetris-ocr errors."""
    pass


class PixelOutOfBoundsError(TetrisOCRError):
    """Raised when a sample point falls outside the frame."""
    
    def __init__(self, x: int, y: int, frame_id: int = -1) -> None:
        self.x = x
        self.y = y
        self.frame_id = frame_id
        super().__init__(
            f"Pixel ({x}, {y}) out of bounds in frame {frame_id}"
        )


class IllegalTransitionError(TetrisOCRError, RuntimeError):
    """Raised when a state requests a successor it did not declare."""
    
    def __init__(
        self,
        source: str,
        target: str,
        permitted: Iterable[str] = (),
    ) -> None:
        self.source = source
        self.target = target
        self.permitted: Tuple[str, ...] = tuple(permitted)
        super().__init__(
            f"Illegal transition {source} -> {target} "
            f"(permitted: {', '.join(self.permitted) or 'none'})"
        )


class CalibrationError(TetrisOCRError):
    """Raised when calibration data cannot be loaded or validated."""
    pass


class ImageDecodeError(TetrisOCRError):
    """Raised when image decoding fails."""
    pass
