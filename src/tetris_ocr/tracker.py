"""
Game Tracker
============

Async driver that pulls frames from a video source, wraps each one in an
OCRFrame and feeds it to the state machine, strictly in arrival order.

Pipeline (per frame):
    VideoSource.get_next_frame() → OCRFrame → OCRStateMachine.advance()

Stops when:
    - the source is exhausted (get_next_frame() returns None)
    - the machine reaches GAME_END
    - stop() is called

Sampling errors:
    A frame whose sample points fall outside the image raises
    PixelOutOfBoundsError inside advance(); the record is rolled back to
    its pre-frame state. With on_sample_error="skip" the frame is logged,
    counted and dropped. With "abort" the error propagates out of run().

Example:
    tracker = GameTracker(calibration, ImageDirectorySource("frames/"))
    record = await tracker.run()
    print(record.score, record.lines)
"""

import logging
import time
from typing import Any, Dict, List, Literal, Optional

from tetris_ocr.agent.graph import AdvanceResult, OCRStateMachine
from tetris_ocr.agent.transitions import TransitionThresholds
from tetris_ocr.calibration.calibration import Calibration
from tetris_ocr.config import Settings
from tetris_ocr.errors import PixelOutOfBoundsError
from tetris_ocr.models.output import GameRecord
from tetris_ocr.ocr.ocr_frame import OCRFrame, OCRThresholds
from tetris_ocr.perception.digits import (
    DigitClassifier,
    NullDigitClassifier,
    TemplateDigitClassifier,
)
from tetris_ocr.stream.video_source import VideoSource


logger = logging.getLogger(__name__)


SampleErrorPolicy = Literal["skip", "abort"]


class GameTracker:
    """
    Drives one tracked game from a video source.

    Attributes:
        calibration: Session calibration shared by every frame
        source: Ordered frame source
        ocr_thresholds: Feature extraction thresholds
        digit_classifier: Level reader
        on_sample_error: "skip" or "abort"
        machine: The lifecycle state machine
    """

    def __init__(
        self,
        calibration: Calibration,
        source: VideoSource,
        thresholds: Optional[TransitionThresholds] = None,
        digit_classifier: Optional[DigitClassifier] = None,
        on_sample_error: SampleErrorPolicy = "skip",
        ocr_thresholds: Optional[OCRThresholds] = None,
        log_every_n_frames: int = 300,
    ) -> None:
        if on_sample_error not in ("skip", "abort"):
            raise ValueError(f"on_sample_error must be 'skip' or 'abort', got {on_sample_error!r}")

        self.calibration = calibration
        self.source = source
        self.ocr_thresholds = ocr_thresholds or OCRThresholds()
        self.digit_classifier = digit_classifier or TemplateDigitClassifier()
        self.on_sample_error = on_sample_error
        self.machine = OCRStateMachine(
            thresholds=thresholds,
            log_every_n_frames=log_every_n_frames,
        )

        self._stop_requested = False
        self._frames_read = 0
        self._sample_error_count = 0
        self._transitions: List[AdvanceResult] = []
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

    @classmethod
    def from_settings(
        cls,
        calibration: Calibration,
        source: VideoSource,
        settings: Settings,
    ) -> "GameTracker":
        """Build a tracker from loaded configuration."""
        ocr = settings.ocr
        if ocr.digits.classifier == "none":
            digit_classifier: DigitClassifier = NullDigitClassifier()
        else:
            digit_classifier = TemplateDigitClassifier(
                num_digits=ocr.digits.num_digits,
                brightness_threshold=ocr.digits.brightness_threshold,
                max_distance=ocr.digits.max_distance,
            )

        return cls(
            calibration=calibration,
            source=source,
            thresholds=TransitionThresholds(
                max_board_noise=settings.state_machine.max_board_noise,
                game_start_confirm_frames=settings.state_machine.game_start_confirm_frames,
                limbo_timeout_frames=settings.state_machine.limbo_timeout_frames,
            ),
            digit_classifier=digit_classifier,
            on_sample_error=settings.tracker.on_sample_error,
            ocr_thresholds=OCRThresholds(
                shine_brightness=ocr.shine_brightness,
                next_brightness=ocr.next_brightness,
                next_max_distance=ocr.next_max_distance,
            ),
            log_every_n_frames=settings.tracker.log_every_n_frames,
        )

    async def run(self) -> GameRecord:
        """
        Consume frames until the game ends or the source is exhausted.

        Returns:
            The game record; finalized only if GAME_END was reached

        Raises:
            PixelOutOfBoundsError: With on_sample_error="abort"
            IllegalTransitionError: If a state requests an undeclared successor
        """
        self._started_at = time.time()
        logger.info(f"Game tracker started (on_sample_error={self.on_sample_error})")

        try:
            while not self._stop_requested and not self.machine.is_terminal:
                frame = await self.source.get_next_frame()
                if frame is None:
                    logger.info("Video source exhausted")
                    break

                self._frames_read += 1
                ocr_frame = OCRFrame(
                    frame,
                    self.calibration,
                    thresholds=self.ocr_thresholds,
                    digit_classifier=self.digit_classifier,
                )

                try:
                    result = self.machine.advance(ocr_frame)
                except PixelOutOfBoundsError as e:
                    self._sample_error_count += 1
                    if self.on_sample_error == "abort":
                        logger.error(f"Sampling error (frame={frame.frame_id}): {e}")
                        raise
                    logger.warning(f"Skipping frame {frame.frame_id}: {e}")
                    continue

                if result.transition_occurred:
                    self._transitions.append(result)
        finally:
            self._finished_at = time.time()

        record = self.record()
        logger.info(
            f"Game tracker stopped: state={record.state.value}, "
            f"finalized={record.finalized}, lines={record.lines}, score={record.score}"
        )
        return record

    def stop(self) -> None:
        """Request the run loop to stop before the next frame."""
        logger.info("Stop requested")
        self._stop_requested = True

    def record(self) -> GameRecord:
        """Current record, finalized or not."""
        return self.machine.record()

    @property
    def transitions(self) -> List[AdvanceResult]:
        return list(self._transitions)

    def metrics(self) -> Dict[str, Any]:
        """Get tracker metrics for observability."""
        elapsed = None
        if self._started_at is not None:
            end = self._finished_at or time.time()
            elapsed = round(end - self._started_at, 3)

        return {
            **self.machine.get_metrics(),
            "frames_read": self._frames_read,
            "sample_errors": self._sample_error_count,
            "transitions": len(self._transitions),
            "elapsed_sec": elapsed,
        }
