"""
Video Sources
=============

Ordered frame sources feeding the game tracker.

A VideoSource yields frames one at a time, strictly in capture order, and
returns None once the stream is exhausted. Obtaining a frame may suspend
(the source may perform blocking I/O), so the interface is async.

Implementations:
    - InMemoryVideoSource: Frames or RGB arrays held in memory
    - ImageDirectorySource: Sorted image files decoded with OpenCV
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

import numpy as np

from tetris_ocr.stream.frame import Frame
from tetris_ocr.stream.image_decoder import load_image_file


logger = logging.getLogger(__name__)


IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")


class VideoSource(Protocol):
    """
    Protocol for frame sources.

    Implementations must return frames in arrival order and None at
    end of stream.
    """

    async def get_next_frame(self) -> Optional[Frame]:
        """
        Get the next frame.

        Returns:
            Next frame, or None when the stream has ended
        """
        ...


class InMemoryVideoSource:
    """
    Source backed by a list of frames or RGB arrays.

    Arrays are wrapped into Frames with sequential frame_ids starting at 0
    and timestamps spaced by 1/fps.

    Example:
        source = InMemoryVideoSource([image_a, image_b], fps=30.0)
        frame = await source.get_next_frame()
    """

    def __init__(
        self,
        frames: Sequence[Union[Frame, np.ndarray]],
        fps: float = 60.0,
    ) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")

        self._frames: List[Frame] = [
            item if isinstance(item, Frame)
            else Frame(frame_id=index, timestamp=index / fps, image=item)
            for index, item in enumerate(frames)
        ]
        self._position = 0

    def __len__(self) -> int:
        return len(self._frames)

    async def get_next_frame(self) -> Optional[Frame]:
        if self._position >= len(self._frames):
            return None
        frame = self._frames[self._position]
        self._position += 1
        return frame


class ImageDirectorySource:
    """
    Source reading captured frames from a directory of image files.

    Files are ordered by name, so captures should be named with
    zero-padded counters (frame_00001.png, ...). Decoding happens lazily,
    one file per get_next_frame() call.

    Attributes:
        paths: Image files in playback order
        fps: Capture rate used to derive timestamps
    """

    def __init__(self, directory: Union[str, Path], fps: float = 60.0) -> None:
        root = Path(directory)
        if not root.is_dir():
            raise FileNotFoundError(f"Frame directory not found: {directory}")
        if fps <= 0:
            raise ValueError("fps must be positive")

        self.paths: List[Path] = sorted(
            path for path in root.iterdir()
            if path.suffix.lower() in IMAGE_SUFFIXES
        )
        self.fps = fps
        self._position = 0

        logger.info(f"ImageDirectorySource: {len(self.paths)} frames in {root}")

    def __len__(self) -> int:
        return len(self.paths)

    async def get_next_frame(self) -> Optional[Frame]:
        if self._position >= len(self.paths):
            return None
        index = self._position
        self._position += 1
        return load_image_file(self.paths[index], frame_id=index, timestamp=index / self.fps)
