"""
Image Decoder
=============

Dedicated module for decoding encoded images (PNG/JPEG) into Frames.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - OpenCV decodes to BGR; frames are always stored as RGB
    - Validates shape and dtype
    - Fails fast on corrupt data
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from tetris_ocr.errors import ImageDecodeError
from tetris_ocr.stream.frame import Frame


logger = logging.getLogger(__name__)


def decode_image_bytes(data: bytes, frame_id: int, timestamp: float) -> Frame:
    """
    Decode encoded image bytes into an RGB Frame.

    Args:
        data: PNG/JPEG/... encoded image
        frame_id: Frame counter to assign
        timestamp: Capture time to assign

    Returns:
        Frame with an RGB image

    Raises:
        ImageDecodeError: If decoding fails or image is invalid
    """
    nparr = np.frombuffer(data, np.uint8)
    if nparr.size == 0:
        raise ImageDecodeError(f"Empty image data for frame {frame_id}")

    bgr = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    if bgr is None:
        raise ImageDecodeError(
            f"Failed to decode frame {frame_id}: cv2.imdecode returned None"
        )

    if len(bgr.shape) != 3 or bgr.shape[2] != 3:
        raise ImageDecodeError(
            f"Invalid image shape for frame {frame_id}: {bgr.shape}"
        )

    if bgr.dtype != np.uint8:
        raise ImageDecodeError(
            f"Invalid dtype for frame {frame_id}: {bgr.dtype}"
        )

    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    return Frame(frame_id=frame_id, timestamp=timestamp, image=rgb)


def load_image_file(path: Union[str, Path], frame_id: int, timestamp: float) -> Frame:
    """
    Read and decode an image file into an RGB Frame.

    Raises:
        ImageDecodeError: If the file cannot be read or decoded
    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Cannot read image file {file_path}: {e}")

    logger.debug(f"Decoding {file_path.name} as frame {frame_id}")
    return decode_image_bytes(data, frame_id, timestamp)
