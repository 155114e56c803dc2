"""
Stream Module
=============

Frame representation and frame sources.

This module provides the ingestion layer for tetris-ocr:
    - Frame: Decoded RGB capture with point sampling
    - Pixel: Sampled color with brightness
    - VideoSource: Protocol for ordered frame sources
    - InMemoryVideoSource / ImageDirectorySource: Concrete sources
    - decode_image_bytes / load_image_file: OpenCV decoding into Frames

Example:
    from tetris_ocr.stream import ImageDirectorySource

    source = ImageDirectorySource("./captures", fps=60.0)
    while (frame := await source.get_next_frame()) is not None:
        process(frame)
"""

from tetris_ocr.stream.frame import Frame, Pixel, Point, color_distance
from tetris_ocr.stream.image_decoder import (
    decode_image_bytes,
    load_image_file,
)
from tetris_ocr.stream.video_source import (
    ImageDirectorySource,
    InMemoryVideoSource,
    VideoSource,
)


__all__ = [
    "Frame",
    "Pixel",
    "Point",
    "color_distance",
    "decode_image_bytes",
    "load_image_file",
    "VideoSource",
    "InMemoryVideoSource",
    "ImageDirectorySource",
]
