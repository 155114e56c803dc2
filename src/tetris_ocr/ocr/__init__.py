"""
OCR Module
==========

Per-frame feature extraction.

Components:
    - OCRFrame: Lazy, write-once feature extractor for one frame
    - OCRThresholds: Sampling thresholds
"""

from tetris_ocr.ocr.ocr_frame import OCRFrame, OCRThresholds

__all__ = ["OCRFrame", "OCRThresholds"]
