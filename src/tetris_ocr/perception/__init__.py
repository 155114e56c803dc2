"""
Perception Module
=================

Signal-to-symbol recognizers used by the frame extractor.

Components:
    - find_similar_tetromino_type: Next-box template classifier
    - extract_single_tetromino: Single-piece isolator for binary boards
    - DigitClassifier: Protocol for pluggable number readers
    - TemplateDigitClassifier / NullDigitClassifier: Reader implementations

Design Philosophy:
    Recognizers return None when they are not confident. They never guess
    a plausible value under uncertainty.
"""

from tetris_ocr.perception.board_isolation import (
    extract_single_tetromino,
    occupied_cells,
)
from tetris_ocr.perception.digits import (
    DIGIT_GLYPHS,
    DigitClassifier,
    NullDigitClassifier,
    TemplateDigitClassifier,
)
from tetris_ocr.perception.next_similarity import (
    NEXT_TEMPLATES,
    find_similar_tetromino_type,
    rank_tetromino_types,
)

__all__ = [
    "find_similar_tetromino_type",
    "rank_tetromino_types",
    "NEXT_TEMPLATES",
    "extract_single_tetromino",
    "occupied_cells",
    "DigitClassifier",
    "TemplateDigitClassifier",
    "NullDigitClassifier",
    "DIGIT_GLYPHS",
]
