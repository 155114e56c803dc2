"""
Agent Module
============

LangGraph-based deterministic state machine for game lifecycle tracking.

This module implements the recognition lifecycle:
    - graph.py: Engine, per-frame workflow and central transition checks
    - states.py: The four lifecycle states and their per-frame hooks
    - transitions.py: Declared transition table and thresholds

Key Design Decisions:
    - LangGraph is used for STRUCTURE, not LLM reasoning
    - Every state declares its successors as data
    - Illegal transitions fail loudly in the engine
    - States reason over OCRFrame features, not raw pixels
"""

from tetris_ocr.agent.graph import AdvanceResult, OCRStateMachine, create_state_machine
from tetris_ocr.agent.states import (
    BeforeGameState,
    GameEndState,
    GameLimboState,
    InGameState,
    OCRState,
)
from tetris_ocr.agent.transitions import PERMITTED_TRANSITIONS, TransitionThresholds

__all__ = [
    "OCRStateMachine",
    "AdvanceResult",
    "create_state_machine",
    "OCRState",
    "BeforeGameState",
    "InGameState",
    "GameLimboState",
    "GameEndState",
    "PERMITTED_TRANSITIONS",
    "TransitionThresholds",
]
