"""
State Machine Graph
===================

LangGraph-driven engine for the recognition lifecycle.

LangGraph is used for CONTROL FLOW only: each frame runs through a small
compiled graph.

Graph Structure:
    START → run_state ─┬─(no request)──────────────→ END
                       └─(request)→ apply_transition ─┬─→ END
                                                      └─(resumed)→ resume_state
    resume_state ─┬─(no request)─→ END
                  └─(request)→ apply_transition

    run_state:        invokes the active state's per-frame hook
    apply_transition: validates the request against the active state's
                      declared successors, then switches state
    resume_state:     replays a GAME_LIMBO → IN_GAME frame through IN_GAME
                      (features are cached on the OCRFrame, so nothing is
                      sampled twice)

Design Philosophy:
    - Exactly one active state at a time
    - Transitions are validated HERE, centrally; an undeclared successor
      raises IllegalTransitionError
    - Each frame is atomic for the GameData: if the hook raises, the
      record is restored to its pre-frame snapshot and the error propagates
    - GAME_END is terminal; advancing past it is a no-op
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, TypedDict

from langgraph.graph import END, StateGraph

from tetris_ocr.agent.states import OCRState, create_states
from tetris_ocr.agent.transitions import TransitionThresholds
from tetris_ocr.errors import IllegalTransitionError
from tetris_ocr.models.output import GameRecord
from tetris_ocr.models.state import GameData, OCRStateID
from tetris_ocr.ocr.ocr_frame import OCRFrame


logger = logging.getLogger(__name__)


class StateMachineGraphState(TypedDict):
    """
    State passed through the graph for one frame.

    Attributes:
        game_data: Accumulated record
        ocr_frame: Extractor for the current frame
        state_id: Active lifecycle state
        requested_state: Successor requested by the hook, if any
        transition_occurred: Whether state_id changed this frame
        resume_frame: Whether the new state should also see this frame
    """
    game_data: GameData
    ocr_frame: OCRFrame
    state_id: OCRStateID
    requested_state: Optional[OCRStateID]
    transition_occurred: bool
    resume_frame: bool


@dataclass(frozen=True)
class AdvanceResult:
    """Result of advancing the machine by one frame."""

    frame_id: int
    previous_state: OCRStateID
    state: OCRStateID
    transition_occurred: bool

    def __repr__(self) -> str:
        return (
            f"AdvanceResult(frame={self.frame_id}, "
            f"{self.previous_state.value} → {self.state.value})"
        )


class OCRStateMachine:
    """
    Engine holding the active lifecycle state and the game record.

    Attributes:
        thresholds: Transition thresholds shared by all states
        states: One instance per lifecycle state

    Example:
        machine = OCRStateMachine()
        for frame in frames:
            machine.advance(OCRFrame(frame, calibration))
            if machine.is_terminal:
                break
        record = machine.record()
    """

    def __init__(
        self,
        thresholds: Optional[TransitionThresholds] = None,
        initial_state: OCRStateID = OCRStateID.BEFORE_GAME,
        log_every_n_frames: int = 300,
    ) -> None:
        """
        Initialize the state machine.

        Args:
            thresholds: Transition thresholds (uses defaults if None)
            initial_state: State entered at session start
            log_every_n_frames: Log progress every N frames
        """
        self.thresholds = thresholds or TransitionThresholds()
        self.states: Dict[OCRStateID, OCRState] = create_states(self.thresholds)
        self.initial_state = initial_state
        self.log_every_n_frames = log_every_n_frames

        self._graph = self._build_graph()

        self._state_id = initial_state
        self._game_data = GameData()
        self.states[initial_state].on_enter(self._game_data)

        logger.info(
            f"OCRStateMachine initialized: initial={initial_state.value}, "
            f"max_noise={self.thresholds.max_board_noise}, "
            f"limbo_timeout={self.thresholds.limbo_timeout_frames} frames"
        )

    def _build_graph(self) -> Any:
        """Build the LangGraph workflow."""
        workflow = StateGraph(StateMachineGraphState)

        workflow.add_node("run_state", self._run_state_node)
        workflow.add_node("apply_transition", self._apply_transition_node)
        workflow.add_node("resume_state", self._resume_state_node)

        workflow.set_entry_point("run_state")
        workflow.add_conditional_edges(
            "run_state",
            self._route_after_state,
            {"apply_transition": "apply_transition", END: END},
        )
        workflow.add_conditional_edges(
            "apply_transition",
            self._route_after_transition,
            {"resume_state": "resume_state", END: END},
        )
        workflow.add_conditional_edges(
            "resume_state",
            self._route_after_state,
            {"apply_transition": "apply_transition", END: END},
        )

        return workflow.compile()

    def _run_state_node(self, state: StateMachineGraphState) -> Dict[str, Any]:
        """Invoke the active state's per-frame hook."""
        game_data = state["game_data"]
        active = self.states[state["state_id"]]

        requested = active.advance_frame(game_data, state["ocr_frame"])
        game_data.frames_processed += 1

        return {"requested_state": requested, "transition_occurred": False, "resume_frame": False}

    def _route_after_state(self, state: StateMachineGraphState) -> str:
        if state.get("requested_state") is None:
            return END
        return "apply_transition"

    def _route_after_transition(self, state: StateMachineGraphState) -> str:
        if state.get("resume_frame"):
            return "resume_state"
        return END

    def _resume_state_node(self, state: StateMachineGraphState) -> Dict[str, Any]:
        """Run the newly entered state's hook on the frame that resumed it."""
        active = self.states[state["state_id"]]
        requested = active.advance_frame(state["game_data"], state["ocr_frame"])
        return {"requested_state": requested, "resume_frame": False}

    def _apply_transition_node(self, state: StateMachineGraphState) -> Dict[str, Any]:
        """Validate and apply the requested transition."""
        current = self.states[state["state_id"]]
        requested = state["requested_state"]

        if requested not in current.permitted_transitions:
            raise IllegalTransitionError(
                current.state_id.value,
                getattr(requested, "value", str(requested)),
                sorted(s.value for s in current.permitted_transitions),
            )

        self.states[requested].on_enter(state["game_data"])

        logger.warning(
            f"STATE CHANGE: {current.state_id.value} → {requested.value} "
            f"(frame {state['ocr_frame'].frame_id})"
        )

        resume = (
            current.state_id == OCRStateID.GAME_LIMBO
            and requested == OCRStateID.IN_GAME
        )
        return {"state_id": requested, "transition_occurred": True, "resume_frame": resume}

    def advance(self, ocr_frame: OCRFrame) -> AdvanceResult:
        """
        Process one frame.

        This is the main entry point for frame-by-frame processing.

        Args:
            ocr_frame: Extractor for the next frame, in arrival order

        Returns:
            AdvanceResult describing the (possibly unchanged) state

        Raises:
            PixelOutOfBoundsError: If sampling fails; the record is unchanged
            IllegalTransitionError: If a state requests an undeclared successor
        """
        previous = self._state_id

        if self.is_terminal:
            logger.debug(f"Ignoring frame {ocr_frame.frame_id}: {previous.value} is terminal")
            return AdvanceResult(ocr_frame.frame_id, previous, previous, False)

        snapshot = self._game_data.copy()
        try:
            result = self._graph.invoke({
                "game_data": self._game_data,
                "ocr_frame": ocr_frame,
                "state_id": previous,
                "requested_state": None,
                "transition_occurred": False,
                "resume_frame": False,
            })
        except Exception:
            self._game_data = snapshot
            raise

        self._game_data = result["game_data"]
        self._state_id = result["state_id"]

        if self._game_data.frames_processed % self.log_every_n_frames == 0:
            logger.info(
                f"StateMachine [frame {self._game_data.frames_processed}]: "
                f"state={self._state_id.value}, lines={self._game_data.lines}, "
                f"score={self._game_data.score}"
            )

        return AdvanceResult(
            frame_id=ocr_frame.frame_id,
            previous_state=previous,
            state=self._state_id,
            transition_occurred=result["transition_occurred"],
        )

    @property
    def current_state_id(self) -> OCRStateID:
        return self._state_id

    @property
    def current_state(self) -> OCRState:
        return self.states[self._state_id]

    @property
    def is_terminal(self) -> bool:
        return self.current_state.is_terminal

    @property
    def game_data(self) -> GameData:
        """The live record. Consumers should prefer record()."""
        return self._game_data

    def record(self) -> GameRecord:
        """Snapshot of the accumulated record."""
        return GameRecord.from_game_data(self._game_data, self._state_id)

    def reset(self) -> None:
        """Start a new session from the initial state."""
        self._state_id = self.initial_state
        self._game_data = GameData()
        self.states[self.initial_state].on_enter(self._game_data)
        logger.info("OCRStateMachine reset")

    def get_metrics(self) -> Dict[str, Any]:
        """Get engine metrics for observability."""
        return {
            "state": self._state_id.value,
            "frames_processed": self._game_data.frames_processed,
            "lines": self._game_data.lines,
            "score": self._game_data.score,
            "finalized": self._game_data.finalized,
            "frames_in_limbo": self.states[OCRStateID.GAME_LIMBO].frames_in_limbo,
        }


def create_state_machine(
    max_board_noise: float = 25.0,
    game_start_confirm_frames: int = 1,
    limbo_timeout_frames: int = 120,
    log_every_n_frames: int = 300,
) -> OCRStateMachine:
    """
    Create a state machine from configuration values.

    Returns:
        Configured OCRStateMachine starting in BEFORE_GAME
    """
    thresholds = TransitionThresholds(
        max_board_noise=max_board_noise,
        game_start_confirm_frames=game_start_confirm_frames,
        limbo_timeout_frames=limbo_timeout_frames,
    )
    return OCRStateMachine(thresholds=thresholds, log_every_n_frames=log_every_n_frames)
