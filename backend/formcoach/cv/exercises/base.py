"""
Shared machinery for the exercise analyzers.

Every analyzer follows the same per-frame shape:
1. Required-joint gate: missing joints short-circuit to a "show full body"
   result without touching reps, state or timers.
2. Primary measurements (angles, pixel offsets).
3. Optional postural gate (pushup, plank).
4. State machine step: rep counters move one state per frame through
   idle -> out -> extreme -> back -> idle and count on back -> idle.
   Hold exercises accumulate contiguous hold time instead.
5. Form feedback with highlight joints and a focus body region.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from formcoach.cv.analysis_result import (
    AnalysisResult,
    BodyRegion,
    FeedbackCode,
    FeedbackItem,
    Severity,
    TempoPhase,
)
from formcoach.cv.clock import Clock, SystemClock
from formcoach.cv.geometry import angle_degrees
from formcoach.cv.keypoints import Keypoint, KeypointFrame
from formcoach.cv.thresholds import EXERCISE_THRESHOLDS, ExerciseType

logger = logging.getLogger(__name__)

DEFAULT_STABILITY_WINDOW = 30

BODY_NOT_VISIBLE_MESSAGE = "Please show your full body to the camera"


class Zone(Enum):
    """Where the primary measurement sits relative to the rep thresholds."""
    START = "start"
    MIDDLE = "middle"
    EXTREME = "extreme"


@dataclass
class AnalyzerState:
    """All cross-frame state of one analyzer. Replaced wholesale on reset."""
    phase: str
    rep_count: int = 0
    armed: bool = False
    reached_extreme: bool = False  # Extreme zone seen while in the out state
    stability_history: Deque[float] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_STABILITY_WINDOW)
    )

    # Tempo
    phase_started_at: Optional[float] = None
    tempo_phase: TempoPhase = TempoPhase.UNKNOWN
    eccentric_seconds: float = 0.0
    concentric_seconds: float = 0.0

    # Holds
    hold_started_at: Optional[float] = None
    hold_seconds: float = 0.0
    best_hold_seconds: float = 0.0

    deepest_angle: Optional[float] = None

    @classmethod
    def initial(cls, phase: str, stability_window: int = DEFAULT_STABILITY_WINDOW) -> "AnalyzerState":
        return cls(phase=phase, stability_history=deque(maxlen=stability_window))


def clip_progress(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


class ExerciseAnalyzer(ABC):
    """
    Base class for all exercise analyzers.

    Subclasses declare their exercise, required joints and initial state,
    and implement _analyze_frame(), which only runs once every required
    joint is present.
    """

    exercise: ExerciseType
    REQUIRED_JOINTS: Tuple[str, ...] = ()
    INITIAL_STATE: str = "waiting"

    def __init__(
        self,
        clock: Optional[Clock] = None,
        thresholds=None,
        stability_window: int = DEFAULT_STABILITY_WINDOW,
    ):
        self.clock = clock or SystemClock()
        self.thresholds = thresholds or EXERCISE_THRESHOLDS[self.exercise]
        self.stability_window = stability_window
        self.frame = KeypointFrame()
        self._state = AnalyzerState.initial(self._initial_phase(), stability_window)

    @property
    def reps(self) -> int:
        return self._state.rep_count

    @property
    def state(self) -> str:
        return self._state.phase

    @property
    def analyzer_state(self) -> AnalyzerState:
        return self._state

    def update_keypoints(self, frame: KeypointFrame):
        self.frame = frame

    def analyze(self) -> AnalysisResult:
        missing = self.frame.missing(self.REQUIRED_JOINTS, self.thresholds.min_score)
        if missing:
            return self._insufficient_input(missing)
        return self._analyze_frame()

    def reset(self):
        logger.info(f"{self.exercise.value}: reset after {self._state.rep_count} reps")
        self._state = AnalyzerState.initial(self._initial_phase(), self.stability_window)

    def _initial_phase(self) -> str:
        return self.INITIAL_STATE

    @abstractmethod
    def _analyze_frame(self) -> AnalysisResult:
        """Analyze the current frame. All required joints are present."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _point(self, name: str) -> Keypoint:
        return self.frame.get(name, self.thresholds.min_score)

    def _optional_point(self, name: str) -> Optional[Keypoint]:
        return self.frame.get(name, self.thresholds.min_score)

    def _angle(self, a: str, b: str, c: str) -> float:
        return angle_degrees(self._point(a), self._point(b), self._point(c))

    def _set_phase(self, phase: str):
        if phase != self._state.phase:
            logger.debug(f"{self.exercise.value}: {self._state.phase} -> {phase}")
            self._state.phase = phase

    def _count_rep(self):
        self._state.rep_count += 1
        logger.info(f"{self.exercise.value}: rep {self._state.rep_count} complete")

    def _result(self, feedback: Sequence[FeedbackItem] = (), **kwargs) -> AnalysisResult:
        return AnalysisResult(
            reps=self._state.rep_count,
            state=self._state.phase,
            feedback=tuple(feedback),
            **kwargs,
        )

    def _insufficient_input(self, missing: List[str]) -> AnalysisResult:
        return self._result(
            feedback=[FeedbackItem(
                severity=Severity.WARNING,
                message=BODY_NOT_VISIBLE_MESSAGE,
                highlight_joints=frozenset(missing),
                code=FeedbackCode.BODY_NOT_VISIBLE,
            )],
            focus_body_region=BodyRegion.NONE,
        )

    def _record_stability(self, deviation: float) -> float:
        """Push max(0, 100 - 2*deviation) and return the rounded window mean."""
        self._state.stability_history.append(max(0.0, 100.0 - 2.0 * deviation))
        return float(round(np.mean(self._state.stability_history)))

    def _continue_hold(self) -> float:
        """Extend the current hold (or start one) and return its length."""
        now = self.clock.now()
        state = self._state
        if state.hold_started_at is None:
            state.hold_started_at = now
            logger.debug(f"{self.exercise.value}: hold started")
        state.hold_seconds = now - state.hold_started_at
        if state.hold_seconds > state.best_hold_seconds:
            state.best_hold_seconds = state.hold_seconds
            # Hold exercises report whole seconds of the best hold as reps
            state.rep_count = max(state.rep_count, int(state.best_hold_seconds))
        return state.hold_seconds

    def _break_hold(self):
        state = self._state
        if state.hold_started_at is not None:
            logger.debug(f"{self.exercise.value}: hold broken after {state.hold_seconds:.1f}s")
        state.hold_started_at = None
        state.hold_seconds = 0.0


class RepCycleAnalyzer(ExerciseAnalyzer):
    """
    Four-state repetition counter driven by a start/extreme zone signal.

    STATES names the idle, out, extreme and back states. A rep is counted
    only on back -> idle, and a cycle can only begin once the start zone has
    been seen since the last reset. Returning to the start zone from the
    out state is an aborted rep and emits ABORT_CODE, unless the extreme
    zone was already reached there. That cycle skipped a state so it does
    not count, but it is not a depth error either.
    """

    STATES: Tuple[str, str, str, str]
    ABORT_CODE: str
    ABORT_MESSAGE: str
    ABORT_JOINTS: FrozenSet[str] = frozenset()
    ABORT_FOCUS: BodyRegion = BodyRegion.NONE
    REP_MESSAGE = "Nice rep!"

    def _initial_phase(self) -> str:
        return self.STATES[0]

    @abstractmethod
    def _measure(self) -> Dict[str, float]:
        """Primary measurements for this frame, also reported as angles."""

    @abstractmethod
    def _zone(self, measures: Dict[str, float]) -> Zone:
        """Classify the measurements against the rep thresholds."""

    def _state_feedback(self, measures: Dict[str, float]) -> List[FeedbackItem]:
        """Feedback for the state reached this frame."""
        return []

    def _form_feedback(self, measures: Dict[str, float]) -> List[FeedbackItem]:
        """Form checks that apply regardless of state."""
        return []

    def _progress(self, measures: Dict[str, float]) -> Optional[float]:
        return None

    def _instruction(self, measures: Dict[str, float]) -> Optional[str]:
        return None

    def _focus(self, feedback: List[FeedbackItem]) -> BodyRegion:
        if any(item.code == self.ABORT_CODE for item in feedback):
            return self.ABORT_FOCUS
        return BodyRegion.NONE

    def _analyze_frame(self) -> AnalysisResult:
        measures = self._measure()
        feedback = self._step(self._zone(measures))
        feedback.extend(self._state_feedback(measures))
        feedback.extend(self._form_feedback(measures))
        return self._result(
            feedback=feedback,
            progress=self._progress(measures),
            next_instruction=self._instruction(measures),
            focus_body_region=self._focus(feedback),
            angles=measures,
        )

    def _step(self, zone: Zone) -> List[FeedbackItem]:
        idle, out, extreme, back = self.STATES
        state = self._state
        feedback: List[FeedbackItem] = []

        if zone == Zone.START:
            state.armed = True

        if state.phase == idle:
            if zone != Zone.START and state.armed:
                self._set_phase(out)
                state.reached_extreme = zone == Zone.EXTREME
        elif state.phase == out:
            if zone == Zone.EXTREME:
                self._set_phase(extreme)
            elif zone == Zone.START:
                self._set_phase(idle)
                if state.reached_extreme:
                    logger.debug(f"{self.exercise.value}: cycle too fast to count")
                    return feedback
                logger.debug(f"{self.exercise.value}: aborted rep")
                feedback.append(FeedbackItem(
                    severity=Severity.WARNING,
                    message=self.ABORT_MESSAGE,
                    highlight_joints=self.ABORT_JOINTS,
                    code=self.ABORT_CODE,
                ))
        elif state.phase == extreme:
            if zone != Zone.EXTREME:
                self._set_phase(back)
        elif state.phase == back:
            if zone == Zone.START:
                self._set_phase(idle)
                self._count_rep()
                feedback.append(FeedbackItem(
                    severity=Severity.SUCCESS,
                    message=self.REP_MESSAGE,
                    code=FeedbackCode.REP_COMPLETE,
                ))
            elif zone == Zone.EXTREME:
                self._set_phase(extreme)

        return feedback
