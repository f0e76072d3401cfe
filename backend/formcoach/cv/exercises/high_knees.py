"""High knees: the left knee rising above the left hip."""

from typing import Dict

from formcoach.cv.analysis_result import BodyRegion, FeedbackCode
from formcoach.cv.exercises.base import RepCycleAnalyzer, Zone
from formcoach.cv.thresholds import ExerciseType


class HighKneeAnalyzer(RepCycleAnalyzer):
    """
    down -> lifting -> up -> lowering -> down

    Pixel space: the knee is above the hip when its y is smaller. There is
    no middle zone, so each state change takes exactly one frame.
    """

    exercise = ExerciseType.HIGH_KNEES
    REQUIRED_JOINTS = ("left_knee", "left_hip")
    STATES = ("down", "lifting", "up", "lowering")

    ABORT_CODE = FeedbackCode.KNEE_TOO_LOW
    ABORT_MESSAGE = "Knee higher, above your hip!"
    ABORT_JOINTS = frozenset({"left_knee"})
    ABORT_FOCUS = BodyRegion.HIPS
    REP_MESSAGE = "Excellent!"

    def _measure(self) -> Dict[str, float]:
        return {"knee_rise": self._point("left_hip").y - self._point("left_knee").y}

    def _zone(self, measures: Dict[str, float]) -> Zone:
        return Zone.EXTREME if measures["knee_rise"] > 0 else Zone.START
