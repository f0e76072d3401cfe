"""Squat: knee angle drives the rep cycle, torso lean drives back feedback."""

from typing import Dict, List, Optional

from formcoach.cv.analysis_result import BodyRegion, FeedbackCode, FeedbackItem, Severity
from formcoach.cv.exercises.base import RepCycleAnalyzer, Zone, clip_progress
from formcoach.cv.geometry import vertical_deviation
from formcoach.cv.thresholds import ExerciseType


class SquatAnalyzer(RepCycleAnalyzer):
    """
    standing -> descending -> bottom -> ascending -> standing

    Knee angle above standing_angle is the start zone, below depth_angle is
    the bottom. Back feedback uses the hip->shoulder lean from vertical.
    """

    exercise = ExerciseType.SQUAT
    REQUIRED_JOINTS = ("left_hip", "left_knee", "left_ankle", "left_shoulder")
    STATES = ("standing", "descending", "bottom", "ascending")

    ABORT_CODE = FeedbackCode.POOR_DEPTH
    ABORT_MESSAGE = "Go lower!"
    ABORT_JOINTS = frozenset({"left_knee", "right_knee"})
    ABORT_FOCUS = BodyRegion.HIPS

    def _measure(self) -> Dict[str, float]:
        return {
            "knee": self._angle("left_hip", "left_knee", "left_ankle"),
            "back": vertical_deviation(self._point("left_hip"), self._point("left_shoulder")),
        }

    def _zone(self, measures: Dict[str, float]) -> Zone:
        knee = measures["knee"]
        if knee > self.thresholds.standing_angle:
            return Zone.START
        if knee < self.thresholds.depth_angle:
            return Zone.EXTREME
        return Zone.MIDDLE

    def _state_feedback(self, measures: Dict[str, float]) -> List[FeedbackItem]:
        if self.state != "bottom":
            return []
        knee = measures["knee"]
        message = "Excellent depth!" if knee < self.thresholds.deep_angle else "Good depth"
        return [FeedbackItem(
            severity=Severity.SUCCESS,
            message=message,
            code=FeedbackCode.GOOD_DEPTH,
        )]

    def _form_feedback(self, measures: Dict[str, float]) -> List[FeedbackItem]:
        if measures["back"] <= self.thresholds.max_back_lean:
            return []
        return [FeedbackItem(
            severity=Severity.ERROR,
            message="Keep your back straight!",
            highlight_joints=frozenset({"left_shoulder", "left_hip"}),
            code=FeedbackCode.BAD_BACK,
        )]

    def _focus(self, feedback: List[FeedbackItem]) -> BodyRegion:
        if any(item.code == FeedbackCode.BAD_BACK for item in feedback):
            return BodyRegion.BACK
        return super()._focus(feedback)

    def _progress(self, measures: Dict[str, float]) -> Optional[float]:
        top = self.thresholds.progress_top
        return clip_progress((top - measures["knee"]) / (top - self.thresholds.progress_bottom))

    def _instruction(self, measures: Dict[str, float]) -> Optional[str]:
        return {
            "standing": "Bend your knees and sit back",
            "descending": "Keep going down",
            "bottom": "Drive up through your heels",
            "ascending": "Stand all the way up",
        }[self.state]
