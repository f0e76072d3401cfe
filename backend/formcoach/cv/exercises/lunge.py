"""Lunge: front (left) knee angle cycle with a knee-over-ankle safety check."""

from typing import Dict, List, Optional

from formcoach.cv.analysis_result import BodyRegion, FeedbackCode, FeedbackItem, Severity
from formcoach.cv.exercises.base import RepCycleAnalyzer, Zone, clip_progress
from formcoach.cv.thresholds import ExerciseType


class LungeAnalyzer(RepCycleAnalyzer):
    exercise = ExerciseType.LUNGE
    REQUIRED_JOINTS = ("left_hip", "left_knee", "left_ankle")
    STATES = ("standing", "descending", "bottom", "ascending")

    ABORT_CODE = FeedbackCode.POOR_DEPTH
    ABORT_MESSAGE = "Lunge deeper!"
    ABORT_JOINTS = frozenset({"left_knee"})
    ABORT_FOCUS = BodyRegion.HIPS

    def _measure(self) -> Dict[str, float]:
        knee = self._point("left_knee")
        ankle = self._point("left_ankle")
        return {
            "front_knee": self._angle("left_hip", "left_knee", "left_ankle"),
            "knee_offset": abs(knee.x - ankle.x),
        }

    def _zone(self, measures: Dict[str, float]) -> Zone:
        knee = measures["front_knee"]
        if knee > self.thresholds.standing_angle:
            return Zone.START
        if knee < self.thresholds.depth_angle:
            return Zone.EXTREME
        return Zone.MIDDLE

    def _state_feedback(self, measures: Dict[str, float]) -> List[FeedbackItem]:
        if self.state != "bottom":
            return []
        if measures["knee_offset"] > self.thresholds.knee_over_ankle_px:
            return [FeedbackItem(
                severity=Severity.WARNING,
                message="Your knee is too far forward!",
                highlight_joints=frozenset({"left_knee"}),
                code=FeedbackCode.KNEE_OVER_TOE,
            )]
        return [FeedbackItem(
            severity=Severity.SUCCESS,
            message="Great balance",
            code=FeedbackCode.BALANCED,
        )]

    def _focus(self, feedback: List[FeedbackItem]) -> BodyRegion:
        # No dedicated knee region; knee travel is corrected from the hips
        if any(item.code == FeedbackCode.KNEE_OVER_TOE for item in feedback):
            return BodyRegion.HIPS
        return super()._focus(feedback)

    def _progress(self, measures: Dict[str, float]) -> Optional[float]:
        top = self.thresholds.progress_top
        return clip_progress((top - measures["front_knee"]) / (top - self.thresholds.progress_bottom))
