"""Jumping jack: wrist height and ankle spread, with a hysteresis gap."""

from typing import Dict

from formcoach.cv.analysis_result import BodyRegion, FeedbackCode
from formcoach.cv.exercises.base import RepCycleAnalyzer, Zone
from formcoach.cv.thresholds import ExerciseType


class JumpingJackAnalyzer(RepCycleAnalyzer):
    """
    closed -> opening -> open -> closing -> closed

    Open needs both wrists well above their shoulders and the ankles spread
    past open_spread_px. Closed needs the wrists below the shoulders and the
    ankles within closed_spread_px. Anything in between is neither.
    """

    exercise = ExerciseType.JUMPING_JACK
    REQUIRED_JOINTS = (
        "left_wrist", "right_wrist",
        "left_shoulder", "right_shoulder",
        "left_ankle", "right_ankle",
    )
    STATES = ("closed", "opening", "open", "closing")

    ABORT_CODE = FeedbackCode.INCOMPLETE_JACK
    ABORT_MESSAGE = "Arms all the way up and feet wide!"
    ABORT_JOINTS = frozenset({"left_wrist", "right_wrist", "left_ankle", "right_ankle"})
    ABORT_FOCUS = BodyRegion.SHOULDERS
    REP_MESSAGE = "Good jump!"

    def _measure(self) -> Dict[str, float]:
        # Positive rise = wrist above shoulder
        return {
            "left_wrist_rise": self._point("left_shoulder").y - self._point("left_wrist").y,
            "right_wrist_rise": self._point("right_shoulder").y - self._point("right_wrist").y,
            "ankle_spread": abs(self._point("left_ankle").x - self._point("right_ankle").x),
        }

    def _zone(self, measures: Dict[str, float]) -> Zone:
        margin = self.thresholds.hands_up_margin_px
        rises = (measures["left_wrist_rise"], measures["right_wrist_rise"])
        spread = measures["ankle_spread"]

        if all(r > margin for r in rises) and spread > self.thresholds.open_spread_px:
            return Zone.EXTREME
        if all(r < 0 for r in rises) and spread < self.thresholds.closed_spread_px:
            return Zone.START
        return Zone.MIDDLE
