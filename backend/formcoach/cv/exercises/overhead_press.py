"""Overhead press: average elbow angle between rack and lockout."""

from typing import Dict, Optional

from formcoach.cv.analysis_result import BodyRegion, FeedbackCode
from formcoach.cv.exercises.base import RepCycleAnalyzer, Zone, clip_progress
from formcoach.cv.thresholds import ExerciseType


class OverheadPressAnalyzer(RepCycleAnalyzer):
    """
    waiting -> pressing -> lockout -> lowering -> waiting

    The rep is counted when the bar returns to the rack. Between rack and
    lockout the analyzer only coaches through next_instruction.
    """

    exercise = ExerciseType.OVERHEAD_PRESS
    REQUIRED_JOINTS = (
        "left_shoulder", "left_elbow", "left_wrist",
        "right_shoulder", "right_elbow", "right_wrist",
    )
    STATES = ("waiting", "pressing", "lockout", "lowering")

    ABORT_CODE = FeedbackCode.INCOMPLETE_LOCKOUT
    ABORT_MESSAGE = "Lock your arms out overhead!"
    ABORT_JOINTS = frozenset({"left_elbow", "right_elbow"})
    ABORT_FOCUS = BodyRegion.ELBOWS
    REP_MESSAGE = "Strong!"

    def _measure(self) -> Dict[str, float]:
        left = self._angle("left_shoulder", "left_elbow", "left_wrist")
        right = self._angle("right_shoulder", "right_elbow", "right_wrist")
        return {"left_elbow": left, "right_elbow": right, "elbow": (left + right) / 2}

    def _zone(self, measures: Dict[str, float]) -> Zone:
        elbow = measures["elbow"]
        if elbow < self.thresholds.rack_angle:
            return Zone.START
        if elbow > self.thresholds.lockout_angle:
            return Zone.EXTREME
        return Zone.MIDDLE

    def _progress(self, measures: Dict[str, float]) -> Optional[float]:
        rack = self.thresholds.rack_angle
        return clip_progress((measures["elbow"] - rack) / (self.thresholds.lockout_angle - rack))

    def _instruction(self, measures: Dict[str, float]) -> Optional[str]:
        if self._zone(measures) == Zone.MIDDLE:
            return "Press all the way up"
        if self.state == "lockout":
            return "Lower to your shoulders"
        return None
