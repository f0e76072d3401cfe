"""Plank: contiguous hold time while the body line stays straight."""

from formcoach.cv.analysis_result import (
    AnalysisResult,
    BodyRegion,
    FeedbackCode,
    FeedbackItem,
    Severity,
    TempoPhase,
)
from formcoach.cv.exercises.base import ExerciseAnalyzer
from formcoach.cv.geometry import body_line_angle, distance
from formcoach.cv.thresholds import ExerciseType


class PlankAnalyzer(ExerciseAnalyzer):
    """
    waiting -> holding <-> bad_form

    Any break in the body line resets the hold to zero; the next valid frame
    starts a new hold rather than resuming the old one.
    """

    exercise = ExerciseType.PLANK
    REQUIRED_JOINTS = ("left_shoulder", "left_hip", "left_ankle")
    INITIAL_STATE = "waiting"

    def _analyze_frame(self) -> AnalysisResult:
        t = self.thresholds
        shoulder = self._point("left_shoulder")
        hip = self._point("left_hip")
        ankle = self._point("left_ankle")

        alignment = body_line_angle(shoulder, hip, ankle)
        body_length = distance(shoulder, ankle)
        horizontal = bool(body_length) and abs(shoulder.y - hip.y) / body_length < t.max_horizontal_ratio
        angles = {"body_alignment": alignment}

        if alignment <= t.min_body_line:
            problem = FeedbackItem(
                severity=Severity.ERROR,
                message="Lift your hips!",
                highlight_joints=frozenset({"left_hip"}),
                code=FeedbackCode.HIP_SAG,
            )
        elif alignment >= t.max_body_line:
            problem = FeedbackItem(
                severity=Severity.ERROR,
                message="Lower your hips a little!",
                highlight_joints=frozenset({"left_hip"}),
                code=FeedbackCode.HIPS_HIGH,
            )
        elif not horizontal:
            problem = FeedbackItem(
                severity=Severity.WARNING,
                message="Get into a horizontal plank position",
                code=FeedbackCode.INVALID_POSTURE,
            )
        else:
            problem = None

        if problem is not None:
            self._break_hold()
            self._set_phase("bad_form")
            focus = BodyRegion.BACK if problem.code == FeedbackCode.INVALID_POSTURE else BodyRegion.HIPS
            return self._result(
                feedback=[problem],
                progress=0.0,
                phase=TempoPhase.UNKNOWN,
                tempo="0.0s",
                next_instruction="Straighten your body from shoulders to ankles",
                focus_body_region=focus,
                angles=angles,
                hold_seconds=0.0,
            )

        self._set_phase("holding")
        hold = self._continue_hold()
        return self._result(
            feedback=[FeedbackItem(
                severity=Severity.SUCCESS,
                message="Excellent hold!",
                code=FeedbackCode.HOLDING,
            )],
            progress=min(1.0, hold / t.target_seconds),
            phase=TempoPhase.ISOMETRIC,
            tempo=f"{hold:.1f}s",
            next_instruction="Hold it, keep breathing",
            angles=angles,
            hold_seconds=hold,
        )
