"""Tree pose: balance hold scored on hip level and torso verticality."""

from formcoach.cv.analysis_result import (
    AnalysisResult,
    BodyRegion,
    FeedbackCode,
    FeedbackItem,
    Severity,
    TempoPhase,
)
from formcoach.cv.exercises.base import ExerciseAnalyzer
from formcoach.cv.geometry import segment_tilt, vertical_deviation
from formcoach.cv.keypoints import Keypoint
from formcoach.cv.thresholds import ExerciseType


def _midpoint(name: str, a: Keypoint, b: Keypoint) -> Keypoint:
    return Keypoint(name=name, x=(a.x + b.x) / 2, y=(a.y + b.y) / 2, score=min(a.score, b.score))


class TreePoseAnalyzer(ExerciseAnalyzer):
    """
    waiting -> holding <-> unstable

    Each frame scores max(0, 100 - 2*lean - 2*hip_tilt); the mean of the
    last window of scores must stay at or above min_stability to keep the
    hold going.
    """

    exercise = ExerciseType.TREE_POSE
    REQUIRED_JOINTS = (
        "left_hip", "right_hip",
        "left_shoulder", "right_shoulder",
        "left_ankle", "right_ankle",
    )
    INITIAL_STATE = "waiting"

    def _analyze_frame(self) -> AnalysisResult:
        t = self.thresholds
        left_hip = self._point("left_hip")
        right_hip = self._point("right_hip")
        mid_hip = _midpoint("mid_hip", left_hip, right_hip)
        mid_shoulder = _midpoint("mid_shoulder", self._point("left_shoulder"), self._point("right_shoulder"))

        hip_tilt = segment_tilt(left_hip, right_hip)
        torso_lean = vertical_deviation(mid_hip, mid_shoulder)
        stability = self._record_stability(torso_lean + hip_tilt)
        angles = {"hip_tilt": hip_tilt, "torso_lean": torso_lean}

        feedback = []
        if hip_tilt > t.max_hip_tilt:
            feedback.append(FeedbackItem(
                severity=Severity.WARNING,
                message="Level your hips!",
                highlight_joints=frozenset({"left_hip", "right_hip"}),
                code=FeedbackCode.HIPS_UNLEVEL,
            ))

        if stability < t.min_stability:
            self._break_hold()
            self._set_phase("unstable")
            feedback.append(FeedbackItem(
                severity=Severity.WARNING,
                message="Stabilize your body!",
                code=FeedbackCode.UNSTABLE,
            ))
            return self._result(
                feedback=feedback,
                progress=0.0,
                phase=TempoPhase.UNKNOWN,
                stability_score=stability,
                tempo="0.0s",
                next_instruction="Fix your gaze on one point and find your balance",
                focus_body_region=BodyRegion.HIPS,
                angles=angles,
                hold_seconds=0.0,
            )

        self._set_phase("holding")
        hold = self._continue_hold()
        feedback.append(FeedbackItem(
            severity=Severity.SUCCESS,
            message=f"Holding: {hold:.1f}s",
            code=FeedbackCode.HOLDING,
        ))
        return self._result(
            feedback=feedback,
            progress=min(1.0, hold / t.target_seconds),
            phase=TempoPhase.ISOMETRIC,
            stability_score=stability,
            tempo=f"{hold:.1f}s",
            next_instruction="Stay tall and breathe",
            focus_body_region=BodyRegion.HIPS if hip_tilt > t.max_hip_tilt else BodyRegion.NONE,
            angles=angles,
            hold_seconds=hold,
        )
