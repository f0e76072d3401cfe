"""
Pushup analysis with a plank-position gate, tempo and stability tracking.

The gate keeps someone standing in front of the camera and bending their
arms from ever producing a rep: unless the body is horizontal, facing down,
hands placed and roughly straight, the machine is held in "waiting".
"""

import logging
from typing import List, Optional, Tuple

from formcoach.cv.analysis_result import (
    AnalysisResult,
    BodyRegion,
    FeedbackCode,
    FeedbackItem,
    Severity,
    TempoPhase,
)
from formcoach.cv.exercises.base import ExerciseAnalyzer, clip_progress
from formcoach.cv.geometry import body_line_angle, distance
from formcoach.cv.thresholds import ExerciseType

logger = logging.getLogger(__name__)


class PushupAnalyzer(ExerciseAnalyzer):
    """
    waiting -> descending -> bottom -> ascending -> waiting

    Elbow angle drives the machine; the shoulder-hip-ankle body line drives
    hip feedback and the stability score.
    """

    exercise = ExerciseType.PUSHUP
    REQUIRED_JOINTS = ("left_shoulder", "left_elbow", "left_wrist", "left_hip", "left_ankle")
    INITIAL_STATE = "waiting"

    INSTRUCTIONS = {
        "waiting": ("Lower yourself slowly, keep your back straight", BodyRegion.BACK),
        "descending": ("Keep going until your chest is near the floor", BodyRegion.ELBOWS),
        "bottom": ("Push up hard!", BodyRegion.SHOULDERS),
        "ascending": ("Extend your arms fully", BodyRegion.ELBOWS),
    }

    def _analyze_frame(self) -> AnalysisResult:
        t = self.thresholds
        shoulder = self._point("left_shoulder")
        hip = self._point("left_hip")
        ankle = self._point("left_ankle")

        elbow_angle = self._angle("left_shoulder", "left_elbow", "left_wrist")
        alignment = body_line_angle(shoulder, hip, ankle)
        angles = {"elbow": elbow_angle, "body_alignment": alignment}

        gate_message = self._check_position(alignment)
        if gate_message is not None:
            if self.state != "waiting":
                logger.debug(f"pushup: position lost in {self.state}, back to waiting")
            self._set_phase("waiting")
            self._state.armed = False
            return self._result(
                feedback=[FeedbackItem(
                    severity=Severity.WARNING,
                    message=gate_message,
                    code=FeedbackCode.INVALID_POSTURE,
                )],
                phase=TempoPhase.UNKNOWN,
                angles=angles,
            )

        self._update_tempo(elbow_angle)
        stability = self._record_stability(abs(180.0 - alignment))

        feedback: List[FeedbackItem] = []
        focus = BodyRegion.NONE

        if alignment < t.hip_sag_angle:
            feedback.append(FeedbackItem(
                severity=Severity.ERROR,
                message="Lift your hips! Tighten your core",
                highlight_joints=frozenset({"left_hip"}),
                code=FeedbackCode.HIP_SAG,
            ))
            focus = BodyRegion.HIPS
        elif alignment > t.hips_high_angle:
            feedback.append(FeedbackItem(
                severity=Severity.WARNING,
                message="Lower your hips a little",
                highlight_joints=frozenset({"left_hip"}),
                code=FeedbackCode.HIPS_HIGH,
            ))
            focus = BodyRegion.HIPS

        instruction, state_focus = self.INSTRUCTIONS[self.state]
        if focus == BodyRegion.NONE:
            focus = state_focus

        step_feedback, step_focus = self._step(elbow_angle)
        feedback.extend(step_feedback)
        if step_focus is not None:
            focus = step_focus

        return self._result(
            feedback=feedback,
            progress=clip_progress(
                (t.progress_top - elbow_angle) / (t.progress_top - t.progress_bottom)
            ),
            phase=self._state.tempo_phase,
            stability_score=stability,
            tempo=f"{self._state.eccentric_seconds:.1f}s / {self._state.concentric_seconds:.1f}s",
            next_instruction=instruction,
            focus_body_region=focus,
            angles=angles,
        )

    def _check_position(self, alignment: float) -> Optional[str]:
        """Return a corrective message, or None when in pushup position."""
        t = self.thresholds
        shoulder = self._point("left_shoulder")
        hip = self._point("left_hip")
        ankle = self._point("left_ankle")
        wrist = self._point("left_wrist")
        nose = self._optional_point("nose")

        body_length = distance(shoulder, ankle)
        if body_length:
            horizontal_ratio = abs(shoulder.y - hip.y) / body_length
        else:
            horizontal_ratio = float("inf")

        facing_down = nose is not None and nose.y > shoulder.y - t.face_margin_px
        hands_placed = wrist.y >= shoulder.y - t.hands_margin_px
        horizontal = horizontal_ratio < t.max_horizontal_ratio
        straight = t.min_body_line < alignment < t.max_body_line

        if not facing_down:
            return "Show your face and head to the camera"
        if not hands_placed:
            return "Make sure your hands are visible"
        if not horizontal:
            return "Get your body horizontal (plank position)"
        if not straight:
            return "Keep your body straight"
        return None

    def _update_tempo(self, elbow_angle: float):
        t = self.thresholds
        state = self._state
        now = self.clock.now()
        if state.phase_started_at is None:
            state.phase_started_at = now

        new_phase = state.tempo_phase
        if self.state == "waiting" and elbow_angle < t.eccentric_below:
            new_phase = TempoPhase.ECCENTRIC
        elif self.state == "bottom" and elbow_angle > t.concentric_above:
            new_phase = TempoPhase.CONCENTRIC
        elif elbow_angle > t.isometric_above or elbow_angle < t.isometric_below:
            new_phase = TempoPhase.ISOMETRIC

        if new_phase != state.tempo_phase:
            duration = now - state.phase_started_at
            if state.tempo_phase == TempoPhase.ECCENTRIC:
                state.eccentric_seconds = duration
            elif state.tempo_phase == TempoPhase.CONCENTRIC:
                state.concentric_seconds = duration
            state.tempo_phase = new_phase
            state.phase_started_at = now

    def _step(self, elbow_angle: float) -> Tuple[List[FeedbackItem], Optional[BodyRegion]]:
        t = self.thresholds
        feedback: List[FeedbackItem] = []
        focus = None

        if elbow_angle > t.top_angle:
            self._state.armed = True

        if self.state == "waiting":
            if elbow_angle < t.top_angle and self._state.armed:
                self._state.deepest_angle = elbow_angle
                self._set_phase("descending")

        elif self.state == "descending":
            if t.flare_min < elbow_angle < t.flare_max:
                feedback.append(FeedbackItem(
                    severity=Severity.WARNING,
                    message="Keep your elbows close to your body (45 degrees)",
                    highlight_joints=frozenset({"left_elbow"}),
                    code=FeedbackCode.ELBOW_FLARE,
                ))
                focus = BodyRegion.ELBOWS
            if elbow_angle <= t.bottom_angle:
                self._set_phase("bottom")
            elif elbow_angle > t.top_angle:
                self._set_phase("waiting")
                feedback.append(FeedbackItem(
                    severity=Severity.WARNING,
                    message="Lower your chest more",
                    highlight_joints=frozenset({"left_shoulder"}),
                    code=FeedbackCode.CHEST_TOO_HIGH,
                ))
                focus = BodyRegion.SHOULDERS

        elif self.state == "bottom":
            if elbow_angle > t.ascend_angle:
                self._set_phase("ascending")

        elif self.state == "ascending":
            if elbow_angle > t.top_angle:
                self._set_phase("waiting")
                self._count_rep()
                feedback.append(FeedbackItem(
                    severity=Severity.SUCCESS,
                    message="Great rep!",
                    code=FeedbackCode.REP_COMPLETE,
                ))

        if self.state == "bottom":
            feedback.append(self._depth_feedback(elbow_angle))
        elif self.state == "descending":
            deepest = self._state.deepest_angle
            if deepest is None or elbow_angle < deepest:
                self._state.deepest_angle = elbow_angle

        return feedback, focus

    def _depth_feedback(self, elbow_angle: float) -> FeedbackItem:
        state = self._state
        if state.deepest_angle is None or elbow_angle < state.deepest_angle:
            state.deepest_angle = elbow_angle
        message = (
            "Excellent depth!"
            if state.deepest_angle <= self.thresholds.excellent_depth
            else "Good depth!"
        )
        return FeedbackItem(
            severity=Severity.SUCCESS,
            message=message,
            highlight_joints=frozenset({"left_elbow"}),
            code=FeedbackCode.GOOD_DEPTH,
        )
