"""
Per-session frame pipeline.

PIPELINE STAGES (one pass per frame):
1. Clock update from the frame timestamp, if any
2. Tracking quality grading on the raw frame
3. Keypoint smoothing
4. Exercise analysis (required-joint gate, state machine, form checks)
5. Feedback routing (prompts, sounds, highlights)

A session owns exactly one smoother, one analyzer and one router. It is not
thread-safe: callers must feed frames one at a time.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from formcoach.config import Settings, get_settings
from formcoach.cv.analysis_result import AnalysisResult
from formcoach.cv.clock import Clock, FrameClock
from formcoach.cv.exercise_analyzer import create_exercise_analyzer, resolve_exercise
from formcoach.cv.exercises import ExerciseAnalyzer
from formcoach.cv.feedback_router import FeedbackRouter, RoutedFeedback
from formcoach.cv.keypoint_smoother import KeypointSmoother, create_smoother
from formcoach.cv.keypoints import KeypointFrame, TrackingQuality, assess_tracking_quality

logger = logging.getLogger(__name__)


@dataclass
class FrameUpdate:
    """Output of one pipeline pass."""
    result: AnalysisResult
    feedback: RoutedFeedback
    tracking_quality: TrackingQuality


class WorkoutSession:
    """
    Smoother -> analyzer -> router for one user doing one exercise at a time.

    Usage:
        session = WorkoutSession("squat")
        for frame in frames:
            update = session.process_frame(frame)
            print(update.result.reps, update.feedback.speech)
    """

    def __init__(
        self,
        exercise: Optional[str],
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or get_settings()
        self.clock = FrameClock(fallback=clock)
        self.smoother: KeypointSmoother = self._create_smoother()
        self.router = FeedbackRouter(
            clock=self.clock,
            cooldown_seconds=self.settings.prompt_cooldown_seconds,
            language=self.settings.voice_language,
        )
        self.frames_processed = 0
        self._select(exercise)

    @property
    def reps(self) -> int:
        return self.analyzer.reps

    def process_frame(self, frame: KeypointFrame) -> FrameUpdate:
        self.clock.observe(frame.timestamp)
        quality = assess_tracking_quality(frame)
        smoothed = self.smoother.smooth(frame)

        self.analyzer.update_keypoints(smoothed)
        result = self.analyzer.analyze()
        feedback = self.router.route(result)

        self.frames_processed += 1
        return FrameUpdate(result=result, feedback=feedback, tracking_quality=quality)

    def switch_exercise(self, exercise: Optional[str]):
        """Start a different exercise with fresh smoothing and feedback state."""
        previous = self.exercise
        self._select(exercise)
        self.smoother.reset()
        self.router.reset()
        logger.info(f"Switched exercise {previous.value} -> {self.exercise.value}")

    def reset(self):
        self.analyzer.reset()
        self.smoother.reset()
        self.router.reset()
        self.frames_processed = 0

    def _select(self, exercise: Optional[str]):
        self.requested_exercise = exercise
        self.exercise, self.fallback_used = resolve_exercise(
            exercise, self.settings.default_exercise
        )
        self.analyzer: ExerciseAnalyzer = create_exercise_analyzer(
            self.exercise.value,
            clock=self.clock,
            stability_window=self.settings.stability_window,
        )

    def _create_smoother(self) -> KeypointSmoother:
        s = self.settings
        window = s.savgol_window if s.smoothing_strategy == "savgol" else s.smoothing_window
        return create_smoother(
            s.smoothing_strategy,
            window_size=window,
            alpha=s.smoothing_alpha,
            poly_order=s.savgol_poly_order,
        )
