"""
Pose-analysis core for real-time exercise coaching.

PIPELINE COMPONENTS:
1. Keypoints: 17-joint MoveNet skeleton model and tracking quality grading
2. Geometry: joint angles, distances, body-line and tilt helpers
3. KeypointSmoother: windowed mean, EMA or Savitzky-Golay smoothing
4. ExerciseAnalyzer: per-exercise state machines (8 exercises)
5. FeedbackRouter: feedback codes to voice prompts, sounds and highlights
6. WorkoutSession: per-frame orchestration of the stages above

EXERCISE ANALYZERS:
Rep exercises (squat, pushup, lunge, jumping jack, high knees, overhead
press) count a rep once per full idle -> out -> extreme -> back cycle, and
only after the start position has been seen. Hold exercises (plank, tree
pose) accumulate contiguous hold time that restarts from zero on any break.
Nothing raises at frame time: missing joints and invalid posture come back
as feedback.

Usage:
    from formcoach.cv import WorkoutSession, KeypointFrame

    session = WorkoutSession("pushup")
    for frame in frames:
        update = session.process_frame(frame)
        print(update.result.reps, update.result.error_codes)
"""

from formcoach.cv.keypoints import (
    JointName, Keypoint, KeypointFrame, SKELETON_CONNECTIONS,
    TrackingQuality, assess_tracking_quality,
)
from formcoach.cv.geometry import (
    joint_angle, signed_angle, angle_degrees, distance,
    body_line_angle, vertical_deviation, segment_tilt,
)
from formcoach.cv.keypoint_smoother import (
    KeypointSmoother, WindowedMeanSmoother, EMASmoother,
    SavitzkyGolaySmoother, create_smoother,
)
from formcoach.cv.clock import Clock, FrameClock, SystemClock, ManualClock
from formcoach.cv.analysis_result import (
    AnalysisResult, FeedbackItem, FeedbackCode, Severity, BodyRegion, TempoPhase,
)
from formcoach.cv.thresholds import ExerciseType, EXERCISE_THRESHOLDS
from formcoach.cv.exercises import ExerciseAnalyzer, AnalyzerState
from formcoach.cv.exercise_analyzer import (
    create_exercise_analyzer, resolve_exercise, normalize_exercise_name,
)
from formcoach.cv.feedback_router import (
    FeedbackRouter, RoutedFeedback, PromptKey, SoundEffect, text_for,
)
from formcoach.cv.workout_session import WorkoutSession, FrameUpdate

__all__ = [
    # Keypoints
    "JointName",
    "Keypoint",
    "KeypointFrame",
    "SKELETON_CONNECTIONS",
    "TrackingQuality",
    "assess_tracking_quality",

    # Geometry
    "joint_angle",
    "signed_angle",
    "angle_degrees",
    "distance",
    "body_line_angle",
    "vertical_deviation",
    "segment_tilt",

    # Smoothing
    "KeypointSmoother",
    "WindowedMeanSmoother",
    "EMASmoother",
    "SavitzkyGolaySmoother",
    "create_smoother",

    # Time
    "Clock",
    "SystemClock",
    "ManualClock",
    "FrameClock",

    # Results
    "AnalysisResult",
    "FeedbackItem",
    "FeedbackCode",
    "Severity",
    "BodyRegion",
    "TempoPhase",

    # Analyzers
    "ExerciseType",
    "EXERCISE_THRESHOLDS",
    "ExerciseAnalyzer",
    "AnalyzerState",
    "create_exercise_analyzer",
    "resolve_exercise",
    "normalize_exercise_name",

    # Feedback
    "FeedbackRouter",
    "RoutedFeedback",
    "PromptKey",
    "SoundEffect",
    "text_for",

    # Pipeline
    "WorkoutSession",
    "FrameUpdate",
]
