"""Workout session schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from formcoach.cv.analysis_result import AnalysisResult, FeedbackItem
from formcoach.cv.feedback_router import RoutedFeedback
from formcoach.cv.keypoints import Keypoint, KeypointFrame
from formcoach.cv.workout_session import FrameUpdate, WorkoutSession


class SessionCreate(BaseModel):
    """Schema for starting a workout session."""
    exercise: str = Field(..., description="Exercise name, e.g. squat, pushup, tree_pose")


class ExerciseSwitch(BaseModel):
    """Schema for switching the exercise of a running session."""
    exercise: str = Field(..., description="Exercise name to switch to")


class KeypointIn(BaseModel):
    """One detector keypoint in pixel coordinates."""
    name: str
    x: float
    y: float
    score: float = Field(0.0, ge=0.0, le=1.0)


class FrameIn(BaseModel):
    """Schema for one frame of detector output."""
    keypoints: List[KeypointIn]
    timestamp: Optional[float] = Field(None, description="Capture time in seconds, drives hold and tempo timing")
    frame_number: int = 0

    def to_frame(self) -> KeypointFrame:
        return KeypointFrame(
            keypoints=[Keypoint(name=k.name, x=k.x, y=k.y, score=k.score) for k in self.keypoints],
            timestamp=self.timestamp,
            frame_number=self.frame_number,
        )


class SessionResponse(BaseModel):
    """Schema for session state."""
    id: str
    exercise: str
    requested_exercise: Optional[str] = None
    fallback_used: bool = False  # True when the requested name was unknown
    reps: int
    state: str
    frames_processed: int

    @classmethod
    def from_session(cls, session_id: str, session: WorkoutSession) -> "SessionResponse":
        return cls(
            id=session_id,
            exercise=session.exercise.value,
            requested_exercise=session.requested_exercise,
            fallback_used=session.fallback_used,
            reps=session.reps,
            state=session.analyzer.state,
            frames_processed=session.frames_processed,
        )


class ExerciseListResponse(BaseModel):
    exercises: List[str]
    default: str


class FeedbackItemResponse(BaseModel):
    severity: str
    message: str
    highlight_joints: List[str] = []
    code: Optional[str] = None

    @classmethod
    def from_item(cls, item: FeedbackItem) -> "FeedbackItemResponse":
        return cls(
            severity=item.severity.value,
            message=item.message,
            highlight_joints=sorted(item.highlight_joints),
            code=item.code,
        )


class AnalysisResultResponse(BaseModel):
    """
    Schema for one frame's analysis.

    Consumed by the overlay (highlights, error codes, focus region), the
    audio layer (reps) and the 3D avatar (progress, focus region).
    """
    is_correct: bool
    reps: int
    state: str
    feedback: List[FeedbackItemResponse]
    error_codes: List[str]
    progress: Optional[float] = None
    phase: Optional[str] = None
    stability_score: Optional[float] = None
    tempo: Optional[str] = None
    next_instruction: Optional[str] = None
    focus_body_region: str = "none"
    angles: Dict[str, float] = {}
    hold_seconds: Optional[float] = None

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultResponse":
        return cls(
            is_correct=result.is_correct,
            reps=result.reps,
            state=result.state,
            feedback=[FeedbackItemResponse.from_item(item) for item in result.feedback],
            error_codes=sorted(result.error_codes),
            progress=result.progress,
            phase=result.phase.value if result.phase else None,
            stability_score=result.stability_score,
            tempo=result.tempo,
            next_instruction=result.next_instruction,
            focus_body_region=result.focus_body_region.value,
            angles=result.angles,
            hold_seconds=result.hold_seconds,
        )


class SegmentResponse(BaseModel):
    start: str
    end: str
    style: str  # "error" or "focus"


class RoutedFeedbackResponse(BaseModel):
    prompts: List[str]
    speech: List[str]
    sounds: List[str]
    highlight_joints: List[str]
    segments: List[SegmentResponse]
    rep_completed: bool

    @classmethod
    def from_routed(cls, routed: RoutedFeedback) -> "RoutedFeedbackResponse":
        return cls(
            prompts=[p.value for p in routed.prompts],
            speech=routed.speech,
            sounds=[s.value for s in routed.sounds],
            highlight_joints=sorted(routed.highlight_joints),
            segments=[
                SegmentResponse(start=s.start, end=s.end, style=s.style)
                for s in routed.segments
            ],
            rep_completed=routed.rep_completed,
        )


class FrameResponse(BaseModel):
    """Schema for the result of processing one frame."""
    session_id: str
    exercise: str
    tracking_quality: str
    result: AnalysisResultResponse
    feedback: RoutedFeedbackResponse

    @classmethod
    def from_update(cls, session_id: str, exercise: str, update: FrameUpdate) -> "FrameResponse":
        return cls(
            session_id=session_id,
            exercise=exercise,
            tracking_quality=update.tracking_quality.value,
            result=AnalysisResultResponse.from_result(update.result),
            feedback=RoutedFeedbackResponse.from_routed(update.feedback),
        )
