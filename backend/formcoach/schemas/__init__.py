"""Pydantic schemas for API request/response models."""

from formcoach.schemas.session import (
    SessionCreate,
    ExerciseSwitch,
    KeypointIn,
    FrameIn,
    SessionResponse,
    ExerciseListResponse,
    FeedbackItemResponse,
    AnalysisResultResponse,
    SegmentResponse,
    RoutedFeedbackResponse,
    FrameResponse,
)

__all__ = [
    "SessionCreate",
    "ExerciseSwitch",
    "KeypointIn",
    "FrameIn",
    "SessionResponse",
    "ExerciseListResponse",
    "FeedbackItemResponse",
    "AnalysisResultResponse",
    "SegmentResponse",
    "RoutedFeedbackResponse",
    "FrameResponse",
]
