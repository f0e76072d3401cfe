"""Exercise catalogue endpoint."""

from fastapi import APIRouter

from formcoach.config import get_settings
from formcoach.cv.exercise_analyzer import resolve_exercise
from formcoach.cv.thresholds import ExerciseType
from formcoach.schemas.session import ExerciseListResponse

router = APIRouter()


@router.get("", response_model=ExerciseListResponse)
async def list_exercises():
    """List supported exercises and the default used for unknown names."""
    default, _ = resolve_exercise(get_settings().default_exercise)
    return ExerciseListResponse(
        exercises=ExerciseType.all(),
        default=default.value,
    )
