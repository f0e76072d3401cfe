"""
Exercise analyzer factory.

The set of analyzers is closed: ANALYZERS maps every ExerciseType to its
class. Names coming from clients are normalized ("High Knees", "high-knees"
and "high_knees" are the same exercise). Unknown names resolve to the
configured default exercise instead of failing the session, and the
fallback is logged so a typo does not go unnoticed.
"""

import logging
from typing import Dict, Optional, Tuple, Type

from formcoach.config import get_settings
from formcoach.cv.clock import Clock
from formcoach.cv.exercises import (
    ExerciseAnalyzer,
    HighKneeAnalyzer,
    JumpingJackAnalyzer,
    LungeAnalyzer,
    OverheadPressAnalyzer,
    PlankAnalyzer,
    PushupAnalyzer,
    SquatAnalyzer,
    TreePoseAnalyzer,
)
from formcoach.cv.exercises.base import DEFAULT_STABILITY_WINDOW
from formcoach.cv.thresholds import ExerciseType

logger = logging.getLogger(__name__)

ANALYZERS: Dict[ExerciseType, Type[ExerciseAnalyzer]] = {
    ExerciseType.SQUAT: SquatAnalyzer,
    ExerciseType.PUSHUP: PushupAnalyzer,
    ExerciseType.LUNGE: LungeAnalyzer,
    ExerciseType.PLANK: PlankAnalyzer,
    ExerciseType.JUMPING_JACK: JumpingJackAnalyzer,
    ExerciseType.HIGH_KNEES: HighKneeAnalyzer,
    ExerciseType.OVERHEAD_PRESS: OverheadPressAnalyzer,
    ExerciseType.TREE_POSE: TreePoseAnalyzer,
}


def normalize_exercise_name(name: Optional[str]) -> str:
    if not name:
        return ""
    return name.strip().lower().replace("-", "_").replace(" ", "_")


def resolve_exercise(name: Optional[str], default: Optional[str] = None) -> Tuple[ExerciseType, bool]:
    """
    Map a client-supplied name to an ExerciseType.

    Returns:
        (exercise, fallback_used). fallback_used is True when the name was
        not recognized and the default exercise was substituted.
    """
    normalized = normalize_exercise_name(name)
    try:
        return ExerciseType(normalized), False
    except ValueError:
        pass

    default_name = normalize_exercise_name(default or get_settings().default_exercise)
    try:
        fallback = ExerciseType(default_name)
    except ValueError:
        logger.error(f"Configured default exercise '{default_name}' is unknown, using squat")
        fallback = ExerciseType.SQUAT

    logger.warning(f"Unknown exercise '{name}', falling back to {fallback.value}")
    return fallback, True


def create_exercise_analyzer(
    name: Optional[str],
    clock: Optional[Clock] = None,
    thresholds=None,
    stability_window: int = DEFAULT_STABILITY_WINDOW,
    default: Optional[str] = None,
) -> ExerciseAnalyzer:
    """
    Factory function to create an exercise analyzer.

    Args:
        name: Exercise name, e.g. "squat" or "jumping_jack"
        clock: Time source for hold and tempo timers (system clock if None)
        thresholds: Threshold set overriding the exercise defaults
        stability_window: Samples averaged into the stability score
        default: Exercise used for unknown names (settings default if None)

    Returns:
        ExerciseAnalyzer instance. Never raises for an unknown name.
    """
    exercise, _ = resolve_exercise(name, default)
    return ANALYZERS[exercise](
        clock=clock,
        thresholds=thresholds,
        stability_window=stability_window,
    )
