"""
Exercise vocabulary and per-exercise threshold sets.

Angles are in degrees, distances in pixels (y grows downward). Every
analyzer takes its threshold set as a constructor argument, so individual
values can be tuned or tested without touching the state machines.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class ExerciseType(str, Enum):
    """Supported exercises."""
    SQUAT = "squat"
    PUSHUP = "pushup"
    LUNGE = "lunge"
    PLANK = "plank"
    JUMPING_JACK = "jumping_jack"
    HIGH_KNEES = "high_knees"
    OVERHEAD_PRESS = "overhead_press"
    TREE_POSE = "tree_pose"

    @classmethod
    def all(cls) -> List[str]:
        return [exercise.value for exercise in cls]


@dataclass(frozen=True)
class SquatThresholds:
    min_score: float = 0.5
    standing_angle: float = 160.0    # Knee above this = standing
    depth_angle: float = 100.0       # Knee below this = bottom
    deep_angle: float = 75.0         # Praised as excellent depth
    max_back_lean: float = 45.0      # Torso lean from vertical
    progress_top: float = 170.0
    progress_bottom: float = 90.0


@dataclass(frozen=True)
class PushupThresholds:
    min_score: float = 0.3

    # Rep state machine (elbow angle)
    top_angle: float = 160.0
    bottom_angle: float = 85.0
    ascend_angle: float = 100.0
    excellent_depth: float = 75.0
    good_depth: float = 90.0

    # Plank-position gate
    max_horizontal_ratio: float = 0.4
    face_margin_px: float = 30.0
    hands_margin_px: float = 100.0
    min_body_line: float = 140.0
    max_body_line: float = 220.0

    # Form
    hip_sag_angle: float = 160.0
    hips_high_angle: float = 200.0
    flare_min: float = 100.0
    flare_max: float = 140.0

    # Tempo hysteresis bands
    eccentric_below: float = 160.0
    concentric_above: float = 90.0
    isometric_above: float = 170.0
    isometric_below: float = 80.0

    progress_top: float = 170.0
    progress_bottom: float = 70.0


@dataclass(frozen=True)
class LungeThresholds:
    min_score: float = 0.3
    standing_angle: float = 160.0
    depth_angle: float = 100.0
    knee_over_ankle_px: float = 50.0
    progress_top: float = 170.0
    progress_bottom: float = 90.0


@dataclass(frozen=True)
class PlankThresholds:
    min_score: float = 0.3
    min_body_line: float = 165.0     # Exclusive
    max_body_line: float = 195.0     # Exclusive
    max_horizontal_ratio: float = 0.4
    target_seconds: float = 60.0


@dataclass(frozen=True)
class JumpingJackThresholds:
    min_score: float = 0.3
    hands_up_margin_px: float = 50.0
    open_spread_px: float = 100.0
    closed_spread_px: float = 80.0


@dataclass(frozen=True)
class HighKneeThresholds:
    min_score: float = 0.3


@dataclass(frozen=True)
class OverheadPressThresholds:
    min_score: float = 0.3
    lockout_angle: float = 160.0
    rack_angle: float = 90.0


@dataclass(frozen=True)
class TreePoseThresholds:
    min_score: float = 0.3
    min_stability: float = 70.0
    max_hip_tilt: float = 10.0
    target_seconds: float = 30.0


EXERCISE_THRESHOLDS: Dict[ExerciseType, object] = {
    ExerciseType.SQUAT: SquatThresholds(),
    ExerciseType.PUSHUP: PushupThresholds(),
    ExerciseType.LUNGE: LungeThresholds(),
    ExerciseType.PLANK: PlankThresholds(),
    ExerciseType.JUMPING_JACK: JumpingJackThresholds(),
    ExerciseType.HIGH_KNEES: HighKneeThresholds(),
    ExerciseType.OVERHEAD_PRESS: OverheadPressThresholds(),
    ExerciseType.TREE_POSE: TreePoseThresholds(),
}
