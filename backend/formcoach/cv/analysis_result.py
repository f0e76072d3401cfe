"""
Per-frame analysis output shared by all exercise analyzers.

Feedback items carry a stable machine-readable code next to the display
message. Downstream consumers (voice prompts, overlay, avatar) key on the
code; the message is for display only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class BodyRegion(str, Enum):
    """Where the user's (and the camera's) attention should go."""
    HIPS = "hips"
    ELBOWS = "elbows"
    SHOULDERS = "shoulders"
    BACK = "back"
    HEAD = "head"
    NONE = "none"


class TempoPhase(str, Enum):
    """Muscle action of the current movement."""
    ECCENTRIC = "eccentric"
    CONCENTRIC = "concentric"
    ISOMETRIC = "isometric"
    UNKNOWN = "unknown"


class FeedbackCode:
    """
    Stable feedback codes.
    Problem codes land in AnalysisResult.error_codes; success codes do not.
    """
    # Input / posture
    BODY_NOT_VISIBLE = "BODY_NOT_VISIBLE"
    INVALID_POSTURE = "INVALID_POSTURE"

    # Depth / range of motion
    POOR_DEPTH = "POOR_DEPTH"
    CHEST_TOO_HIGH = "CHEST_TOO_HIGH"
    INCOMPLETE_LOCKOUT = "INCOMPLETE_LOCKOUT"
    INCOMPLETE_JACK = "INCOMPLETE_JACK"
    KNEE_TOO_LOW = "KNEE_TOO_LOW"

    # Alignment
    BAD_BACK = "BAD_BACK"
    HIP_SAG = "HIP_SAG"
    HIPS_HIGH = "HIPS_HIGH"
    ELBOW_FLARE = "ELBOW_FLARE"
    KNEE_OVER_TOE = "KNEE_OVER_TOE"
    HIPS_UNLEVEL = "HIPS_UNLEVEL"
    UNSTABLE = "UNSTABLE"

    # Success
    REP_COMPLETE = "REP_COMPLETE"
    GOOD_DEPTH = "GOOD_DEPTH"
    BALANCED = "BALANCED"
    HOLDING = "HOLDING"

    @classmethod
    def problems(cls) -> List[str]:
        return [
            cls.BODY_NOT_VISIBLE,
            cls.INVALID_POSTURE,
            cls.POOR_DEPTH,
            cls.CHEST_TOO_HIGH,
            cls.INCOMPLETE_LOCKOUT,
            cls.INCOMPLETE_JACK,
            cls.KNEE_TOO_LOW,
            cls.BAD_BACK,
            cls.HIP_SAG,
            cls.HIPS_HIGH,
            cls.ELBOW_FLARE,
            cls.KNEE_OVER_TOE,
            cls.HIPS_UNLEVEL,
            cls.UNSTABLE,
        ]

    @classmethod
    def get_description(cls, code: str) -> str:
        """Human-readable description of a feedback code."""
        descriptions = {
            cls.BODY_NOT_VISIBLE: "Required joints are not visible to the camera",
            cls.INVALID_POSTURE: "Body is not in the starting position for this exercise",
            cls.POOR_DEPTH: "Movement did not reach the required depth",
            cls.CHEST_TOO_HIGH: "Chest did not get low enough",
            cls.INCOMPLETE_LOCKOUT: "Arms were not fully extended overhead",
            cls.INCOMPLETE_JACK: "Arms and legs did not fully open",
            cls.KNEE_TOO_LOW: "Knee did not rise above hip level",
            cls.BAD_BACK: "Torso leaned too far forward",
            cls.HIP_SAG: "Hips sagged below the body line",
            cls.HIPS_HIGH: "Hips piked above the body line",
            cls.ELBOW_FLARE: "Elbows flared away from the body",
            cls.KNEE_OVER_TOE: "Front knee travelled past the ankle",
            cls.HIPS_UNLEVEL: "Hips were not level",
            cls.UNSTABLE: "Body was not stable",
            cls.REP_COMPLETE: "Repetition completed",
            cls.GOOD_DEPTH: "Good depth reached",
            cls.BALANCED: "Good balance",
            cls.HOLDING: "Holding the position",
        }
        return descriptions.get(code, code)


@dataclass(frozen=True)
class FeedbackItem:
    """One feedback message with the joints it refers to."""
    severity: Severity
    message: str
    highlight_joints: FrozenSet[str] = frozenset()
    code: Optional[str] = None

    @property
    def is_problem(self) -> bool:
        return self.severity != Severity.SUCCESS


@dataclass(frozen=True)
class AnalysisResult:
    """
    Result of analyzing one frame.

    is_correct and error_codes are derived from the feedback so the two can
    never disagree.
    """
    reps: int
    state: str
    feedback: Tuple[FeedbackItem, ...] = ()
    progress: Optional[float] = None
    phase: Optional[TempoPhase] = None
    stability_score: Optional[float] = None
    tempo: Optional[str] = None
    next_instruction: Optional[str] = None
    focus_body_region: BodyRegion = BodyRegion.NONE
    angles: Dict[str, float] = field(default_factory=dict)
    hold_seconds: Optional[float] = None

    @property
    def error_codes(self) -> FrozenSet[str]:
        return frozenset(
            item.code for item in self.feedback
            if item.is_problem and item.code is not None
        )

    @property
    def is_correct(self) -> bool:
        return not any(item.is_problem for item in self.feedback)

    @property
    def highlight_joints(self) -> FrozenSet[str]:
        joints: FrozenSet[str] = frozenset()
        for item in self.feedback:
            joints |= item.highlight_joints
        return joints

    def has_code(self, code: str) -> bool:
        return any(item.code == code for item in self.feedback)
