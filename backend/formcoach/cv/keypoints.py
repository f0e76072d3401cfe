"""
Keypoint model for the 17-joint MoveNet / COCO skeleton.

Keypoints:
0: nose, 1: left_eye, 2: right_eye, 3: left_ear, 4: right_ear,
5: left_shoulder, 6: right_shoulder, 7: left_elbow, 8: right_elbow,
9: left_wrist, 10: right_wrist, 11: left_hip, 12: right_hip,
13: left_knee, 14: right_knee, 15: left_ankle, 16: right_ankle

Coordinates are pixel space with y growing downward (0 = top of frame).
A keypoint is never "missing" on its own: every lookup supplies the minimum
score it needs, and anything below that score is treated as absent.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np


class JointName(str, Enum):
    """MoveNet joint names, in detector output order."""
    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"

    @classmethod
    def all(cls) -> List[str]:
        return [joint.value for joint in cls]


NUM_KEYPOINTS = 17

# Skeleton edges used by overlay consumers
SKELETON_CONNECTIONS: Tuple[Tuple[str, str], ...] = (
    ("nose", "left_eye"),
    ("nose", "right_eye"),
    ("left_eye", "left_ear"),
    ("right_eye", "right_ear"),
    ("left_shoulder", "right_shoulder"),
    ("left_shoulder", "left_elbow"),
    ("left_elbow", "left_wrist"),
    ("right_shoulder", "right_elbow"),
    ("right_elbow", "right_wrist"),
    ("left_shoulder", "left_hip"),
    ("right_shoulder", "right_hip"),
    ("left_hip", "right_hip"),
    ("left_hip", "left_knee"),
    ("left_knee", "left_ankle"),
    ("right_hip", "right_knee"),
    ("right_knee", "right_ankle"),
)


@dataclass(frozen=True)
class Keypoint:
    """Single named keypoint with pixel position and confidence."""
    name: str
    x: float
    y: float
    score: float = 0.0

    def is_confident(self, min_score: float) -> bool:
        return self.score >= min_score


@dataclass
class KeypointFrame:
    """
    All keypoints for a single time sample.

    The detector does not guarantee unique names, so lookups always return
    the first keypoint (in detector order) that matches the name and meets
    the requested score.
    """
    keypoints: List[Keypoint] = field(default_factory=list)
    timestamp: Optional[float] = None
    frame_number: int = 0

    def __iter__(self) -> Iterator[Keypoint]:
        return iter(self.keypoints)

    def __len__(self) -> int:
        return len(self.keypoints)

    def get(self, name: str, min_score: float = 0.0) -> Optional[Keypoint]:
        """First keypoint called `name` with score >= min_score, else None."""
        for kp in self.keypoints:
            if kp.name == name and kp.score >= min_score:
                return kp
        return None

    def missing(self, names: Sequence[str], min_score: float) -> List[str]:
        """Names from `names` that are absent at `min_score`."""
        return [name for name in names if self.get(name, min_score) is None]

    def with_keypoints(self, keypoints: List[Keypoint]) -> "KeypointFrame":
        return KeypointFrame(
            keypoints=keypoints,
            timestamp=self.timestamp,
            frame_number=self.frame_number,
        )

    @property
    def average_score(self) -> float:
        if not self.keypoints:
            return 0.0
        return float(np.mean([kp.score for kp in self.keypoints]))

    @classmethod
    def from_movenet(
        cls,
        keypoints: np.ndarray,
        width: float,
        height: float,
        frame_number: int = 0,
        timestamp: Optional[float] = None,
    ) -> "KeypointFrame":
        """
        Build a frame from a MoveNet output tensor.

        Args:
            keypoints: Array of shape (17, 3) (or (1, 1, 17, 3)) with
                normalized (y, x, confidence) per keypoint
            width: Frame width in pixels
            height: Frame height in pixels
        """
        array = np.asarray(keypoints, dtype=float).reshape(-1, 3)
        if array.shape[0] != NUM_KEYPOINTS:
            raise ValueError(f"Expected {NUM_KEYPOINTS} keypoints, got {array.shape[0]}")

        names = JointName.all()
        return cls(
            keypoints=[
                Keypoint(
                    name=names[i],
                    x=float(array[i, 1] * width),
                    y=float(array[i, 0] * height),
                    score=float(array[i, 2]),
                )
                for i in range(NUM_KEYPOINTS)
            ],
            timestamp=timestamp,
            frame_number=frame_number,
        )

    @classmethod
    def from_dict(cls, points: Dict[str, Tuple[float, float, float]], **kwargs) -> "KeypointFrame":
        """Build a frame from {name: (x, y, score)}."""
        return cls(
            keypoints=[Keypoint(name=n, x=x, y=y, score=s) for n, (x, y, s) in points.items()],
            **kwargs,
        )


class TrackingQuality(str, Enum):
    """How well the detector is currently tracking the subject."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def assess_tracking_quality(frame: KeypointFrame) -> TrackingQuality:
    """Grade a frame by mean score and number of high-confidence joints."""
    if not frame.keypoints:
        return TrackingQuality.POOR

    avg_score = frame.average_score
    confident = sum(1 for kp in frame.keypoints if kp.score > 0.6)

    if avg_score > 0.7 and confident > 12:
        return TrackingQuality.EXCELLENT
    if avg_score > 0.5 and confident > 10:
        return TrackingQuality.GOOD
    if avg_score > 0.4 and confident > 8:
        return TrackingQuality.FAIR
    return TrackingQuality.POOR
