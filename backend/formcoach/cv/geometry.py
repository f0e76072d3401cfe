"""
Angle and distance primitives over keypoints.

All functions are pure. Low confidence and degenerate geometry (a
zero-length vector) both produce None rather than an exception, so callers
can treat None uniformly as "insufficient data this frame".
"""

import math
from typing import Optional

import numpy as np

from formcoach.cv.keypoints import Keypoint

EPSILON = 1e-9


def _confident(min_score: float, *points: Optional[Keypoint]) -> bool:
    return all(p is not None and p.score >= min_score for p in points)


def joint_angle(
    a: Optional[Keypoint],
    b: Optional[Keypoint],
    c: Optional[Keypoint],
    min_score: float = 0.0,
) -> Optional[float]:
    """Unsigned angle at vertex `b` in radians, via the dot product."""
    if not _confident(min_score, a, b, c):
        return None

    v1 = np.array([a.x - b.x, a.y - b.y])
    v2 = np.array([c.x - b.x, c.y - b.y])
    n1 = np.linalg.norm(v1)
    n2 = np.linalg.norm(v2)
    if n1 < EPSILON or n2 < EPSILON:
        return None

    cos_angle = np.dot(v1, v2) / (n1 * n2)
    return float(np.arccos(np.clip(cos_angle, -1.0, 1.0)))


def signed_angle(
    a: Optional[Keypoint],
    b: Optional[Keypoint],
    c: Optional[Keypoint],
    min_score: float = 0.0,
) -> Optional[float]:
    """Direction-aware angle from b->a to b->c in radians, in (-pi, pi]."""
    if not _confident(min_score, a, b, c):
        return None
    if math.hypot(a.x - b.x, a.y - b.y) < EPSILON or math.hypot(c.x - b.x, c.y - b.y) < EPSILON:
        return None

    angle = math.atan2(c.y - b.y, c.x - b.x) - math.atan2(a.y - b.y, a.x - b.x)
    return math.pi - ((math.pi - angle) % (2 * math.pi))


def angle_degrees(a: Keypoint, b: Keypoint, c: Keypoint) -> float:
    """
    Unsigned angle at `b` in degrees, in [0, 180].

    Used by the rep-counting thresholds. Callers gate on confidence first.
    """
    radians = math.atan2(c.y - b.y, c.x - b.x) - math.atan2(a.y - b.y, a.x - b.x)
    angle = abs(math.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def distance(
    a: Optional[Keypoint],
    b: Optional[Keypoint],
    min_score: float = 0.0,
) -> Optional[float]:
    """Planar distance in pixels."""
    if not _confident(min_score, a, b):
        return None
    return math.hypot(a.x - b.x, a.y - b.y)


def body_line_angle(shoulder: Keypoint, hip: Keypoint, ankle: Keypoint) -> float:
    """
    Shoulder-hip-ankle angle on a 0-360 scale.

    180 is a straight body line. Values below 180 mean the hip sits below
    the shoulder-ankle line (sagging), values above 180 mean it is piked
    above it. A vertical body line has no "above", so the plain angle is
    returned.
    """
    theta = angle_degrees(shoulder, hip, ankle)
    dx = ankle.x - shoulder.x
    if abs(dx) < EPSILON:
        return theta

    t = (hip.x - shoulder.x) / dx
    line_y = shoulder.y + t * (ankle.y - shoulder.y)
    return 360.0 - theta if hip.y < line_y else theta


def vertical_deviation(lower: Keypoint, upper: Keypoint) -> float:
    """Degrees between lower->upper and straight up (0 = upright)."""
    dx = upper.x - lower.x
    dy = lower.y - upper.y
    if abs(dx) < EPSILON and abs(dy) < EPSILON:
        return 0.0
    return math.degrees(math.atan2(abs(dx), dy))


def segment_tilt(a: Keypoint, b: Keypoint) -> float:
    """Degrees a segment deviates from horizontal, in [0, 90]."""
    angle = abs(math.degrees(math.atan2(b.y - a.y, b.x - a.x)))
    return min(angle, 180.0 - angle)
