"""Shared frame builders. All coordinates are pixels, y grows downward."""

import math
from typing import Dict, Optional, Tuple

import pytest

from formcoach.cv.clock import ManualClock
from formcoach.cv.keypoints import KeypointFrame

Point = Tuple[float, float]

# Upright figure facing the camera
STANDING_POSE: Dict[str, Point] = {
    "nose": (300, 100),
    "left_eye": (290, 90),
    "right_eye": (310, 90),
    "left_ear": (280, 95),
    "right_ear": (320, 95),
    "left_shoulder": (270, 150),
    "right_shoulder": (330, 150),
    "left_elbow": (260, 220),
    "right_elbow": (340, 220),
    "left_wrist": (255, 290),
    "right_wrist": (345, 290),
    "left_hip": (280, 300),
    "right_hip": (320, 300),
    "left_knee": (280, 400),
    "right_knee": (320, 400),
    "left_ankle": (280, 500),
    "right_ankle": (320, 500),
}


def make_frame(points: Dict[str, Point], score: float = 1.0, **scores: float) -> KeypointFrame:
    """Frame from {name: (x, y)}; per-joint scores override the default."""
    return KeypointFrame.from_dict(
        {name: (x, y, scores.get(name, score)) for name, (x, y) in points.items()}
    )


def rotate(origin: Point, length: float, degrees_from_down: float) -> Point:
    """Point `length` away from origin, rotated from straight down."""
    rad = math.radians(degrees_from_down)
    return (origin[0] + length * math.sin(rad), origin[1] + length * math.cos(rad))


def leg_points(knee_angle: float, shin_tilt: float = 0.0) -> Dict[str, Point]:
    """Left leg with the given knee angle and a shoulder straight above the hip."""
    knee = (300.0, 400.0)
    ankle = rotate(knee, 100, shin_tilt)
    hip = rotate(knee, 100, shin_tilt + knee_angle)
    shoulder = (hip[0], hip[1] - 100)
    return {
        "left_knee": knee,
        "left_ankle": ankle,
        "left_hip": hip,
        "left_shoulder": shoulder,
    }


def squat_frame(knee_angle: float, back_lean: float = 0.0) -> KeypointFrame:
    points = leg_points(knee_angle)
    hip = points["left_hip"]
    rad = math.radians(back_lean)
    points["left_shoulder"] = (hip[0] + 100 * math.sin(rad), hip[1] - 100 * math.cos(rad))
    return make_frame(points)


def lunge_frame(knee_angle: float, shin_tilt: float = 0.0) -> KeypointFrame:
    return make_frame(leg_points(knee_angle, shin_tilt))


def arm_points(side: str, shoulder: Point, elbow_angle: float) -> Dict[str, Point]:
    """Upper arm hanging straight down from the shoulder, forearm at elbow_angle."""
    elbow = (shoulder[0], shoulder[1] + 80)
    rad = math.radians(elbow_angle)
    wrist = (elbow[0] + 80 * math.sin(rad), elbow[1] - 80 * math.cos(rad))
    return {
        f"{side}_shoulder": shoulder,
        f"{side}_elbow": elbow,
        f"{side}_wrist": wrist,
    }


def pushup_frame(elbow_angle: float, hip_drop: float = 0.0, nose: Optional[Point] = (170, 320)) -> KeypointFrame:
    """Horizontal body from shoulder (200, 300) to ankle (500, 300)."""
    points = arm_points("left", (200, 300), elbow_angle)
    points["left_hip"] = (350, 300 + hip_drop)
    points["left_ankle"] = (500, 300)
    if nose is not None:
        points["nose"] = nose
    return make_frame(points)


def standing_pushup_frame(elbow_angle: float) -> KeypointFrame:
    """Someone standing upright and bending their arm."""
    points = arm_points("left", (300, 200), elbow_angle)
    points["left_hip"] = (300, 350)
    points["left_ankle"] = (300, 500)
    points["nose"] = (300, 150)
    return make_frame(points)


def plank_frame(hip_drop: float = 0.0) -> KeypointFrame:
    return make_frame({
        "left_shoulder": (200, 300),
        "left_hip": (350, 300 + hip_drop),
        "left_ankle": (500, 300),
    })


def press_frame(elbow_angle: float) -> KeypointFrame:
    points = arm_points("left", (250, 300), elbow_angle)
    points.update(arm_points("right", (350, 300), elbow_angle))
    return make_frame(points)


def jack_frame(wrist_y: float, ankle_spread: float) -> KeypointFrame:
    return make_frame({
        "left_shoulder": (270, 300),
        "right_shoulder": (330, 300),
        "left_wrist": (250, wrist_y),
        "right_wrist": (350, wrist_y),
        "left_ankle": (300 - ankle_spread / 2, 600),
        "right_ankle": (300 + ankle_spread / 2, 600),
    })


def high_knee_frame(knee_y: float) -> KeypointFrame:
    return make_frame({"left_hip": (300, 400), "left_knee": (310, knee_y)})


def tree_frame(shoulder_shift: float = 0.0, hip_drop: float = 0.0) -> KeypointFrame:
    return make_frame({
        "left_hip": (280, 400),
        "right_hip": (320, 400 + hip_drop),
        "left_shoulder": (280 + shoulder_shift, 250),
        "right_shoulder": (320 + shoulder_shift, 250),
        "left_ankle": (290, 600),
        "right_ankle": (310, 600),
    })


def run(analyzer, frames, clock: Optional[ManualClock] = None, step: float = 0.1):
    """Feed frames in order and collect the results."""
    results = []
    for frame in frames:
        analyzer.update_keypoints(frame)
        results.append(analyzer.analyze())
        if clock is not None:
            clock.advance(step)
    return results


@pytest.fixture
def clock():
    return ManualClock()
