"""One analyzer per exercise, all sharing the ExerciseAnalyzer interface."""

from formcoach.cv.exercises.base import AnalyzerState, ExerciseAnalyzer, RepCycleAnalyzer, Zone
from formcoach.cv.exercises.high_knees import HighKneeAnalyzer
from formcoach.cv.exercises.jumping_jack import JumpingJackAnalyzer
from formcoach.cv.exercises.lunge import LungeAnalyzer
from formcoach.cv.exercises.overhead_press import OverheadPressAnalyzer
from formcoach.cv.exercises.plank import PlankAnalyzer
from formcoach.cv.exercises.pushup import PushupAnalyzer
from formcoach.cv.exercises.squat import SquatAnalyzer
from formcoach.cv.exercises.tree_pose import TreePoseAnalyzer

__all__ = [
    "AnalyzerState",
    "ExerciseAnalyzer",
    "RepCycleAnalyzer",
    "Zone",
    "SquatAnalyzer",
    "PushupAnalyzer",
    "LungeAnalyzer",
    "PlankAnalyzer",
    "JumpingJackAnalyzer",
    "HighKneeAnalyzer",
    "OverheadPressAnalyzer",
    "TreePoseAnalyzer",
]
