import pytest

from conftest import (
    STANDING_POSE,
    high_knee_frame,
    jack_frame,
    lunge_frame,
    make_frame,
    press_frame,
    run,
)
from formcoach.cv.analysis_result import BodyRegion, FeedbackCode
from formcoach.cv.clock import ManualClock
from formcoach.cv.exercise_analyzer import ANALYZERS
from formcoach.cv.exercises import (
    HighKneeAnalyzer,
    JumpingJackAnalyzer,
    LungeAnalyzer,
    OverheadPressAnalyzer,
)

CLOSED = dict(wrist_y=450, ankle_spread=20)
OPEN = dict(wrist_y=200, ankle_spread=200)
HALF = dict(wrist_y=280, ankle_spread=90)


def test_lunge_counts_rep_and_praises_balance():
    results = run(LungeAnalyzer(), [lunge_frame(a) for a in (170, 130, 90, 130, 170)])
    assert [r.reps for r in results] == [0, 0, 0, 0, 1]
    assert results[2].state == "bottom"
    assert results[2].has_code(FeedbackCode.BALANCED)


def test_lunge_knee_over_toe():
    results = run(LungeAnalyzer(), [lunge_frame(a, shin_tilt=40) for a in (170, 130, 90)])
    assert FeedbackCode.KNEE_OVER_TOE in results[-1].error_codes
    assert results[-1].focus_body_region == BodyRegion.HIPS
    assert "left_knee" in results[-1].highlight_joints


def test_lunge_shallow_rep_is_poor_depth():
    results = run(LungeAnalyzer(), [lunge_frame(a) for a in (170, 130, 170)])
    assert results[-1].reps == 0
    assert FeedbackCode.POOR_DEPTH in results[-1].error_codes


def test_jumping_jack_full_cycle():
    frames = [jack_frame(**p) for p in (CLOSED, OPEN, OPEN, CLOSED, CLOSED)]
    results = run(JumpingJackAnalyzer(), frames)
    assert [r.state for r in results] == ["closed", "opening", "open", "closing", "closed"]
    assert [r.reps for r in results] == [0, 0, 0, 0, 1]


def test_jumping_jack_hysteresis_gap_holds_state():
    frames = [jack_frame(**p) for p in (CLOSED, OPEN, OPEN, HALF, HALF, HALF)]
    results = run(JumpingJackAnalyzer(), frames)
    assert results[-1].state == "closing"
    assert results[-1].reps == 0


def test_jumping_jack_partial_is_incomplete():
    frames = [jack_frame(**p) for p in (CLOSED, HALF, CLOSED)]
    results = run(JumpingJackAnalyzer(), frames)
    assert results[-1].reps == 0
    assert FeedbackCode.INCOMPLETE_JACK in results[-1].error_codes


def test_jumping_jack_needs_start_position_first():
    frames = [jack_frame(**p) for p in (OPEN, OPEN, CLOSED, CLOSED)]
    results = run(JumpingJackAnalyzer(), frames)
    assert all(r.reps == 0 for r in results)
    assert all(r.state == "closed" for r in results)


def test_high_knees_counts_each_lift():
    frames = [high_knee_frame(y) for y in (480, 350, 350, 480, 480, 350, 350, 480, 480)]
    results = run(HighKneeAnalyzer(), frames)
    assert results[-1].reps == 2
    assert results[1].state == "lifting"
    assert results[2].state == "up"


def test_high_knees_single_frame_lift_is_not_knee_too_low():
    results = run(HighKneeAnalyzer(), [high_knee_frame(y) for y in (480, 350, 480, 480)])
    assert [r.state for r in results] == ["down", "lifting", "down", "down"]
    assert all(FeedbackCode.KNEE_TOO_LOW not in r.error_codes for r in results)
    assert results[-1].reps == 0


def test_overhead_press_counts_on_return_to_rack():
    results = run(OverheadPressAnalyzer(), [press_frame(a) for a in (80, 120, 170, 170, 120, 80)])
    assert [r.state for r in results] == [
        "waiting", "pressing", "lockout", "lockout", "lowering", "waiting",
    ]
    assert [r.reps for r in results] == [0, 0, 0, 0, 0, 1]


def test_overhead_press_mid_range_is_coaching_only():
    results = run(OverheadPressAnalyzer(), [press_frame(a) for a in (80, 120)])
    assert results[-1].next_instruction == "Press all the way up"
    assert results[-1].is_correct


def test_overhead_press_short_press_is_incomplete_lockout():
    results = run(OverheadPressAnalyzer(), [press_frame(a) for a in (80, 140, 80)])
    assert results[-1].reps == 0
    assert FeedbackCode.INCOMPLETE_LOCKOUT in results[-1].error_codes
    assert results[-1].focus_body_region == BodyRegion.ELBOWS


@pytest.mark.parametrize("analyzer_cls", list(ANALYZERS.values()))
def test_absent_required_joint_never_changes_reps_or_state(analyzer_cls):
    analyzer = analyzer_cls(clock=ManualClock())
    run(analyzer, [make_frame(STANDING_POSE)] * 3)
    reps, state = analyzer.reps, analyzer.state

    joint = analyzer_cls.REQUIRED_JOINTS[0]
    result = run(analyzer, [make_frame(STANDING_POSE, **{joint: 0.0})])[0]

    assert analyzer.reps == reps
    assert analyzer.state == state
    assert result.reps == reps
    assert result.state == state
    assert not result.is_correct
    assert result.feedback
    assert joint in result.highlight_joints
