import numpy as np

from conftest import make_frame, run, squat_frame, leg_points
from formcoach.cv.analysis_result import BodyRegion, FeedbackCode, Severity
from formcoach.cv.exercises import SquatAnalyzer

SCENARIO = [170, 170, 140, 95, 95, 130, 170, 170]


def test_squat_scenario_counts_one_rep_on_return_to_standing():
    analyzer = SquatAnalyzer()
    results = run(analyzer, [squat_frame(a) for a in SCENARIO])

    assert [r.reps for r in results] == [0, 0, 0, 0, 0, 0, 1, 1]
    assert [r.state for r in results] == [
        "standing", "standing", "descending", "bottom",
        "bottom", "ascending", "standing", "standing",
    ]
    assert results[6].has_code(FeedbackCode.REP_COMPLETE)


def test_squat_praises_depth_while_at_or_below_100():
    results = run(SquatAnalyzer(), [squat_frame(a) for a in SCENARIO])

    for angle, result in zip(SCENARIO, results):
        if result.has_code(FeedbackCode.GOOD_DEPTH):
            assert angle <= 100
    depth = [item for item in results[3].feedback if item.code == FeedbackCode.GOOD_DEPTH]
    assert depth and depth[0].severity == Severity.SUCCESS
    assert results[3].is_correct


def test_squat_excellent_depth_below_75():
    results = run(SquatAnalyzer(), [squat_frame(a) for a in (170, 140, 70)])
    depth = [item for item in results[-1].feedback if item.code == FeedbackCode.GOOD_DEPTH]
    assert depth[0].message.startswith("Excellent")


def test_squat_shallow_rep_is_aborted_with_poor_depth():
    results = run(SquatAnalyzer(), [squat_frame(a) for a in (170, 140, 120, 170)])

    assert results[-1].reps == 0
    assert results[-1].state == "standing"
    assert FeedbackCode.POOR_DEPTH in results[-1].error_codes
    assert results[-1].focus_body_region == BodyRegion.HIPS
    assert not results[-1].is_correct


def test_squat_requires_start_position_before_counting():
    # Session starts at the bottom of a squat
    results = run(SquatAnalyzer(), [squat_frame(a) for a in (90, 90, 130, 170)])
    assert results[-1].reps == 0
    assert not any(r.has_code(FeedbackCode.REP_COMPLETE) for r in results)


def test_squat_back_lean_is_flagged_and_focused():
    analyzer = SquatAnalyzer()
    result = run(analyzer, [squat_frame(120, back_lean=60)])[0]

    assert FeedbackCode.BAD_BACK in result.error_codes
    assert result.focus_body_region == BodyRegion.BACK
    assert {"left_shoulder", "left_hip"} <= result.highlight_joints


def test_squat_upright_back_is_not_flagged():
    result = run(SquatAnalyzer(), [squat_frame(120, back_lean=20)])[0]
    assert FeedbackCode.BAD_BACK not in result.error_codes


def test_squat_missing_joint_freezes_state():
    analyzer = SquatAnalyzer()
    run(analyzer, [squat_frame(a) for a in (170, 140, 95)])
    assert analyzer.state == "bottom"

    points = leg_points(170)
    result = run(analyzer, [make_frame(points, left_knee=0.0)])[0]

    assert analyzer.state == "bottom"
    assert result.reps == 0
    assert result.state == "bottom"
    assert not result.is_correct
    assert FeedbackCode.BODY_NOT_VISIBLE in result.error_codes
    assert "left_knee" in result.highlight_joints


def test_squat_uses_stricter_confidence_floor():
    # 0.4 is enough for most exercises but not for squat
    result = run(SquatAnalyzer(), [make_frame(leg_points(170), score=0.4)])[0]
    assert FeedbackCode.BODY_NOT_VISIBLE in result.error_codes


def test_squat_progress_tracks_depth():
    results = run(SquatAnalyzer(), [squat_frame(a) for a in (170, 130, 90)])
    assert results[0].progress == 0.0
    assert 0.0 < results[1].progress < 1.0
    assert results[2].progress == 1.0


def test_squat_reset_clears_reps():
    analyzer = SquatAnalyzer()
    run(analyzer, [squat_frame(a) for a in SCENARIO])
    assert analyzer.reps == 1

    analyzer.reset()
    assert analyzer.reps == 0
    assert analyzer.state == "standing"
    assert not analyzer.analyzer_state.armed


def test_reps_are_monotonic_and_follow_full_cycles():
    rng = np.random.default_rng(7)
    analyzer = SquatAnalyzer()
    previous_reps = 0
    visited = []

    for angle in rng.uniform(60, 180, size=500):
        result = run(analyzer, [squat_frame(float(angle))])[0]
        visited.append(result.state)
        assert result.reps >= previous_reps
        if result.reps > previous_reps:
            assert result.reps == previous_reps + 1
            # descending, bottom and ascending all seen, in order, since the last rep
            order = [s for s in visited if s in ("descending", "bottom", "ascending")]
            assert "descending" in order
            first_bottom = order.index("bottom", order.index("descending"))
            assert "ascending" in order[first_bottom:]
            visited = []
        previous_reps = result.reps


def test_squat_reaching_depth_in_one_frame_is_not_poor_depth():
    # Low frame rate: standing, already at the bottom, standing again
    results = run(SquatAnalyzer(), [squat_frame(a) for a in (170, 90, 170)])
    assert results[1].state == "descending"
    assert results[-1].state == "standing"
    assert results[-1].reps == 0
    assert FeedbackCode.POOR_DEPTH not in results[-1].error_codes
