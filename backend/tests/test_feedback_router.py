from formcoach.cv.analysis_result import (
    AnalysisResult,
    BodyRegion,
    FeedbackCode,
    FeedbackItem,
    Severity,
)
from formcoach.cv.feedback_router import (
    CODE_PROMPTS,
    VOICE_PROMPTS,
    FeedbackRouter,
    PromptKey,
    SoundEffect,
    text_for,
)


def problem(code, severity=Severity.WARNING, message="display text", joints=()):
    return FeedbackItem(severity=severity, message=message, highlight_joints=frozenset(joints), code=code)


def result(reps=0, state="standing", feedback=(), **kwargs):
    return AnalysisResult(reps=reps, state=state, feedback=tuple(feedback), **kwargs)


def test_every_prompt_has_both_languages():
    assert set(VOICE_PROMPTS) == set(PromptKey)
    for texts in VOICE_PROMPTS.values():
        assert texts["en"] and texts["ar"]


def test_every_code_prompt_is_a_problem_code():
    assert set(CODE_PROMPTS) <= set(FeedbackCode.problems())


def test_text_for_languages():
    assert text_for(PromptKey.GOOD_DEPTH, "en") == "Good depth"
    assert text_for(PromptKey.GOOD_DEPTH, "ar") == "عمق ممتاز"
    assert text_for(PromptKey.GOOD_DEPTH, "fr") == "Good depth"


def test_rep_increment_plays_success_and_prompt(clock):
    router = FeedbackRouter(clock=clock)
    router.route(result(reps=0))
    routed = router.route(result(reps=1))

    assert routed.rep_completed
    assert SoundEffect.SUCCESS in routed.sounds
    assert PromptKey.REP_COMPLETE in routed.prompts
    assert "Excellent! Rep complete" in routed.speech

    again = router.route(result(reps=1))
    assert not again.rep_completed
    assert again.sounds == []


def test_prompts_keyed_by_code_not_message(clock):
    router = FeedbackRouter(clock=clock)
    routed = router.route(result(feedback=[problem(FeedbackCode.HIP_SAG, message="anything at all")]))
    assert routed.prompts == [PromptKey.LIFT_HIPS]

    router.reset()
    routed = router.route(result(feedback=[problem(None, message="keep your back straight")]))
    assert routed.prompts == []


def test_corrective_prompt_cooldown(clock):
    router = FeedbackRouter(clock=clock, cooldown_seconds=3.0)
    frame = result(feedback=[problem(FeedbackCode.BAD_BACK, Severity.ERROR)])

    assert router.route(frame).prompts == [PromptKey.KEEP_BACK_STRAIGHT]
    clock.advance(1.0)
    assert router.route(frame).prompts == []
    clock.advance(2.5)
    assert router.route(frame).prompts == [PromptKey.KEEP_BACK_STRAIGHT]


def test_good_depth_only_on_state_change(clock):
    router = FeedbackRouter(clock=clock)
    depth = FeedbackItem(Severity.SUCCESS, "Good depth", code=FeedbackCode.GOOD_DEPTH)

    router.route(result(state="descending"))
    assert PromptKey.GOOD_DEPTH in router.route(result(state="bottom", feedback=[depth])).prompts
    assert PromptKey.GOOD_DEPTH not in router.route(result(state="bottom", feedback=[depth])).prompts


def test_hold_target_announced_once_per_hold(clock):
    router = FeedbackRouter(clock=clock)

    def hold(seconds, progress):
        return result(state="holding", hold_seconds=seconds, progress=progress, reps=int(seconds))

    assert router.route(hold(29.0, 0.97)).sounds == []
    first = router.route(hold(30.0, 1.0))
    assert first.sounds == [SoundEffect.ACHIEVEMENT]
    assert PromptKey.YOU_DID_IT in first.prompts
    assert router.route(hold(31.0, 1.0)).sounds == []

    router.route(result(state="bad_form", hold_seconds=0.0, progress=0.0, reps=31))
    assert router.route(hold(30.0, 1.0)).sounds == [SoundEffect.ACHIEVEMENT]


def test_hold_seconds_do_not_trigger_rep_cue(clock):
    router = FeedbackRouter(clock=clock)
    router.route(result(state="holding", hold_seconds=0.5, progress=0.01, reps=0))
    routed = router.route(result(state="holding", hold_seconds=1.0, progress=0.02, reps=1))
    assert not routed.rep_completed
    assert PromptKey.REP_COMPLETE not in routed.prompts


def test_hip_errors_recolor_body_line_segments(clock):
    router = FeedbackRouter(clock=clock)
    routed = router.route(result(
        feedback=[problem(FeedbackCode.HIP_SAG, Severity.ERROR, joints=["left_hip"])],
        focus_body_region=BodyRegion.HIPS,
    ))

    errors = {(s.start, s.end) for s in routed.segments if s.style == "error"}
    assert ("left_shoulder", "left_hip") in errors
    assert ("left_hip", "left_knee") in errors
    assert ("left_knee", "left_ankle") not in errors
    assert routed.highlight_joints == frozenset({"left_hip"})


def test_focus_region_segments(clock):
    router = FeedbackRouter(clock=clock)
    routed = router.route(result(focus_body_region=BodyRegion.ELBOWS))
    focus = {(s.start, s.end) for s in routed.segments}
    assert all(s.style == "focus" for s in routed.segments)
    assert focus == {
        ("left_shoulder", "left_elbow"),
        ("left_elbow", "left_wrist"),
        ("right_shoulder", "right_elbow"),
        ("right_elbow", "right_wrist"),
    }


def test_arabic_speech(clock):
    router = FeedbackRouter(clock=clock, language="ar")
    routed = router.route(result(feedback=[problem(FeedbackCode.BODY_NOT_VISIBLE)]))
    assert routed.speech == ["تأكد من ظهور جسمك بالكامل"]
