"""
Routes analysis results to coaching outputs.

Three consumers sit downstream of the analyzer:
- voice: spoken prompts from a fixed bilingual vocabulary
- audio: short sound effects on reps and achievements
- overlay: joints and skeleton segments to highlight

Routing is keyed on feedback codes through CODE_PROMPTS. Message text is
display-only and never inspected here.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from formcoach.cv.analysis_result import AnalysisResult, BodyRegion, FeedbackCode
from formcoach.cv.clock import Clock, SystemClock
from formcoach.cv.keypoints import SKELETON_CONNECTIONS

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


class PromptKey(str, Enum):
    # Success
    REP_COMPLETE = "rep_complete"
    GOOD_DEPTH = "good_depth"
    PERFECT_FORM = "perfect_form"

    # Squat / lunge
    GO_DEEPER = "go_deeper"
    KEEP_BACK_STRAIGHT = "keep_back_straight"
    PUSH_HIPS_BACK = "push_hips_back"
    CHEST_UP = "chest_up"

    # Pushup / plank
    LOWER_CHEST = "lower_chest"
    LIFT_HIPS = "lift_hips"
    KEEP_BODY_STRAIGHT = "keep_body_straight"
    ELBOWS_CLOSER = "elbows_closer"

    # Motivation
    KEEP_GOING = "keep_going"
    ALMOST_THERE = "almost_there"
    YOU_DID_IT = "you_did_it"

    # General
    GET_READY = "get_ready"
    BODY_NOT_VISIBLE = "body_not_visible"


class SoundEffect(str, Enum):
    SUCCESS = "success"
    ACHIEVEMENT = "achievement"


VOICE_PROMPTS: Dict[PromptKey, Dict[str, str]] = {
    PromptKey.REP_COMPLETE: {"ar": "ممتاز! عدة كاملة", "en": "Excellent! Rep complete"},
    PromptKey.GOOD_DEPTH: {"ar": "عمق ممتاز", "en": "Good depth"},
    PromptKey.PERFECT_FORM: {"ar": "حركة مثالية", "en": "Perfect form"},
    PromptKey.GO_DEEPER: {"ar": "انزل أعمق قليلاً", "en": "Go a little deeper"},
    PromptKey.KEEP_BACK_STRAIGHT: {"ar": "حافظ على استقامة ظهرك", "en": "Keep your back straight"},
    PromptKey.PUSH_HIPS_BACK: {"ar": "أرجع وركيك للخلف", "en": "Push your hips back"},
    PromptKey.CHEST_UP: {"ar": "ارفع صدرك", "en": "Chest up"},
    PromptKey.LOWER_CHEST: {"ar": "أنزل صدرك أكثر", "en": "Lower your chest"},
    PromptKey.LIFT_HIPS: {"ar": "ارفع وركيك", "en": "Lift your hips"},
    PromptKey.KEEP_BODY_STRAIGHT: {"ar": "حافظ على استقامة جسمك", "en": "Keep your body straight"},
    PromptKey.ELBOWS_CLOSER: {"ar": "قرّب مرفقيك من جسمك", "en": "Bring your elbows closer"},
    PromptKey.KEEP_GOING: {"ar": "واصل! أنت تبذل جهداً رائعاً", "en": "Keep going! You are doing great"},
    PromptKey.ALMOST_THERE: {"ar": "تقريباً وصلت", "en": "Almost there"},
    PromptKey.YOU_DID_IT: {"ar": "أحسنت! لقد فعلتها", "en": "You did it!"},
    PromptKey.GET_READY: {"ar": "استعد", "en": "Get ready"},
    PromptKey.BODY_NOT_VISIBLE: {"ar": "تأكد من ظهور جسمك بالكامل", "en": "Make sure your full body is visible"},
}

# Corrective prompts per problem code. Codes without an entry are shown
# on screen but not spoken.
CODE_PROMPTS: Dict[str, PromptKey] = {
    FeedbackCode.BODY_NOT_VISIBLE: PromptKey.BODY_NOT_VISIBLE,
    FeedbackCode.INVALID_POSTURE: PromptKey.GET_READY,
    FeedbackCode.POOR_DEPTH: PromptKey.GO_DEEPER,
    FeedbackCode.CHEST_TOO_HIGH: PromptKey.LOWER_CHEST,
    FeedbackCode.INCOMPLETE_LOCKOUT: PromptKey.ALMOST_THERE,
    FeedbackCode.BAD_BACK: PromptKey.KEEP_BACK_STRAIGHT,
    FeedbackCode.HIP_SAG: PromptKey.LIFT_HIPS,
    FeedbackCode.HIPS_HIGH: PromptKey.KEEP_BODY_STRAIGHT,
    FeedbackCode.ELBOW_FLARE: PromptKey.ELBOWS_CLOSER,
    FeedbackCode.KNEE_OVER_TOE: PromptKey.PUSH_HIPS_BACK,
    FeedbackCode.UNSTABLE: PromptKey.KEEP_BODY_STRAIGHT,
}

REGION_JOINTS: Dict[BodyRegion, FrozenSet[str]] = {
    BodyRegion.HIPS: frozenset({"left_hip", "right_hip"}),
    BodyRegion.ELBOWS: frozenset({"left_elbow", "right_elbow"}),
    BodyRegion.SHOULDERS: frozenset({"left_shoulder", "right_shoulder"}),
    BodyRegion.BACK: frozenset({"left_shoulder", "right_shoulder", "left_hip", "right_hip"}),
    BodyRegion.HEAD: frozenset({"nose", "left_eye", "right_eye", "left_ear", "right_ear"}),
    BodyRegion.NONE: frozenset(),
}

# Torso and thigh joints recolored when the hips break the body line
BODY_LINE_JOINTS = frozenset({
    "left_shoulder", "right_shoulder",
    "left_hip", "right_hip",
    "left_knee", "right_knee",
})
BODY_LINE_CODES = frozenset({FeedbackCode.HIP_SAG, FeedbackCode.HIPS_HIGH})


def text_for(key: PromptKey, language: str = DEFAULT_LANGUAGE) -> str:
    """Prompt text in `language`, English when the language is unknown."""
    texts = VOICE_PROMPTS[PromptKey(key)]
    return texts.get(language, texts[DEFAULT_LANGUAGE])


@dataclass(frozen=True)
class SegmentHighlight:
    start: str
    end: str
    style: str  # "error" or "focus"


@dataclass
class RoutedFeedback:
    """Everything the voice, audio and overlay consumers need for one frame."""
    prompts: List[PromptKey] = field(default_factory=list)
    speech: List[str] = field(default_factory=list)
    sounds: List[SoundEffect] = field(default_factory=list)
    highlight_joints: FrozenSet[str] = frozenset()
    segments: List[SegmentHighlight] = field(default_factory=list)
    rep_completed: bool = False


class FeedbackRouter:
    """
    Turns a stream of AnalysisResults into prompts, sounds and highlights.

    Keeps only the previous reps/state and per-prompt cooldowns. Corrective
    prompts repeat at most once per cooldown; rep, depth and achievement
    prompts are event-driven and always fire.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        cooldown_seconds: float = 3.0,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.clock = clock or SystemClock()
        self.cooldown_seconds = cooldown_seconds
        self.language = language
        self.reset()

    def reset(self):
        self._previous_reps: int = 0
        self._previous_state: Optional[str] = None
        self._last_spoken: Dict[PromptKey, float] = {}
        self._target_announced = False

    def route(self, result: AnalysisResult) -> RoutedFeedback:
        routed = RoutedFeedback()
        now = self.clock.now()

        # Hold exercises report whole seconds as reps; only counted reps get a cue
        counted = result.hold_seconds is None
        if counted and result.reps > self._previous_reps:
            routed.rep_completed = True
            routed.sounds.append(SoundEffect.SUCCESS)
            self._add_prompt(routed, PromptKey.REP_COMPLETE, now)

        if result.state != self._previous_state and result.has_code(FeedbackCode.GOOD_DEPTH):
            self._add_prompt(routed, PromptKey.GOOD_DEPTH, now)

        for item in result.feedback:
            if not item.is_problem or item.code is None:
                continue
            key = CODE_PROMPTS.get(item.code)
            if key is None or key in routed.prompts:
                continue
            last = self._last_spoken.get(key)
            if last is not None and now - last < self.cooldown_seconds:
                continue
            self._add_prompt(routed, key, now)

        if result.hold_seconds is not None:
            if result.progress is not None and result.progress >= 1.0:
                if not self._target_announced:
                    self._target_announced = True
                    routed.sounds.append(SoundEffect.ACHIEVEMENT)
                    self._add_prompt(routed, PromptKey.YOU_DID_IT, now)
            elif not result.hold_seconds:
                self._target_announced = False

        routed.highlight_joints = result.highlight_joints
        routed.segments = self._segments(result)

        if routed.prompts:
            logger.debug(f"Prompts: {[p.value for p in routed.prompts]}")

        self._previous_reps = result.reps
        self._previous_state = result.state
        return routed

    def _add_prompt(self, routed: RoutedFeedback, key: PromptKey, now: float):
        routed.prompts.append(key)
        routed.speech.append(text_for(key, self.language))
        self._last_spoken[key] = now

    def _segments(self, result: AnalysisResult) -> List[SegmentHighlight]:
        body_line_broken = bool(result.error_codes & BODY_LINE_CODES)
        focus_joints = REGION_JOINTS[result.focus_body_region]

        segments = []
        for start, end in SKELETON_CONNECTIONS:
            if body_line_broken and start in BODY_LINE_JOINTS and end in BODY_LINE_JOINTS:
                segments.append(SegmentHighlight(start, end, "error"))
            elif start in focus_joints or end in focus_joints:
                segments.append(SegmentHighlight(start, end, "focus"))
        return segments
