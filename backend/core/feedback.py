"""
Feedback Generation Module
Rule-based coaching cues from PoseFeatures and the overall score.

Each triggered rule produces one FeedbackCue carrying both its short phrase and
its detailed message, so the one-line and itemized views come from the same pass.
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple
from dataclasses import dataclass, field

from config import get_thresholds
from .pose_features import PoseFeatures

logger = logging.getLogger(__name__)


class CueType(str, Enum):
    SHOULDERS = "shoulders"
    ELBOW = "elbow"
    KNEES = "knees"
    ALIGNMENT = "alignment"
    FOLLOW_THROUGH = "follow_through"


@dataclass(frozen=True)
class FeedbackCue:
    """One triggered form rule"""
    cue_type: CueType
    short: str
    detail: str
    value: float


@dataclass(frozen=True)
class Feedback:
    """All feedback views for one analysis"""
    summary: str
    detailed: Tuple[str, ...]
    short: str
    cues: Tuple[FeedbackCue, ...] = field(default_factory=tuple)


DETAIL_MESSAGES = {
    CueType.SHOULDERS: "Shoulders: Keep them level and relaxed",
    CueType.ELBOW: "Elbow: Form a 90° angle with your arm",
    CueType.KNEES: "Knees: Bend them for power and balance",
    CueType.ALIGNMENT: "Alignment: Keep your body straight",
    CueType.FOLLOW_THROUGH: "Follow-through: Extend your arm fully",
}


def _range_phrase(value: float, bounds: Tuple[float, float], low: str, high: str) -> Optional[str]:
    lower, upper = bounds
    if value < lower:
        return low
    if value > upper:
        return high
    return None


class FeedbackGenerator:
    """Deterministic text feedback; holds no per-call state."""

    def __init__(self):
        self._thresholds = get_thresholds()

    def evaluate(self, features: PoseFeatures) -> List[FeedbackCue]:
        """
        Run every rule in fixed order: shoulders, elbow, knees, alignment, follow-through.
        """
        cfg = self._thresholds.feedback
        cues: List[FeedbackCue] = []

        def emit(cue_type: CueType, short: Optional[str], value: float):
            if short:
                cues.append(FeedbackCue(cue_type, short, DETAIL_MESSAGES[cue_type], value))

        emit(CueType.SHOULDERS,
             _range_phrase(features.shoulder_angle, cfg.shoulder_range,
                           "Shoulders too low", "Shoulders too high"),
             features.shoulder_angle)
        emit(CueType.ELBOW,
             _range_phrase(features.elbow_angle, cfg.elbow_range,
                           "Elbow too tight", "Elbow too wide"),
             features.elbow_angle)
        # Larger knee angle = straighter leg
        emit(CueType.KNEES,
             _range_phrase(features.knee_angle, cfg.knee_range,
                           "Too much knee bend", "Bend knees more"),
             features.knee_angle)
        if features.body_alignment > cfg.max_alignment:
            emit(CueType.ALIGNMENT, "Stay aligned", features.body_alignment)
        if features.follow_through < cfg.min_follow_through:
            emit(CueType.FOLLOW_THROUGH, "Follow through!", features.follow_through)

        return cues

    def summary(self, overall_score: float) -> str:
        """Encouraging one-liner for the score bucket, highest bucket first"""
        cfg = self._thresholds.feedback
        for minimum, phrase in cfg.summary_buckets:
            if overall_score >= minimum:
                return phrase
        return cfg.default_summary

    def itemized(self, cues: List[FeedbackCue]) -> List[str]:
        if not cues:
            return [self._thresholds.feedback.great_form]
        return [c.detail for c in cues]

    def short(self, cues: List[FeedbackCue]) -> str:
        cfg = self._thresholds.feedback
        if not cues:
            return cfg.great_form
        return cfg.short_separator.join(c.short for c in cues)

    def generate(self, features: PoseFeatures, overall_score: float) -> Feedback:
        cues = self.evaluate(features)
        if cues:
            logger.debug(f"Form cues: {[c.cue_type.value for c in cues]}")
        return Feedback(
            summary=self.summary(overall_score),
            detailed=tuple(self.itemized(cues)),
            short=self.short(cues),
            cues=tuple(cues),
        )
