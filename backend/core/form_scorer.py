"""
Form Scoring Module
Turns PoseFeatures into per-feature sub-scores and one 0-100 form score.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass

from config import AngleTarget, get_thresholds
from .pose_features import PoseFeatures


@dataclass(frozen=True)
class FeatureScore:
    """Sub-score for one feature"""
    name: str
    value: float
    ideal: float
    score: float
    on_target: bool


def penalty_score(value: float, target: AngleTarget) -> float:
    """100 minus the slope-weighted distance from ideal, floored at 0"""
    return max(0.0, 100.0 - abs(value - target.ideal) * target.slope)


class FormScorer:
    """Equal-weight mean of five angle penalty curves and follow-through."""

    def __init__(self):
        self._thresholds = get_thresholds()

    def _targets(self) -> Dict[str, AngleTarget]:
        cfg = self._thresholds.scoring
        return {
            "shoulder_angle": cfg.shoulder,
            "elbow_angle": cfg.elbow,
            "wrist_angle": cfg.wrist,
            "knee_angle": cfg.knee,
            "body_alignment": cfg.alignment,
        }

    def breakdown(self, features: PoseFeatures) -> List[FeatureScore]:
        """Sub-scores in a fixed order, follow-through last"""
        tolerance = self._thresholds.scoring.tolerance_deg
        scores = []
        for name, target in self._targets().items():
            value = getattr(features, name)
            scores.append(FeatureScore(
                name=name,
                value=value,
                ideal=target.ideal,
                score=penalty_score(value, target),
                on_target=abs(value - target.ideal) < tolerance,
            ))

        # Already normalized, contributes linearly
        scores.append(FeatureScore(
            name="follow_through",
            value=features.follow_through,
            ideal=1.0,
            score=max(0.0, features.follow_through * 100.0),
            on_target=features.follow_through >= self._thresholds.feedback.min_follow_through,
        ))
        return scores

    def score(self, features: PoseFeatures, breakdown: Optional[List[FeatureScore]] = None) -> float:
        """Overall form score clamped to [0, 100]"""
        parts = breakdown if breakdown is not None else self.breakdown(features)
        mean = sum(p.score for p in parts) / len(parts)
        return max(0.0, min(100.0, mean))

    def grade(self, overall_score: float) -> str:
        """Display band for a score (excellent, good, fair, developing, needs_work)"""
        cfg = self._thresholds.scoring
        for minimum, grade in cfg.grade_bands:
            if overall_score >= minimum:
                return grade
        return cfg.default_grade
