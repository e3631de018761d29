"""
Jordan Yells - Form Calibration Thresholds
All calibration values can be tuned without code changes by modifying this file.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class AngleTarget:
    """Ideal value and penalty slope for one scored feature"""
    ideal: float
    slope: float


@dataclass
class ExtractionConfig:
    """Keypoint to feature extraction settings"""
    # Body side read for every joint chain ("left" or "right")
    side: str = "left"
    # Release point sits this fraction of the forearm beyond the wrist
    release_offset: float = 0.1
    # Forearm / upper-arm length ratio treated as full extension
    ideal_follow_through_ratio: float = 0.8
    # Keypoints below this confidence count as not detected
    min_keypoint_confidence: float = 0.0


@dataclass
class ScoringConfig:
    """Per-feature penalty curves (sub-score = 100 - |value - ideal| * slope)"""
    shoulder: AngleTarget = AngleTarget(ideal=90.0, slope=2.0)
    elbow: AngleTarget = AngleTarget(ideal=90.0, slope=2.0)
    wrist: AngleTarget = AngleTarget(ideal=45.0, slope=3.0)
    knee: AngleTarget = AngleTarget(ideal=120.0, slope=1.5)
    alignment: AngleTarget = AngleTarget(ideal=0.0, slope=2.0)
    # A feature within this many degrees of its ideal is on target
    tolerance_deg: float = 10.0
    # (minimum score, grade), highest first
    grade_bands: Tuple[Tuple[float, str], ...] = (
        (90.0, "excellent"),
        (80.0, "good"),
        (70.0, "fair"),
        (60.0, "developing"),
    )
    default_grade: str = "needs_work"


@dataclass
class FeedbackConfig:
    """Rule thresholds for itemized feedback"""
    shoulder_range: Tuple[float, float] = (80.0, 100.0)
    elbow_range: Tuple[float, float] = (80.0, 100.0)
    knee_range: Tuple[float, float] = (100.0, 140.0)
    # Degrees of torso lean from vertical
    max_alignment: float = 15.0
    min_follow_through: float = 0.7
    # (minimum score, summary phrase), highest first
    summary_buckets: Tuple[Tuple[float, str], ...] = (
        (90.0, "Perfect form! MJ would be proud!"),
        (80.0, "Great technique! Keep it up!"),
        (70.0, "Good form, but let's refine it!"),
        (60.0, "Getting there! Focus on fundamentals."),
    )
    default_summary: str = "Let's work on the basics together!"
    great_form: str = "Great form!"
    short_separator: str = ", "


@dataclass
class AnalysisConfig:
    """Coordinator gating"""
    # Frames at or above this detection confidence are analyzed
    confidence_threshold: float = 0.5
    high_confidence: float = 0.8
    medium_confidence: float = 0.6


@dataclass
class ThresholdConfig:
    """Master threshold configuration"""
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)


# Global config instance - modify this to tune thresholds
THRESHOLDS = ThresholdConfig()


def get_thresholds() -> ThresholdConfig:
    """Get the current threshold configuration"""
    return THRESHOLDS

