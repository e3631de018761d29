"""
Analysis Coordinator
Single-flight gate in front of the extract -> score -> feedback pipeline.

Frames that arrive while an analysis is running are dropped, not queued: each
frame is assessed on its own, so skipping one loses nothing.
"""

import logging
import threading
from enum import Enum
from typing import Dict, Optional, Tuple
from dataclasses import dataclass, asdict

from config import get_thresholds
from .keypoints import KeypointSet
from .pose_features import PoseFeatureExtractor, PoseFeatures
from .form_scorer import FeatureScore, FormScorer
from .feedback import FeedbackGenerator

logger = logging.getLogger(__name__)


class AnalysisStatus(str, Enum):
    COMPLETED = "completed"
    BUSY = "busy"
    LOW_CONFIDENCE = "low_confidence"
    INSUFFICIENT_KEYPOINTS = "insufficient_keypoints"


@dataclass(frozen=True)
class AnalysisResult:
    """Read-only assessment handed to display, history and voice collaborators"""
    features: PoseFeatures
    overall_score: float
    summary_feedback: str
    detailed_feedback: Tuple[str, ...]
    short_feedback: str
    grade: str
    confidence: float
    confidence_level: str
    feature_scores: Tuple[FeatureScore, ...] = ()

    def to_dict(self) -> Dict:
        """Convert to API response format"""
        return {
            "features": self.features.to_dict(),
            "overall_score": round(self.overall_score, 1),
            "summary_feedback": self.summary_feedback,
            "detailed_feedback": list(self.detailed_feedback),
            "short_feedback": self.short_feedback,
            "grade": self.grade,
            "confidence": round(self.confidence, 3),
            "confidence_level": self.confidence_level,
            "feature_scores": [asdict(s) for s in self.feature_scores],
        }


@dataclass(frozen=True)
class AnalysisOutcome:
    status: AnalysisStatus
    result: Optional[AnalysisResult] = None

    @property
    def completed(self) -> bool:
        return self.status is AnalysisStatus.COMPLETED


class AnalysisCoordinator:
    """
    Runs at most one analysis at a time.
    A caller that loses the race gets BUSY immediately instead of blocking.
    """

    def __init__(
        self,
        extractor: Optional[PoseFeatureExtractor] = None,
        scorer: Optional[FormScorer] = None,
        feedback: Optional[FeedbackGenerator] = None,
        confidence_threshold: Optional[float] = None,
    ):
        self._thresholds = get_thresholds()
        self.extractor = extractor or PoseFeatureExtractor()
        self.scorer = scorer or FormScorer()
        self.feedback = feedback or FeedbackGenerator()
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None
            else self._thresholds.analysis.confidence_threshold
        )
        self._in_flight = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self._in_flight.locked()

    def confidence_level(self, confidence: float) -> str:
        cfg = self._thresholds.analysis
        if confidence >= cfg.high_confidence:
            return "high"
        if confidence >= cfg.medium_confidence:
            return "medium"
        return "low"

    def evaluate(self, keypoints: KeypointSet, confidence: Optional[float] = None) -> AnalysisOutcome:
        """
        Analyze one frame and report how it went.

        Args:
            keypoints: Keypoints for the frame
            confidence: Detection confidence; defaults to keypoints.confidence

        Returns:
            AnalysisOutcome with a result only when status is COMPLETED
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Analysis already in flight, dropping frame")
            return AnalysisOutcome(AnalysisStatus.BUSY)

        try:
            if confidence is None:
                confidence = keypoints.confidence

            if confidence < self.confidence_threshold:
                logger.debug(f"Confidence {confidence:.2f} below {self.confidence_threshold}, skipping")
                return AnalysisOutcome(AnalysisStatus.LOW_CONFIDENCE)

            features = self.extractor.extract(keypoints)
            if features is None:
                return AnalysisOutcome(AnalysisStatus.INSUFFICIENT_KEYPOINTS)

            breakdown = self.scorer.breakdown(features)
            overall = self.scorer.score(features, breakdown)
            feedback = self.feedback.generate(features, overall)

            result = AnalysisResult(
                features=features,
                overall_score=overall,
                summary_feedback=feedback.summary,
                detailed_feedback=feedback.detailed,
                short_feedback=feedback.short,
                grade=self.scorer.grade(overall),
                confidence=confidence,
                confidence_level=self.confidence_level(confidence),
                feature_scores=tuple(breakdown),
            )
            logger.info(
                f"Form analysis complete: score {overall:.1f}",
                extra={"overall_score": round(overall, 1), "cues": len(feedback.cues)}
            )
            return AnalysisOutcome(AnalysisStatus.COMPLETED, result)
        finally:
            self._in_flight.release()

    def analyze(self, keypoints: KeypointSet, confidence: Optional[float] = None) -> Optional[AnalysisResult]:
        """Analyze one frame; None when busy, low confidence or joints missing"""
        return self.evaluate(keypoints, confidence).result
