"""
Basketball form analysis engine: keypoints in, score and coaching feedback out.
"""

from .keypoints import Joint, Keypoint, KeypointSet, Point2D, Side
from .pose_features import PoseFeatureExtractor, PoseFeatures
from .form_scorer import FeatureScore, FormScorer
from .feedback import CueType, Feedback, FeedbackCue, FeedbackGenerator
from .analyzer import AnalysisCoordinator, AnalysisOutcome, AnalysisResult, AnalysisStatus
from .shot_history import Shot, ShotHistory, ShotStats

__all__ = [
    "Joint", "Keypoint", "KeypointSet", "Point2D", "Side",
    "PoseFeatureExtractor", "PoseFeatures",
    "FeatureScore", "FormScorer",
    "CueType", "Feedback", "FeedbackCue", "FeedbackGenerator",
    "AnalysisCoordinator", "AnalysisOutcome", "AnalysisResult", "AnalysisStatus",
    "Shot", "ShotHistory", "ShotStats",
]
