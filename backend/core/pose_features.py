"""
Pose Feature Extraction
Maps one frame's keypoints to the basketball shooting feature set.
"""

import math
import logging
from typing import Dict, Optional, Tuple
from dataclasses import dataclass, asdict

from config import get_thresholds
from .geometry import VERTICAL, angle, angle_between, distance
from .keypoints import ARM_AND_LEG_PARTS, Joint, KeypointSet, Point2D, Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoseFeatures:
    """Shooting-form features for a single frame (angles in degrees)"""
    shoulder_angle: float
    elbow_angle: float
    wrist_angle: float
    knee_angle: float
    ankle_angle: float
    body_alignment: float  # Deviation from vertical, 0 = upright
    release_point: Optional[Point2D]
    follow_through: float  # 0-1

    def to_dict(self) -> Dict:
        return asdict(self)


class PoseFeatureExtractor:
    """
    Computes PoseFeatures from a KeypointSet.
    Stateless; one instance can be shared across threads.
    """

    def __init__(self, side: Optional[str] = None):
        self._thresholds = get_thresholds()
        cfg = self._thresholds.extraction
        self.side = Side(side or cfg.side)
        self.release_offset = cfg.release_offset
        self.ideal_follow_through_ratio = cfg.ideal_follow_through_ratio
        self.min_keypoint_confidence = cfg.min_keypoint_confidence

    @property
    def required_joints(self) -> Tuple[Joint, ...]:
        """Active side's full chain plus the opposite shoulder for the shoulder line"""
        chain = tuple(Joint.for_side(self.side, part) for part in ARM_AND_LEG_PARTS)
        return chain + (Joint.for_side(self.side.opposite, "shoulder"),)

    def _release_point(self, wrist: Point2D, elbow: Point2D) -> Optional[Point2D]:
        """Wrist pushed further along the forearm direction"""
        forearm = wrist - elbow
        if forearm.length() == 0:
            return None
        release = wrist + forearm.scale(self.release_offset)
        if not (math.isfinite(release.x) and math.isfinite(release.y)):
            return None
        return release

    def _follow_through(self, shoulder: Point2D, elbow: Point2D, wrist: Point2D) -> float:
        """Forearm / upper-arm ratio against the ideal ratio, clamped to [0, 1]"""
        upper_arm = distance(shoulder, elbow)
        if upper_arm == 0:
            return 0.0
        ratio = distance(elbow, wrist) / upper_arm
        if not math.isfinite(ratio):
            return 0.0
        return max(0.0, min(1.0, ratio / self.ideal_follow_through_ratio))

    def extract(self, keypoints: KeypointSet) -> Optional[PoseFeatures]:
        """
        Compute features for a single frame.

        Returns:
            PoseFeatures, or None if any required joint was not detected
        """
        if not keypoints.has_all(self.required_joints, self.min_keypoint_confidence):
            missing = [j.value for j in self.required_joints
                       if keypoints.get(j, self.min_keypoint_confidence) is None]
            logger.debug(f"Cannot assess frame, missing joints: {missing}")
            return None

        def pt(part: str, side: Side = self.side) -> Point2D:
            return keypoints.point(Joint.for_side(side, part))

        shoulder = pt("shoulder")
        other_shoulder = pt("shoulder", self.side.opposite)
        elbow = pt("elbow")
        wrist = pt("wrist")
        hip = pt("hip")
        knee = pt("knee")
        ankle = pt("ankle")

        below_ankle = Point2D(ankle.x, ankle.y + 1.0)

        return PoseFeatures(
            shoulder_angle=angle(other_shoulder, shoulder, elbow),
            elbow_angle=angle(elbow, shoulder, wrist),
            wrist_angle=angle_between(wrist - elbow, elbow - shoulder),
            knee_angle=angle(knee, hip, ankle),
            ankle_angle=angle(ankle, knee, below_ankle),
            body_alignment=angle_between(ankle - shoulder, VERTICAL),
            release_point=self._release_point(wrist, elbow),
            follow_through=self._follow_through(shoulder, elbow, wrist),
        )
