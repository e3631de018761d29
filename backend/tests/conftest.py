"""
Shared fixtures for Jordan Yells tests
"""

import math
import pytest

from core.keypoints import Joint, Keypoint, KeypointSet, Point2D
from core.pose_features import PoseFeatures


# Left-side shooting pose built so that:
#   shoulder angle (at right shoulder) = 90, elbow angle = 90, wrist angle = 90,
#   knee angle = 120, body alignment = 0, forearm / upper arm = 0.8
KNEE_OFFSET = 0.175 / math.sqrt(3)

GOOD_POSE = {
    "left_shoulder": (0.5, 0.3),
    "right_shoulder": (0.6, 0.3),
    "left_elbow": (0.6, 0.2),
    "left_wrist": (0.52, 0.12),
    "left_hip": (0.5, 0.55),
    "left_knee": (0.5 + KNEE_OFFSET, 0.725),
    "left_ankle": (0.5, 0.9),
    # Not read for a left-side analysis
    "right_elbow": (0.7, 0.4),
    "right_wrist": (0.72, 0.5),
}


def make_keypoints(points=None, confidence=0.9, drop=(), kp_confidence=0.9) -> KeypointSet:
    points = dict(GOOD_POSE if points is None else points)
    for name in drop:
        points.pop(name, None)
    return KeypointSet(
        keypoints={
            Joint(name): Keypoint(Point2D(x, y), kp_confidence)
            for name, (x, y) in points.items()
        },
        confidence=confidence,
    )


def make_features(**overrides) -> PoseFeatures:
    values = dict(
        shoulder_angle=90.0,
        elbow_angle=90.0,
        wrist_angle=45.0,
        knee_angle=120.0,
        ankle_angle=90.0,
        body_alignment=0.0,
        release_point=Point2D(0.52, 0.31),
        follow_through=1.0,
    )
    values.update(overrides)
    return PoseFeatures(**values)


@pytest.fixture
def good_keypoints() -> KeypointSet:
    return make_keypoints()


@pytest.fixture
def ideal_features() -> PoseFeatures:
    return make_features()


class StubExtractor:
    """Returns fixed features and counts calls"""

    def __init__(self, features=None, on_extract=None):
        self.features = features
        self.on_extract = on_extract
        self.calls = 0

    def extract(self, keypoints):
        self.calls += 1
        if self.on_extract:
            self.on_extract()
        return self.features
