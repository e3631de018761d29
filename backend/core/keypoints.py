"""
Keypoint Data Contract
Named 2D body landmarks for a single frame, as produced by the external pose model.

Coordinates are normalized to [0, 1] x [0, 1] with the origin at the top-left,
so y grows downward.
"""

import math
import logging
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional
from dataclasses import dataclass, field

from exceptions import ValidationError

logger = logging.getLogger(__name__)

# Normalized image coordinates and detection confidences both live in [0, 1]
UNIT_RANGE = (0.0, 1.0)


@dataclass(frozen=True)
class Point2D:
    """Immutable 2D point"""
    x: float
    y: float

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> "Point2D":
        return Point2D(self.x * factor, self.y * factor)

    def length(self) -> float:
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Keypoint:
    """A detected landmark with its confidence"""
    point: Point2D
    confidence: float = 1.0


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class Joint(str, Enum):
    """Joints the form engine reads"""
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"

    @classmethod
    def for_side(cls, side: Side, part: str) -> "Joint":
        """Look up e.g. (Side.LEFT, "knee") -> Joint.LEFT_KNEE"""
        return cls(f"{side.value}_{part}")


# Per-side chain required for form analysis
ARM_AND_LEG_PARTS = ("shoulder", "elbow", "wrist", "hip", "knee", "ankle")


@dataclass(frozen=True)
class KeypointSet:
    """
    Keypoints detected in one frame plus the frame's overall detection confidence.
    A joint missing from `keypoints` was not detected.
    """
    keypoints: Mapping[Joint, Keypoint] = field(default_factory=dict)
    confidence: float = 0.0

    def get(self, joint: Joint, min_confidence: float = 0.0) -> Optional[Keypoint]:
        kp = self.keypoints.get(joint)
        if kp is None or kp.confidence < min_confidence:
            return None
        return kp

    def point(self, joint: Joint, min_confidence: float = 0.0) -> Optional[Point2D]:
        kp = self.get(joint, min_confidence)
        return kp.point if kp else None

    def has_all(self, joints: Iterable[Joint], min_confidence: float = 0.0) -> bool:
        return all(self.get(j, min_confidence) is not None for j in joints)

    def __len__(self) -> int:
        return len(self.keypoints)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], confidence: float = 0.0) -> "KeypointSet":
        """
        Build a KeypointSet from {"left_knee": {"x": .., "y": .., "confidence": ..}, ...}.

        Names outside the Joint enumeration (nose, heels, ...) are skipped.

        Raises:
            ValidationError: If a coordinate or confidence is missing, non-numeric or outside [0, 1]
        """
        keypoints: Dict[Joint, Keypoint] = {}
        for name, data in raw.items():
            try:
                joint = Joint(name)
            except ValueError:
                logger.debug(f"Ignoring unknown keypoint: {name}")
                continue

            x = _unit_value(data, "x", name)
            y = _unit_value(data, "y", name)
            kp_conf = _unit_value(data, "confidence", name, default=1.0)
            keypoints[joint] = Keypoint(Point2D(x, y), kp_conf)

        return cls(keypoints=keypoints, confidence=confidence)


def _unit_value(data: Mapping[str, Any], key: str, name: str, default: Optional[float] = None) -> float:
    value = data.get(key, default)
    if value is None:
        raise ValidationError(f"Keypoint {name} is missing '{key}'", field=f"{name}.{key}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Keypoint {name} has non-numeric '{key}'", field=f"{name}.{key}")
    low, high = UNIT_RANGE
    if not math.isfinite(value) or not low <= value <= high:
        raise ValidationError(
            f"Keypoint {name} '{key}' must be within [{low}, {high}], got {value}",
            field=f"{name}.{key}"
        )
    return value
