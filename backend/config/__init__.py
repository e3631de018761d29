from .thresholds import (
    AngleTarget,
    ThresholdConfig,
    get_thresholds,
    THRESHOLDS,
)
from .settings import Settings, get_settings, settings

__all__ = [
    "AngleTarget",
    "ThresholdConfig",
    "get_thresholds",
    "THRESHOLDS",
    "Settings", "get_settings", "settings"
]
