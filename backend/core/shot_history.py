"""
Shot History
In-memory record of analyzed shots with user ratings and practice statistics.
"""

import uuid
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from dataclasses import dataclass, field, replace

from exceptions import InvalidRating, ShotNotFound

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Shot:
    """One recorded shot"""
    feedback: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    image_data: Optional[bytes] = None
    score: Optional[float] = None
    rating: Optional[int] = None  # 1-5, set later by the user
    shot_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict:
        return {
            "shot_id": self.shot_id,
            "created_at": self.created_at.isoformat(),
            "feedback": self.feedback,
            "score": round(self.score, 1) if self.score is not None else None,
            "rating": self.rating,
            "has_image": self.image_data is not None,
        }


@dataclass(frozen=True)
class ShotStats:
    total_shots: int
    average_rating: float
    today_shots: int
    weekly_shots: int
    daily_goal: int

    @property
    def goal_progress(self) -> float:
        return min(1.0, self.today_shots / self.daily_goal) if self.daily_goal > 0 else 0.0

    def to_dict(self) -> Dict:
        return {
            "total_shots": self.total_shots,
            "average_rating": round(self.average_rating, 2),
            "today_shots": self.today_shots,
            "weekly_shots": self.weekly_shots,
            "daily_goal": self.daily_goal,
            "goal_progress": round(self.goal_progress, 2),
        }


def validate_rating(rating: int) -> int:
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating(rating, MIN_RATING, MAX_RATING)
    return rating


class ShotHistory:
    """
    Newest-first shot list, bounded to `max_shots`.
    Safe to share between request handlers.
    """

    def __init__(self, max_shots: int = 500, daily_goal: int = 50):
        self.max_shots = max_shots
        self.daily_goal = daily_goal
        self._shots: List[Shot] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._shots)

    def add(self, shot: Shot) -> Shot:
        if shot.rating is not None:
            validate_rating(shot.rating)
        with self._lock:
            self._shots.insert(0, shot)
            dropped = self._shots[self.max_shots:]
            del self._shots[self.max_shots:]
        if dropped:
            logger.debug(f"Shot history full, dropped {len(dropped)} oldest")
        logger.info(f"Shot recorded: {shot.shot_id}")
        return shot

    def get(self, shot_id: str) -> Shot:
        with self._lock:
            for shot in self._shots:
                if shot.shot_id == shot_id:
                    return shot
        raise ShotNotFound(shot_id)

    def list_shots(self, limit: Optional[int] = None) -> List[Shot]:
        with self._lock:
            shots = list(self._shots)
        return shots[:limit] if limit is not None else shots

    def remove(self, shot_id: str) -> None:
        with self._lock:
            for i, shot in enumerate(self._shots):
                if shot.shot_id == shot_id:
                    del self._shots[i]
                    break
            else:
                raise ShotNotFound(shot_id)
        logger.info(f"Shot removed: {shot_id}")

    def update_rating(self, shot_id: str, rating: int) -> Shot:
        validate_rating(rating)
        with self._lock:
            for i, shot in enumerate(self._shots):
                if shot.shot_id == shot_id:
                    updated = replace(shot, rating=rating)
                    self._shots[i] = updated
                    return updated
        raise ShotNotFound(shot_id)

    def clear(self) -> None:
        with self._lock:
            self._shots.clear()

    def stats(self, now: Optional[datetime] = None) -> ShotStats:
        """Totals, mean rating of rated shots, shots since midnight and over the last 7 days"""
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_ago = now - timedelta(days=7)

        shots = self.list_shots()
        ratings = [s.rating for s in shots if s.rating is not None]

        return ShotStats(
            total_shots=len(shots),
            average_rating=sum(ratings) / len(ratings) if ratings else 0.0,
            today_shots=sum(1 for s in shots if start_of_day <= s.created_at <= now),
            weekly_shots=sum(1 for s in shots if s.created_at >= week_ago),
            daily_goal=self.daily_goal,
        )
