from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from japa.core.progress import UserProgress

logger = logging.getLogger(__name__)


class Achievement(Enum):
    """Point milestones, declared in ascending threshold order."""

    SANSKRIT_LEARNER = (100, "Sanskrit Learner", "Beginner")
    BRONZE_MANTRA_MEDAL = (500, "Bronze Mantra Medal", "Bronze")
    DIVINE_DEVOTEE_CERTIFICATE = (1000, "Divine Devotee Certificate", "Divine")

    def __init__(self, threshold: int, title: str, badge: str) -> None:
        self.threshold = threshold
        self.title = title
        self.badge = badge

    @classmethod
    def from_title(cls, title: str) -> Optional["Achievement"]:
        for achievement in cls:
            if achievement.title == title:
                return achievement
        return None


# Points needed for the last milestone; drives the "journey" progress bar.
JOURNEY_POINTS = max(a.threshold for a in Achievement)


def earned_achievements(total_points: int) -> Tuple[Achievement, ...]:
    return tuple(a for a in Achievement if total_points >= a.threshold)


def next_achievement(total_points: int) -> Optional[Achievement]:
    """Return the lowest milestone not yet reached, or None past the last one."""
    for achievement in Achievement:
        if total_points < achievement.threshold:
            return achievement
    return None


def check_achievements(record: "UserProgress") -> Tuple["UserProgress", Tuple[Achievement, ...]]:
    """Add every milestone the record's points have crossed.

    Returns the updated record and the newly unlocked achievements in
    threshold order.  Running it again on the result unlocks nothing.
    """
    unlocked = tuple(a for a in earned_achievements(record.total_points) if a not in record.achievements)
    if not unlocked:
        return record, ()
    for achievement in unlocked:
        logger.info("Achievement unlocked: %s (%d points)", achievement.title, achievement.threshold)
    return record.with_achievements(unlocked), unlocked
