"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from japa.core.achievements import JOURNEY_POINTS, Achievement
from japa.core.progress import UserProgress


@dataclass
class BadgeState:
    """One achievement badge: earned or still locked."""

    achievement: Achievement
    earned: bool

    @property
    def text(self) -> str:
        return f"{self.achievement.title} ✓" if self.earned else self.achievement.title


@dataclass
class ProgressSummary:
    """Figures shown in the stats cards and the journey bar."""

    total_points: int
    completed_sessions: int
    achievement_count: int
    journey_percent: int
    badges: List[BadgeState]

    @classmethod
    def from_progress(cls, progress: UserProgress) -> "ProgressSummary":
        journey = min(progress.total_points * 100 // JOURNEY_POINTS, 100)
        return cls(
            total_points=progress.total_points,
            completed_sessions=progress.completed_sessions,
            achievement_count=len(progress.achievements),
            journey_percent=journey,
            badges=[BadgeState(a, a in progress.achievements) for a in Achievement],
        )
