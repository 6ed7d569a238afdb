from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional

from japa.core.progress import UserProgress

MEDALS = {1: "🏆", 2: "🥈", 3: "🥉"}


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    name: str
    total_points: int
    completed_sessions: int
    is_featured: bool = False

    @property
    def medal(self) -> str:
        return MEDALS.get(self.rank, "")


def rank(records: Mapping[str, UserProgress], limit: Optional[int] = 10) -> List[LeaderboardEntry]:
    """Order users by points, then sessions (both descending), then name."""
    ordered = sorted(
        records.items(),
        key=lambda item: (-item[1].total_points, -item[1].completed_sessions, item[0].lower()),
    )
    if limit is not None:
        ordered = ordered[:limit]
    return [
        LeaderboardEntry(
            rank=position,
            name=name,
            total_points=record.total_points,
            completed_sessions=record.completed_sessions,
            is_featured=record.is_featured,
        )
        for position, (name, record) in enumerate(ordered, start=1)
    ]
