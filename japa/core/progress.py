from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Protocol

from japa.core.achievements import Achievement

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a progress store cannot be read."""


@dataclass(frozen=True)
class UserProgress:
    total_points: int = 0
    completed_sessions: int = 0
    achievements: FrozenSet[Achievement] = field(default_factory=frozenset)
    last_active: Optional[datetime] = None
    custom_message: str = ""
    is_featured: bool = False

    def with_session_award(self, points: int, now: Optional[datetime] = None) -> "UserProgress":
        """Return a copy with one more completed session worth *points*."""
        return replace(
            self,
            total_points=self.total_points + points,
            completed_sessions=self.completed_sessions + 1,
            last_active=now or datetime.now(timezone.utc),
        )

    def with_achievements(self, achievements: Iterable[Achievement]) -> "UserProgress":
        return replace(self, achievements=self.achievements | frozenset(achievements))

    def sorted_achievements(self) -> list[Achievement]:
        return sorted(self.achievements, key=lambda a: a.threshold)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_points": self.total_points,
            "completed_sessions": self.completed_sessions,
            "achievements": [a.title for a in self.sorted_achievements()],
            "last_active": self.last_active.isoformat() if self.last_active else None,
            "custom_message": self.custom_message,
            "is_featured": self.is_featured,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UserProgress":
        """Build a record from stored data, defaulting every missing field."""
        achievements = set()
        for title in payload.get("achievements") or []:
            achievement = Achievement.from_title(str(title))
            if achievement is None:
                logger.warning("Ignoring unknown achievement %r", title)
                continue
            achievements.add(achievement)

        last_active = None
        raw_last_active = payload.get("last_active")
        if raw_last_active:
            try:
                last_active = datetime.fromisoformat(str(raw_last_active).replace("Z", "+00:00"))
            except ValueError:
                logger.warning("Ignoring invalid last_active %r", raw_last_active)

        return cls(
            total_points=max(0, int(payload.get("total_points") or 0)),
            completed_sessions=max(0, int(payload.get("completed_sessions") or 0)),
            achievements=frozenset(achievements),
            last_active=last_active,
            custom_message=str(payload.get("custom_message") or ""),
            is_featured=bool(payload.get("is_featured", False)),
        )


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def merge_progress(primary: UserProgress, other: UserProgress) -> UserProgress:
    """Combine two copies of one user's record without losing progress.

    Keeps the larger counts, the union of achievements and the later
    ``last_active``; message and featured flag come from *primary*.
    """
    last_active = primary.last_active
    if other.last_active is not None and (
        last_active is None or _as_utc(other.last_active) > _as_utc(last_active)
    ):
        last_active = other.last_active
    return replace(
        primary,
        total_points=max(primary.total_points, other.total_points),
        completed_sessions=max(primary.completed_sessions, other.completed_sessions),
        achievements=primary.achievements | other.achievements,
        last_active=last_active,
    )


class ProgressStore(Protocol):
    def load(self, user_key: str) -> UserProgress:
        ...

    def save(self, user_key: str, record: UserProgress) -> bool:
        ...

    def all_records(self) -> Dict[str, UserProgress]:
        ...


def default_progress_path() -> Path:
    return Path.home() / ".japa" / "progress.json"


class JsonProgressStore:
    """Stores user progress records in a local JSON file.

    File layout: ``{"users": {user_key: record}}``. A missing or corrupt file
    is treated as empty so the app keeps working offline.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else default_progress_path()
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._records = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self, user_key: str) -> UserProgress:
        return self._records.get(user_key, UserProgress())

    def save(self, user_key: str, record: UserProgress) -> bool:
        self._records[user_key] = record
        return self._save()

    def all_records(self) -> Dict[str, UserProgress]:
        return dict(self._records)

    def reset(self, user_key: str) -> bool:
        """Drop a single user's record."""
        self._records.pop(user_key, None)
        return self._save()

    def _load(self) -> Dict[str, UserProgress]:
        records: Dict[str, UserProgress] = {}
        if not self._file_path.exists():
            return records
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return records

        users = payload.get("users", {}) if isinstance(payload, dict) else {}
        if not isinstance(users, dict):
            logger.warning("Ignoring malformed 'users' section in %s", self._file_path)
            return records
        for key, value in users.items():
            if not isinstance(value, dict):
                continue
            try:
                records[key] = UserProgress.from_dict(value)
            except (TypeError, ValueError) as e:
                logger.warning("Skipping unreadable record for %s: %s", key, e)
        return records

    def _save(self) -> bool:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"users": {key: value.to_dict() for key, value in self._records.items()}}
        try:
            self._file_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
            return False
        return True
