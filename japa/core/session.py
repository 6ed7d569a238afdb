from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from japa.core.achievements import Achievement, check_achievements
from japa.core.progress import ProgressStore, StoreError, UserProgress, merge_progress
from japa.core.scoring import MantraScorer

logger = logging.getLogger(__name__)

POINTS_PER_SESSION = 10
REPETITIONS_PER_SESSION = 3


@dataclass(frozen=True)
class InputResult:
    """Outcome of scoring one change of the input field."""

    accuracy: int
    accepted: bool
    repetition_count: int
    session_completed: bool = False
    unlocked: Tuple[Achievement, ...] = ()
    suggestion: str = ""
    saved: bool = True


class MantraSession:
    """Counts accepted repetitions for one user and awards completed sessions.

    Every accepted repetition (accuracy 100) bumps the counter; the third one
    completes a session: points and the session count go up, achievements are
    checked, the record is persisted and the counter returns to 0.

    Saving goes to *store* first and is retried once; every successful save is
    mirrored to *fallback* (when given). If saving still fails the record is
    written to *fallback* only and the session is flagged ``offline``. The
    in-memory record is kept either way.

    When the initial load from *store* fails, nothing is written to it until
    it can be read again; the stored record is then merged with the local one
    and the sessions earned in between are added on top.
    """

    def __init__(
        self,
        scorer: MantraScorer,
        store: ProgressStore,
        user_key: str,
        *,
        fallback: Optional[ProgressStore] = None,
        points_per_session: int = POINTS_PER_SESSION,
        repetitions_per_session: int = REPETITIONS_PER_SESSION,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._scorer = scorer
        self._store = store
        self._fallback = fallback
        self._user_key = user_key
        self._points_per_session = points_per_session
        self._repetitions_per_session = repetitions_per_session
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._repetition_count = 0
        self._offline = False
        self._synced = True
        self._pending_points = 0
        self._pending_sessions = 0
        self._progress = self._load()
        self._offline_base = self._progress

    @property
    def scorer(self) -> MantraScorer:
        return self._scorer

    @property
    def user_key(self) -> str:
        return self._user_key

    @property
    def progress(self) -> UserProgress:
        return self._progress

    @property
    def repetition_count(self) -> int:
        return self._repetition_count

    @property
    def points_per_session(self) -> int:
        return self._points_per_session

    @property
    def repetitions_per_session(self) -> int:
        return self._repetitions_per_session

    @property
    def offline(self) -> bool:
        """True while progress is kept in local storage only."""
        return self._offline

    def submit(self, live_input: str) -> InputResult:
        """Score the current input and advance the session on a full match."""
        accuracy = self._scorer.score(live_input)
        if accuracy < 100:
            return InputResult(
                accuracy=accuracy,
                accepted=False,
                repetition_count=self._repetition_count,
                suggestion=self._scorer.suggest(live_input),
            )

        self._repetition_count += 1
        if self._repetition_count < self._repetitions_per_session:
            return InputResult(accuracy=100, accepted=True, repetition_count=self._repetition_count)

        unlocked, saved = self._complete_session()
        return InputResult(
            accuracy=100,
            accepted=True,
            repetition_count=self._repetition_count,
            session_completed=True,
            unlocked=unlocked,
            saved=saved,
        )

    def suggest(self, live_input: str) -> str:
        return self._scorer.suggest(live_input)

    def accept_suggestion(self, live_input: str) -> str:
        return self._scorer.accept(live_input)

    def reset(self) -> None:
        self._repetition_count = 0

    def switch_scorer(self, scorer: MantraScorer) -> None:
        """Practice a different text or variant; the current count is dropped."""
        self._scorer = scorer
        self._repetition_count = 0

    def _complete_session(self) -> Tuple[Tuple[Achievement, ...], bool]:
        self._repetition_count = 0
        awarded = self._progress.with_session_award(self._points_per_session, self._clock())
        awarded, unlocked = check_achievements(awarded)
        self._progress = awarded
        if not self._synced:
            self._pending_points += self._points_per_session
            self._pending_sessions += 1
        logger.info(
            "Session completed for %s: %d points, %d sessions",
            self._user_key,
            awarded.total_points,
            awarded.completed_sessions,
        )
        return unlocked, self._persist()

    def _load(self) -> UserProgress:
        try:
            return self._store.load(self._user_key)
        except StoreError as e:
            logger.warning("Could not load progress for %s: %s", self._user_key, e)
        self._offline = True
        self._synced = False
        if self._fallback is not None:
            try:
                return self._fallback.load(self._user_key)
            except StoreError as e:
                logger.warning("Could not load local progress for %s: %s", self._user_key, e)
        return UserProgress()

    def _sync_with_store(self) -> bool:
        """Re-read the primary record and fold in what was earned while it was unreachable."""
        try:
            stored = self._store.load(self._user_key)
        except StoreError as e:
            logger.warning("Progress store for %s still unreachable: %s", self._user_key, e)
            return False
        base = merge_progress(stored, self._offline_base)
        merged = replace(
            base,
            total_points=base.total_points + self._pending_points,
            completed_sessions=base.completed_sessions + self._pending_sessions,
            achievements=base.achievements | self._progress.achievements,
            last_active=self._progress.last_active or base.last_active,
        )
        self._progress, _ = check_achievements(merged)
        self._synced = True
        self._pending_points = 0
        self._pending_sessions = 0
        logger.info(
            "Progress for %s merged with the stored record: %d points",
            self._user_key,
            self._progress.total_points,
        )
        return True

    def _persist(self) -> bool:
        # never overwrite a primary record that has not been read back
        if self._synced or self._sync_with_store():
            for attempt in (1, 2):
                if self._store.save(self._user_key, self._progress):
                    self._offline = False
                    if self._fallback is not None:
                        self._fallback.save(self._user_key, self._progress)
                    return True
                logger.warning("Saving progress for %s failed (attempt %d)", self._user_key, attempt)
        self._offline = True
        if self._fallback is not None and self._fallback.save(self._user_key, self._progress):
            logger.warning("Progress for %s kept in local storage only", self._user_key)
        return False
