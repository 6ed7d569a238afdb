"""Tests for japa.ui.models – badge and progress summary models."""

from __future__ import annotations

from japa.core.achievements import Achievement
from japa.core.progress import UserProgress
from japa.ui.models import BadgeState, ProgressSummary


class TestBadgeState:
    def test_locked_text(self):
        assert BadgeState(Achievement.SANSKRIT_LEARNER, earned=False).text == "Sanskrit Learner"

    def test_earned_text(self):
        assert BadgeState(Achievement.SANSKRIT_LEARNER, earned=True).text == "Sanskrit Learner ✓"


class TestProgressSummary:
    def test_empty_progress(self):
        summary = ProgressSummary.from_progress(UserProgress())
        assert summary.total_points == 0
        assert summary.completed_sessions == 0
        assert summary.achievement_count == 0
        assert summary.journey_percent == 0
        assert [b.earned for b in summary.badges] == [False, False, False]

    def test_badges_in_threshold_order(self):
        summary = ProgressSummary.from_progress(UserProgress())
        assert [b.achievement for b in summary.badges] == list(Achievement)

    def test_partial_journey(self):
        progress = UserProgress(
            total_points=250,
            completed_sessions=25,
            achievements=frozenset({Achievement.SANSKRIT_LEARNER}),
        )
        summary = ProgressSummary.from_progress(progress)
        assert summary.journey_percent == 25
        assert summary.achievement_count == 1
        assert [b.earned for b in summary.badges] == [True, False, False]

    def test_journey_capped_at_100(self):
        summary = ProgressSummary.from_progress(UserProgress(total_points=4000))
        assert summary.journey_percent == 100
