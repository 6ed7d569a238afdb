"""Tests for japa.ui.main_window – delayed clearing of the input field."""

from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from japa.core.mantras import Mantra, Variant  # noqa: E402
from japa.core.scoring import MantraScorer  # noqa: E402
from japa.core.session import MantraSession  # noqa: E402
from japa.ui.main_window import (  # noqa: E402
    REPETITION_CLEAR_DELAY_MS,
    SESSION_CLEAR_DELAY_MS,
    MainWindow,
)

ROMAN = "Om bhur bhuvah"
MANTRA = Mantra(
    key="test",
    title="Test",
    texts={Variant.PRIMARY: "ॐ भूर्भुवः स्वः", Variant.TRANSLITERATED: ROMAN},
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="module")
def qapp() -> QApplication:
    return QApplication.instance() or QApplication([])


@pytest.fixture()
def window(qapp: QApplication, memory_store) -> MainWindow:
    scorer = MantraScorer(ROMAN, Variant.TRANSLITERATED)
    session = MantraSession(scorer, memory_store, "Asha")
    w = MainWindow(MANTRA, session, memory_store, user_name="Asha")
    yield w
    w.close()
    w.deleteLater()


def _type(window: MainWindow, text: str) -> None:
    window._input.setPlainText(text)


# ---------------------------------------------------------------------------
# Pending clear
# ---------------------------------------------------------------------------

class TestClearTimer:
    def test_accepted_repetition_schedules_clear(self, window: MainWindow):
        _type(window, ROMAN)
        assert window._clear_timer.isActive()
        assert window._clear_timer.interval() == REPETITION_CLEAR_DELAY_MS
        assert window._input.isReadOnly()

    def test_partial_input_schedules_nothing(self, window: MainWindow):
        _type(window, "Om")
        assert not window._clear_timer.isActive()

    def test_reset_cancels_pending_clear(self, window: MainWindow):
        _type(window, ROMAN)
        window._reset_session()
        assert not window._clear_timer.isActive()

        _type(window, "Om")
        assert window._input.toPlainText() == "Om"
        assert not window._input.isReadOnly()
        assert not window._clear_timer.isActive()

    def test_variant_switch_cancels_pending_clear(self, window: MainWindow):
        _type(window, ROMAN)
        index = window._variant_combo.findData(Variant.PRIMARY.value)
        window._variant_combo.setCurrentIndex(index)
        assert window._session.scorer.variant is Variant.PRIMARY
        assert not window._clear_timer.isActive()
        assert window._session.repetition_count == 0

    def test_clear_empties_input(self, window: MainWindow):
        _type(window, ROMAN)
        window._finish_session()
        assert window._input.toPlainText() == ""
        assert not window._input.isReadOnly()
        assert not window._clear_timer.isActive()

    def test_completed_session_waits_longer(self, window: MainWindow):
        for _ in range(2):
            _type(window, ROMAN)
            window._finish_session()
        _type(window, ROMAN)
        assert window._clear_timer.interval() == SESSION_CLEAR_DELAY_MS
        assert not window._input.isEnabled()
        assert window._session.progress.total_points == 10

        window._reset_session()
        assert not window._clear_timer.isActive()
        assert window._input.isEnabled()
