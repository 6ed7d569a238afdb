from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QFrame,
    QVBoxLayout,
    QWidget,
)

from japa.core.accounts import AdminService
from japa.core.achievements import JOURNEY_POINTS
from japa.core.mantras import Mantra, Variant
from japa.core.progress import ProgressStore
from japa.core.scoring import MantraScorer
from japa.core.session import InputResult, MantraSession
from japa.ui.admin_dialog import AdminDialog
from japa.ui.colors import TrainerColors, accuracy_color
from japa.ui.leaderboard_dialog import LeaderboardDialog
from japa.ui.models import ProgressSummary
from japa.ui.overlays import SessionCompleteOverlay, Toast, primary_button_style, secondary_button_style
from japa.ui.typing_widgets import MantraInput, SuggestionChip
from japa.ui.widgets import AchievementBadge, GlassCard, RoundedProgressBar, StatCard, TrainerBackground

logger = logging.getLogger(__name__)

REPETITION_CLEAR_DELAY_MS = 1000
SESSION_CLEAR_DELAY_MS = 3000


class MainWindow(QMainWindow):
    """Mantra trainer: shows the text, scores typing live and tracks progress.

    All scoring and bookkeeping goes through the injected ``MantraSession``;
    the window only reacts to its ``InputResult``.
    """

    def __init__(
        self,
        mantra: Mantra,
        session: MantraSession,
        store: ProgressStore,
        *,
        user_name: Optional[str] = None,
        admin_service: Optional[AdminService] = None,
        leaderboard_limit: int = 10,
    ) -> None:
        super().__init__()
        self._mantra = mantra
        self._session = session
        self._store = store
        self._user_name = user_name
        self._admin_service = admin_service
        self._leaderboard_limit = leaderboard_limit
        self._awaiting_clear = False
        # one pending clear at a time; reset and variant switches cancel it
        self._clear_timer = QTimer(self)
        self._clear_timer.setSingleShot(True)
        self._clear_timer.timeout.connect(self._finish_session)

        self.setWindowTitle("Mantra Harmony Trainer")
        self.setMinimumSize(900, 760)
        self._build_ui()
        self._refresh_mantra()
        self._refresh_progress()
        self._on_input_changed()

    def _build_ui(self) -> None:
        background = TrainerBackground()
        outer = QVBoxLayout(background)
        outer.setContentsMargins(0, 0, 0, 0)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setStyleSheet("QScrollArea { background: transparent; }")
        content = QWidget()
        content.setStyleSheet("background: transparent;")
        scroll.setWidget(content)
        outer.addWidget(scroll)

        layout = QVBoxLayout(content)
        layout.setContentsMargins(48, 28, 48, 28)
        layout.setSpacing(18)

        title = QLabel("Mantra Harmony Trainer")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(f"color: {TrainerColors.PRIMARY}; font-size: 34px; font-weight: 900;")
        layout.addWidget(title)
        self._subtitle = QLabel("")
        self._subtitle.setAlignment(Qt.AlignCenter)
        self._subtitle.setStyleSheet(f"color: {TrainerColors.TEXT_SECONDARY}; font-size: 15px;")
        layout.addWidget(self._subtitle)

        layout.addLayout(self._build_toolbar())
        layout.addWidget(self._build_progress_card())
        layout.addWidget(self._build_mantra_card())
        layout.addWidget(self._build_typing_card())

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        reset = QPushButton("Reset Session")
        reset.setStyleSheet(secondary_button_style())
        reset.clicked.connect(self._reset_session)
        buttons.addWidget(reset)
        buttons.addStretch(1)
        layout.addLayout(buttons)

        stats = QHBoxLayout()
        stats.setSpacing(14)
        self._points_card = StatCard("⭐", "Total Points", "0", TrainerColors.PRIMARY_LIGHT)
        self._sessions_card = StatCard("📿", "Sessions", "0", TrainerColors.MAROON)
        self._achievements_card = StatCard("🏆", "Achievements", "0", TrainerColors.GOLD)
        for card in (self._points_card, self._sessions_card, self._achievements_card):
            stats.addWidget(card, 1)
        layout.addLayout(stats)
        layout.addStretch(1)

        self.setCentralWidget(background)
        self._toast = Toast(background)
        self._complete_overlay = SessionCompleteOverlay(background)
        self._complete_overlay.closed.connect(self._finish_session)

    def _build_toolbar(self) -> QHBoxLayout:
        toolbar = QHBoxLayout()
        toolbar.setSpacing(10)

        self._variant_combo = QComboBox()
        for variant in Variant:
            self._variant_combo.addItem(variant.label, variant.value)
        self._variant_combo.setCurrentIndex(self._variant_combo.findData(self._session.scorer.variant.value))
        self._variant_combo.currentIndexChanged.connect(self._on_variant_changed)
        toolbar.addWidget(self._variant_combo)
        toolbar.addStretch(1)

        user = QLabel(f"🙏 {self._user_name}" if self._user_name else "Guest (progress saved on this device)")
        user.setStyleSheet(f"color: {TrainerColors.TEXT_SECONDARY}; font-weight: 600;")
        toolbar.addWidget(user)

        leaderboard = QPushButton("🏆 Leaderboard")
        leaderboard.setStyleSheet(primary_button_style())
        leaderboard.clicked.connect(self._show_leaderboard)
        toolbar.addWidget(leaderboard)

        if self._admin_service is not None and self._admin_service.is_admin(self._user_name):
            admin = QPushButton("Admin")
            admin.setStyleSheet(secondary_button_style())
            admin.clicked.connect(self._show_admin)
            toolbar.addWidget(admin)
        return toolbar

    def _build_progress_card(self) -> GlassCard:
        card = GlassCard()
        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 18, 24, 18)
        layout.setSpacing(10)

        heading = QLabel(f"Journey to {JOURNEY_POINTS:,} Points")
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet(f"color: {TrainerColors.TEXT_PRIMARY}; font-size: 18px; font-weight: 700;")
        layout.addWidget(heading)
        self._points_label = QLabel("")
        self._points_label.setAlignment(Qt.AlignCenter)
        self._points_label.setStyleSheet(f"color: {TrainerColors.TEXT_MUTED};")
        layout.addWidget(self._points_label)

        self._journey_bar = RoundedProgressBar(show_percentage=True, height=16)
        layout.addWidget(self._journey_bar)

        badges = QHBoxLayout()
        badges.addStretch(1)
        self._badges = []
        for _ in ProgressSummary.from_progress(self._session.progress).badges:
            badge = AchievementBadge()
            self._badges.append(badge)
            badges.addWidget(badge)
        badges.addStretch(1)
        layout.addLayout(badges)
        return card

    def _build_mantra_card(self) -> GlassCard:
        card = GlassCard()
        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 18, 24, 18)

        self._mantra_title = QLabel("")
        self._mantra_title.setAlignment(Qt.AlignCenter)
        self._mantra_title.setStyleSheet(f"color: {TrainerColors.TEXT_PRIMARY}; font-size: 17px; font-weight: 700;")
        layout.addWidget(self._mantra_title)

        self._mantra_text = QLabel("")
        self._mantra_text.setAlignment(Qt.AlignCenter)
        self._mantra_text.setWordWrap(True)
        self._mantra_text.setTextInteractionFlags(Qt.NoTextInteraction)
        self._mantra_text.setStyleSheet(f"color: {TrainerColors.PRIMARY_DARK}; font-size: 24px;")
        layout.addWidget(self._mantra_text)

        self._repetition_label = QLabel("")
        self._repetition_label.setAlignment(Qt.AlignCenter)
        self._repetition_label.setStyleSheet(f"color: {TrainerColors.TEXT_MUTED};")
        layout.addWidget(self._repetition_label)
        return card

    def _build_typing_card(self) -> GlassCard:
        card = GlassCard()
        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 18, 24, 18)
        layout.setSpacing(10)

        heading = QLabel("Type the Mantra")
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet(f"color: {TrainerColors.TEXT_PRIMARY}; font-size: 17px; font-weight: 700;")
        layout.addWidget(heading)
        hint = QLabel(
            f"Complete {self._session.repetitions_per_session} repetitions to earn points"
        )
        hint.setAlignment(Qt.AlignCenter)
        hint.setStyleSheet(f"color: {TrainerColors.TEXT_MUTED};")
        layout.addWidget(hint)

        self._input = MantraInput()
        self._input.textChanged.connect(self._on_input_changed)
        self._input.pasteRejected.connect(self._on_paste_rejected)
        layout.addWidget(self._input)

        feedback = QHBoxLayout()
        self._accuracy_bar = RoundedProgressBar(height=10)
        feedback.addWidget(self._accuracy_bar, 1)
        self._accuracy_label = QLabel("0%")
        self._accuracy_label.setFixedWidth(48)
        self._accuracy_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self._accuracy_label.setStyleSheet(f"color: {TrainerColors.TEXT_SECONDARY}; font-weight: 700;")
        feedback.addWidget(self._accuracy_label)
        layout.addLayout(feedback)

        self._suggestion_chip = SuggestionChip()
        self._suggestion_chip.suggestionAccepted.connect(self._on_suggestion_accepted)
        layout.addWidget(self._suggestion_chip, 0, Qt.AlignLeft)
        return card

    def _refresh_mantra(self) -> None:
        variant = self._session.scorer.variant
        self._subtitle.setText(f"Practice the sacred {self._mantra.title} with devotion")
        self._mantra_title.setText(self._mantra.title)
        self._mantra_text.setText(self._mantra.text(variant))
        self._input.setPlaceholderText(f"Type the {variant.label} mantra here...")
        self._refresh_repetitions()

    def _refresh_repetitions(self) -> None:
        self._repetition_label.setText(
            f"Repetition {self._session.repetition_count}/{self._session.repetitions_per_session}"
        )

    def _refresh_progress(self) -> None:
        summary = ProgressSummary.from_progress(self._session.progress)
        self._points_label.setText(f"Current: {summary.total_points} points")
        self._journey_bar.set_progress(summary.journey_percent, 100)
        for badge, state in zip(self._badges, summary.badges):
            badge.set_state(state)
        self._points_card.set_value(summary.total_points)
        self._sessions_card.set_value(summary.completed_sessions)
        self._achievements_card.set_value(summary.achievement_count)

    def _on_input_changed(self) -> None:
        if self._awaiting_clear:
            return
        result = self._session.submit(self._input.toPlainText())
        self._show_accuracy(result.accuracy)
        self._suggestion_chip.set_word(result.suggestion)
        if result.accepted:
            self._on_repetition_accepted(result)

    def _show_accuracy(self, accuracy: int) -> None:
        self._accuracy_bar.set_progress(accuracy, 100, accuracy_color(accuracy))
        self._accuracy_label.setText(f"{accuracy}%")

    def _on_repetition_accepted(self, result: InputResult) -> None:
        self._awaiting_clear = True
        self._input.setReadOnly(True)
        self._refresh_repetitions()
        if not result.session_completed:
            self._toast.show_message(
                "Repetition complete",
                f"{result.repetition_count}/{self._session.repetitions_per_session}, keep going!",
            )
            self._clear_timer.start(REPETITION_CLEAR_DELAY_MS)
            return

        self._input.setEnabled(False)
        self._refresh_progress()
        self._complete_overlay.show_result(
            self._session.points_per_session, self._session.repetitions_per_session, result.unlocked
        )
        if not result.saved:
            self._toast.show_message(
                "Saved on this device only",
                "Could not reach the leaderboard; your progress is kept locally.",
                warning=True,
                msec=5000,
            )
        self._clear_timer.start(SESSION_CLEAR_DELAY_MS)

    def _finish_session(self) -> None:
        self._clear_timer.stop()
        if not self._awaiting_clear:
            return
        self._complete_overlay.hide()
        self._input.setEnabled(True)
        self._clear_input()

    def _clear_input(self) -> None:
        self._input.blockSignals(True)
        self._input.clear()
        self._input.blockSignals(False)
        self._input.setReadOnly(False)
        self._awaiting_clear = False
        self._refresh_repetitions()
        self._on_input_changed()
        self._input.setFocus()

    def _on_suggestion_accepted(self, _word: str) -> None:
        if self._awaiting_clear:
            return
        self._input.set_text_keep_cursor_at_end(self._session.accept_suggestion(self._input.toPlainText()))
        self._input.setFocus()

    def _on_paste_rejected(self) -> None:
        self._toast.show_message(
            "Typing Only Please",
            "Please type the mantra to gain the full spiritual benefit.",
            warning=True,
        )

    def _on_variant_changed(self, index: int) -> None:
        if index < 0:
            return
        variant = Variant(self._variant_combo.itemData(index))
        self._session.switch_scorer(MantraScorer(self._mantra.text(variant), variant))
        logger.info("Switched to %s variant", variant.value)
        self._refresh_mantra()
        self._reset_session()

    def _reset_session(self) -> None:
        self._clear_timer.stop()
        self._session.reset()
        self._complete_overlay.hide()
        self._input.setEnabled(True)
        self._clear_input()

    def _show_leaderboard(self) -> None:
        LeaderboardDialog(self._store, self._leaderboard_limit, self).exec()

    def _show_admin(self) -> None:
        if self._admin_service is None or not self._user_name:
            return
        AdminDialog(self._admin_service, self._user_name, self).exec()

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._session.offline:
            logger.warning("Closing with progress for %s kept locally only", self._session.user_key)
        super().closeEvent(event)
