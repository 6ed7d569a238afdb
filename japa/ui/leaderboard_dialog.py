"""Leaderboard dialog listing the top users."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from japa.core.leaderboard import LeaderboardEntry, rank
from japa.core.progress import ProgressStore, StoreError
from japa.ui.colors import TrainerColors, blend_hex
from japa.ui.overlays import primary_button_style

logger = logging.getLogger(__name__)

_ROW_TINTS = {1: TrainerColors.GOLD, 2: TrainerColors.SILVER, 3: TrainerColors.BRONZE}


class LeaderboardRow(QFrame):
    def __init__(self, entry: LeaderboardEntry, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("leaderboardRow")
        tint = _ROW_TINTS.get(entry.rank)
        background = blend_hex(tint, "#FFFFFF", 0.8) if tint else "#ffffff"
        self.setStyleSheet(
            f"""
            QFrame#leaderboardRow {{
                background: {background};
                border: 1px solid {TrainerColors.BADGE_LOCKED};
                border-radius: 12px;
            }}
            """
        )
        layout = QHBoxLayout(self)
        layout.setContentsMargins(14, 10, 14, 10)
        layout.setSpacing(12)

        rank_label = QLabel(entry.medal or str(entry.rank))
        rank_label.setFixedWidth(32)
        rank_label.setAlignment(Qt.AlignCenter)
        rank_label.setStyleSheet("font-size: 20px; font-weight: 800;")
        layout.addWidget(rank_label)

        name_box = QVBoxLayout()
        name = QLabel(f"⭐ {entry.name}" if entry.is_featured else entry.name)
        name.setStyleSheet(f"color: {TrainerColors.TEXT_PRIMARY}; font-size: 15px; font-weight: 700;")
        sessions = QLabel(f"{entry.completed_sessions} sessions completed")
        sessions.setStyleSheet(f"color: {TrainerColors.TEXT_MUTED}; font-size: 12px;")
        name_box.addWidget(name)
        name_box.addWidget(sessions)
        layout.addLayout(name_box, 1)

        points = QLabel(f"{entry.total_points} points")
        points.setStyleSheet(f"color: {TrainerColors.PRIMARY}; font-size: 17px; font-weight: 800;")
        layout.addWidget(points, 0, Qt.AlignRight)


class LeaderboardDialog(QDialog):
    def __init__(self, store: ProgressStore, limit: int = 10, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._store = store
        self._limit = limit
        self.setWindowTitle("Leaderboard")
        self.setMinimumSize(520, 560)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("🏆 Leaderboard")
        title.setStyleSheet(f"color: {TrainerColors.PRIMARY_DARK}; font-size: 22px; font-weight: 800;")
        header.addWidget(title)
        header.addStretch(1)
        refresh = QPushButton("Refresh")
        refresh.setStyleSheet(primary_button_style())
        refresh.clicked.connect(self.refresh)
        header.addWidget(refresh)
        layout.addLayout(header)

        self._rows = QVBoxLayout()
        self._rows.setSpacing(8)
        rows_container = QWidget()
        rows_container.setLayout(self._rows)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setWidget(rows_container)
        layout.addWidget(scroll, 1)

        self.refresh()

    def refresh(self) -> None:
        while self._rows.count():
            item = self._rows.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        try:
            entries = rank(self._store.all_records(), self._limit)
        except StoreError as e:
            logger.warning("Failed to load leaderboard: %s", e)
            self._rows.addWidget(self._message("Failed to load leaderboard"))
            self._rows.addStretch(1)
            return

        if not entries:
            self._rows.addWidget(self._message("No users found. Be the first to start training!"))
        for entry in entries:
            self._rows.addWidget(LeaderboardRow(entry))
        self._rows.addStretch(1)

    @staticmethod
    def _message(text: str) -> QLabel:
        label = QLabel(text)
        label.setAlignment(Qt.AlignCenter)
        label.setStyleSheet(f"color: {TrainerColors.TEXT_MUTED}; font-size: 14px; padding: 24px;")
        return label
