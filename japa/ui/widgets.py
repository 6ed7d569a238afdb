"""Trainer widgets: background, glass cards, progress bar, stat cards, badges."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QPoint
from PySide6.QtGui import QColor, QFont, QLinearGradient, QPainter, QRadialGradient
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from japa.ui.colors import TrainerColors, blend_hex
from japa.ui.models import BadgeState


class TrainerBackground(QWidget):
    """Gradient background with soft glows and faint Devanagari syllables."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        gradient = QLinearGradient(0, 0, self.width(), self.height())
        gradient.setColorAt(0.0, QColor(TrainerColors.BG_TOP))
        gradient.setColorAt(0.5, QColor(TrainerColors.BG_MIDDLE))
        gradient.setColorAt(1.0, QColor(TrainerColors.BG_BOTTOM))
        painter.fillRect(self.rect(), gradient)

        painter.setPen(Qt.NoPen)
        for x_ratio, y_ratio, radius in [(0.85, 0.15, 220), (0.12, 0.82, 170), (0.7, 0.62, 80)]:
            radial = QRadialGradient(self.width() * x_ratio, self.height() * y_ratio, radius)
            radial.setColorAt(0, QColor(255, 255, 255, 60))
            radial.setColorAt(1, QColor(255, 255, 255, 0))
            painter.setBrush(radial)
            painter.drawEllipse(QPoint(int(self.width() * x_ratio), int(self.height() * y_ratio)), radius, radius)

        painter.setOpacity(0.06)
        font = painter.font()
        font.setPointSize(90)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor(TrainerColors.PRIMARY_DARK))
        for glyph, x, y in [("ॐ", 0.08, 0.22), ("श्री", 0.82, 0.35), ("ॐ", 0.78, 0.86), ("स्वः", 0.14, 0.78)]:
            painter.drawText(int(self.width() * x), int(self.height() * y), glyph)


class GlassCard(QFrame):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("glassCard")
        self.setStyleSheet(
            f"""
            QFrame#glassCard {{
                background: {TrainerColors.CARD_BG};
                border: 1px solid {TrainerColors.CARD_BORDER};
                border-radius: 20px;
            }}
            """
        )
        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(30)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(90, 40, 0, 40))
        self.setGraphicsEffect(shadow)


class RoundedProgressBar(QWidget):
    """Rounded gradient progress bar with optional percentage on the fill."""

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        show_percentage: bool = False,
        height: int = 12,
    ) -> None:
        super().__init__(parent)
        self._value = 0
        self._max_value = 100
        self._color_start = TrainerColors.PRIMARY_LIGHT
        self._color_end = TrainerColors.PRIMARY
        self._show_percentage = show_percentage
        self.setFixedHeight(height)
        self.setMinimumWidth(100)

    def set_progress(self, value: int, max_value: int = 100, color: Optional[str] = None) -> None:
        self._max_value = max(1, int(max_value))
        self._value = max(0, min(int(value), self._max_value))
        if color:
            self._color_start = blend_hex(color, "#FFFFFF", 0.25)
            self._color_end = color
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setBrush(QColor(TrainerColors.PROGRESS_TRACK))
        painter.setPen(Qt.NoPen)
        radius = min(8, self.height() // 2)
        painter.drawRoundedRect(0, 0, self.width(), self.height(), radius, radius)

        progress_width = int((self._value / self._max_value) * self.width())
        if progress_width <= 0:
            return
        gradient = QLinearGradient(0, 0, progress_width, 0)
        gradient.setColorAt(0, QColor(self._color_start))
        gradient.setColorAt(1, QColor(self._color_end))
        painter.setBrush(gradient)
        painter.drawRoundedRect(0, 0, progress_width, self.height(), radius, radius)

        if self._show_percentage:
            font = painter.font()
            font.setPointSize(max(8, self.height() - 5))
            font.setWeight(QFont.Weight.DemiBold)
            painter.setFont(font)
            painter.setPen(QColor("#ffffff"))
            pct = round((self._value / self._max_value) * 100)
            painter.drawText(0, 0, progress_width, self.height(), Qt.AlignCenter, f"{pct}%")


class StatCard(QFrame):
    def __init__(self, icon: str, label: str, value: str, bg_color: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("statCard")
        self.setStyleSheet(
            f"""
            QFrame#statCard {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 {bg_color}, stop:1 {QColor(bg_color).darker(112).name()});
                border-radius: 16px;
                border: none;
            }}
            """
        )
        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 14, 18, 14)
        layout.setSpacing(4)
        label_widget = QLabel(f"{icon} {label}")
        label_widget.setStyleSheet("color: rgba(255,255,255,0.92); font-size: 12px; font-weight: 600;")
        layout.addWidget(label_widget)
        self.value_label = QLabel(str(value))
        self.value_label.setStyleSheet("color: white; font-size: 28px; font-weight: 900;")
        layout.addWidget(self.value_label)

    def set_value(self, value: object) -> None:
        self.value_label.setText(str(value))


class AchievementBadge(QLabel):
    """Pill label for one achievement, highlighted once earned."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setFixedHeight(30)

    def set_state(self, state: BadgeState) -> None:
        self.setText(state.text)
        self.setToolTip(f"{state.achievement.badge}: {state.achievement.threshold} points")
        background = TrainerColors.BADGE_EARNED if state.earned else TrainerColors.BADGE_LOCKED
        color = "white" if state.earned else TrainerColors.TEXT_SECONDARY
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {background};
                color: {color};
                border-radius: 15px;
                padding: 4px 14px;
                font-size: 12px;
                font-weight: 700;
            }}
            """
        )
