"""In-window overlays: session completed card and transient toasts."""

from __future__ import annotations

import html
from typing import Callable, Optional, Sequence

from PySide6.QtCore import Qt, QEvent, QTimer, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from japa.core.achievements import Achievement
from japa.ui.colors import TrainerColors


def _card_container(object_name: str) -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(380)
    container.setMaximumWidth(480)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: #ffffff;
            border: 1px solid rgba(230, 81, 0, 0.15);
            border-radius: 20px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(20)
    shadow.setOffset(0, 6)
    shadow.setColor(QColor(90, 40, 0, 30))
    container.setGraphicsEffect(shadow)
    return container


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.2);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def primary_button_style() -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {TrainerColors.PRIMARY_LIGHT}, stop:1 {TrainerColors.PRIMARY});
            color: white;
            padding: 10px 16px;
            border: none;
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{ background: {TrainerColors.PRIMARY}; }}
        QPushButton:disabled {{ background: {TrainerColors.BADGE_LOCKED}; }}
    """


def secondary_button_style() -> str:
    return f"""
        QPushButton {{
            background: #fffaf3;
            color: {TrainerColors.TEXT_PRIMARY};
            padding: 10px 16px;
            border: 1px solid {TrainerColors.BADGE_LOCKED};
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{
            border-color: {TrainerColors.PRIMARY};
            color: {TrainerColors.PRIMARY};
        }}
    """


class _ParentSizedOverlay(QWidget):
    """Overlay that tracks the geometry of its parent while visible."""

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class SessionCompleteOverlay(_ParentSizedOverlay):
    """Celebration card shown after the third repetition."""

    closed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(_overlay_background(self, self._close), 0, 0)

        container = _card_container("sessionCompleteContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(28, 24, 28, 24)
        content.setSpacing(14)

        title = QLabel("🎉 Session Complete!")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(f"color: {TrainerColors.PRIMARY}; font-size: 22px; font-weight: 800;")
        content.addWidget(title)

        self._message = QLabel("")
        self._message.setAlignment(Qt.AlignCenter)
        self._message.setWordWrap(True)
        self._message.setStyleSheet(f"color: {TrainerColors.TEXT_PRIMARY}; font-size: 14px;")
        content.addWidget(self._message)

        self._achievements = QLabel("")
        self._achievements.setAlignment(Qt.AlignCenter)
        self._achievements.setWordWrap(True)
        self._achievements.setStyleSheet(f"color: {TrainerColors.MAROON}; font-size: 14px; font-weight: 700;")
        content.addWidget(self._achievements)

        button = QPushButton("Continue")
        button.setStyleSheet(primary_button_style())
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.clicked.connect(self._close)
        content.addWidget(button)

        layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)
        self.hide()

    def show_result(self, points: int, repetitions: int, unlocked: Sequence[Achievement]) -> None:
        self._message.setText(f"You earned {points} points for completing {repetitions} repetitions!")
        lines = [f"🏆 Achievement Unlocked: {a.title} ({a.threshold} points)" for a in unlocked]
        self._achievements.setText("\n".join(lines))
        self._achievements.setVisible(bool(lines))
        self.show()
        self.raise_()

    def _close(self) -> None:
        self.hide()
        self.closed.emit()


class Toast(QLabel):
    """Short non-blocking message pinned to the bottom of the parent."""

    def __init__(self, parent: QWidget) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setWordWrap(True)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.hide)
        self.hide()

    def show_message(self, title: str, description: str = "", *, warning: bool = False, msec: int = 3000) -> None:
        background = TrainerColors.WARNING if warning else TrainerColors.TEXT_PRIMARY
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {background};
                color: white;
                border-radius: 12px;
                padding: 10px 18px;
                font-size: 13px;
            }}
            """
        )
        text = f"<b>{html.escape(title)}</b>"
        if description:
            text += f"<br>{html.escape(description)}"
        self.setText(text)
        parent = self.parentWidget()
        width = min(420, parent.width() - 40)
        self.setFixedWidth(max(200, width))
        self.adjustSize()
        self.move((parent.width() - self.width()) // 2, parent.height() - self.height() - 32)
        self.show()
        self.raise_()
        self._timer.start(msec)
