"""Typing input that refuses pasted text, and the tappable suggestion chip."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QMimeData, Signal
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QPlainTextEdit, QPushButton, QWidget

from japa.ui.colors import TrainerColors


class MantraInput(QPlainTextEdit):
    """Multi-line input that only accepts typed characters.

    Paste and drop are swallowed and reported through ``pasteRejected`` so
    the window can tell the user to type instead.
    """

    pasteRejected = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAcceptDrops(False)
        self.setTabChangesFocus(True)
        self.setMinimumHeight(120)
        self.setStyleSheet(
            f"""
            QPlainTextEdit {{
                background: white;
                color: {TrainerColors.TEXT_PRIMARY};
                border: 2px solid {TrainerColors.PRIMARY_LIGHT};
                border-radius: 14px;
                padding: 10px;
                font-size: 20px;
            }}
            QPlainTextEdit:disabled {{
                background: {TrainerColors.BG_MIDDLE};
            }}
            """
        )

    def canInsertFromMimeData(self, source: QMimeData) -> bool:
        return False

    def insertFromMimeData(self, source: QMimeData) -> None:
        self.pasteRejected.emit()

    def set_text_keep_cursor_at_end(self, text: str) -> None:
        self.setPlainText(text)
        self.moveCursor(QTextCursor.MoveOperation.End)


class SuggestionChip(QPushButton):
    """Shows the next expected word; hidden when there is nothing to suggest."""

    suggestionAccepted = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._word = ""
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.setStyleSheet(
            f"""
            QPushButton {{
                background: {TrainerColors.BG_TOP};
                color: {TrainerColors.PRIMARY_DARK};
                border: 1px dashed {TrainerColors.PRIMARY_LIGHT};
                border-radius: 14px;
                padding: 6px 16px;
                font-size: 16px;
                font-weight: 700;
            }}
            QPushButton:hover {{ background: {TrainerColors.BG_MIDDLE}; }}
            """
        )
        self.clicked.connect(self._on_clicked)
        self.set_word("")

    @property
    def word(self) -> str:
        return self._word

    def set_word(self, word: str) -> None:
        self._word = word
        self.setText(f"💡 {word}" if word else "")
        self.setVisible(bool(word))

    def _on_clicked(self) -> None:
        if self._word:
            self.suggestionAccepted.emit(self._word)
