"""Sign-in dialog: register, log in, or continue as a local guest."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from japa.core.accounts import AccountError, AccountRegistry
from japa.ui.colors import TrainerColors
from japa.ui.overlays import primary_button_style, secondary_button_style


class LoginDialog(QDialog):
    """Returns the signed-in name via ``user_name``; None means guest."""

    def __init__(self, registry: AccountRegistry, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._registry = registry
        self._is_login = False
        self.user_name: Optional[str] = None
        self.setWindowTitle("Join the Leaderboard")
        self.setMinimumWidth(380)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 22, 24, 22)
        layout.setSpacing(12)

        self._title = QLabel("")
        self._title.setStyleSheet(f"color: {TrainerColors.PRIMARY_DARK}; font-size: 20px; font-weight: 800;")
        layout.addWidget(self._title)

        self._name = QLineEdit()
        self._name.setPlaceholderText("Your name")
        layout.addWidget(self._name)
        self._password = QLineEdit()
        self._password.setPlaceholderText("Password")
        self._password.setEchoMode(QLineEdit.EchoMode.Password)
        self._password.returnPressed.connect(self._submit)
        layout.addWidget(self._password)

        self._error = QLabel("")
        self._error.setWordWrap(True)
        self._error.setStyleSheet(f"color: {TrainerColors.WARNING}; font-size: 12px;")
        self._error.hide()
        layout.addWidget(self._error)

        self._submit_button = QPushButton("")
        self._submit_button.setStyleSheet(primary_button_style())
        self._submit_button.clicked.connect(self._submit)
        layout.addWidget(self._submit_button)

        row = QHBoxLayout()
        self._toggle = QPushButton("")
        self._toggle.setFlat(True)
        self._toggle.setCursor(Qt.CursorShape.PointingHandCursor)
        self._toggle.clicked.connect(self._toggle_mode)
        row.addWidget(self._toggle)
        row.addStretch(1)
        skip = QPushButton("Continue as guest")
        skip.setStyleSheet(secondary_button_style())
        skip.clicked.connect(self.reject)
        row.addWidget(skip)
        layout.addLayout(row)

        self._apply_mode()

    def _apply_mode(self) -> None:
        self._title.setText("Welcome back" if self._is_login else "Create an account")
        self._submit_button.setText("Log in" if self._is_login else "Register")
        self._toggle.setText("Need an account? Register" if self._is_login else "Have an account? Log in")
        self._error.hide()

    def _toggle_mode(self) -> None:
        self._is_login = not self._is_login
        self._apply_mode()

    def _submit(self) -> None:
        try:
            if self._is_login:
                self.user_name = self._registry.login(self._name.text(), self._password.text())
            else:
                self.user_name = self._registry.register(self._name.text(), self._password.text())
        except AccountError as e:
            self._error.setText(str(e))
            self._error.show()
            return
        self.accept()
