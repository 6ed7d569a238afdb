"""Admin dialog for manual correction of stored user values."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from japa.core.accounts import AccountError, AdminService
from japa.ui.colors import TrainerColors
from japa.ui.overlays import Toast, primary_button_style, secondary_button_style

_COLUMNS = ("Name", "Points", "Sessions", "Message", "Featured", "Achievements", "Last active", "")


class AdminDialog(QDialog):
    def __init__(self, service: AdminService, admin_name: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._service = service
        self._admin_name = admin_name
        self.setWindowTitle("Admin Panel")
        self.setMinimumSize(960, 560)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("👥 User Management")
        title.setStyleSheet(f"color: {TrainerColors.PRIMARY_DARK}; font-size: 22px; font-weight: 800;")
        header.addWidget(title)
        header.addStretch(1)
        refresh = QPushButton("Refresh")
        refresh.setStyleSheet(secondary_button_style())
        refresh.clicked.connect(self.refresh)
        header.addWidget(refresh)
        layout.addLayout(header)

        self._table = QTableWidget(0, len(_COLUMNS))
        self._table.setHorizontalHeaderLabels(list(_COLUMNS))
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        self._table.horizontalHeader().setSectionResizeMode(3, QHeaderView.ResizeMode.Stretch)
        self._table.verticalHeader().setVisible(False)
        layout.addWidget(self._table, 1)

        self._toast = Toast(self)
        self.refresh()

    def refresh(self) -> None:
        try:
            users = self._service.list_users()
        except AccountError as e:
            self._toast.show_message("Error", str(e), warning=True)
            return

        self._table.setRowCount(len(users))
        for row, (name, progress) in enumerate(users):
            name_item = QTableWidgetItem(name)
            name_item.setFlags(name_item.flags() & ~Qt.ItemFlag.ItemIsEditable)
            self._table.setItem(row, 0, name_item)

            points = QLineEdit(str(progress.total_points))
            sessions = QLineEdit(str(progress.completed_sessions))
            message = QLineEdit(progress.custom_message)
            featured = QCheckBox()
            featured.setChecked(progress.is_featured)
            self._table.setCellWidget(row, 1, points)
            self._table.setCellWidget(row, 2, sessions)
            self._table.setCellWidget(row, 3, message)
            self._table.setCellWidget(row, 4, featured)

            badges = ", ".join(a.badge for a in progress.sorted_achievements()) or "-"
            last_active = progress.last_active.strftime("%Y-%m-%d %H:%M") if progress.last_active else "-"
            for column, text in ((5, badges), (6, last_active)):
                item = QTableWidgetItem(text)
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                self._table.setItem(row, column, item)

            save = QPushButton("Save")
            save.setStyleSheet(primary_button_style())
            save.clicked.connect(
                lambda _checked=False, n=name, p=points, s=sessions, m=message, f=featured: self._save(n, p, s, m, f)
            )
            self._table.setCellWidget(row, 7, save)

    def _save(self, name: str, points: QLineEdit, sessions: QLineEdit, message: QLineEdit, featured: QCheckBox) -> None:
        try:
            self._service.update_user(
                self._admin_name,
                name,
                points=points.text(),
                sessions=sessions.text(),
                message=message.text(),
                featured=featured.isChecked(),
            )
        except AccountError as e:
            self._toast.show_message("Error", str(e), warning=True)
            return
        self._toast.show_message("Success", f"{name} updated successfully")
        self.refresh()
