"""Application entry point and setup for the Japa mantra trainer."""

import logging
import sys
from typing import Optional, Tuple

from PySide6.QtGui import QFont, QGuiApplication
from PySide6.QtWidgets import QApplication, QDialog

from japa.config import Settings, load_settings
from japa.core.accounts import AccountRegistry, AdminService
from japa.core.mantras import MantraRepository
from japa.core.progress import JsonProgressStore, ProgressStore
from japa.core.remote import RemoteTableStore
from japa.core.scoring import MantraScorer
from japa.core.session import MantraSession
from japa.ui.login_dialog import LoginDialog
from japa.ui.main_window import MainWindow

GUEST_KEY = "guest"


def configure_logging(level: str = "INFO") -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def configure_font(app: QApplication) -> None:
    """Prefer Devanagari-capable fonts, with emoji fonts as fallbacks."""
    app_font = QFont()
    app_font.setFamilies(
        [
            "Noto Sans Devanagari",  # Linux (common)
            "Nirmala UI",  # Windows
            "Kohinoor Devanagari",  # macOS
            "Noto Color Emoji",
            "Segoe UI Emoji",
            "Apple Color Emoji",
        ]
    )
    app_font.setPointSize(11)
    app.setFont(app_font)
    QGuiApplication.setFont(app_font)


def build_stores(settings: Settings) -> Tuple[ProgressStore, Optional[ProgressStore]]:
    """Return ``(primary, fallback)``; the local file is the fallback when a remote table is configured."""
    local = JsonProgressStore(settings.progress_path)
    if not settings.remote_enabled:
        return local, None
    remote = RemoteTableStore(settings.remote_url, settings.remote_key, table=settings.remote_table)
    logging.info("Using remote progress table %s", remote.url)
    return remote, local


def run() -> None:
    """Load settings, sign the user in and start the trainer window."""
    try:
        settings = load_settings()
    except ValueError as e:
        configure_logging()
        logging.error("Invalid configuration: %s", e)
        sys.exit(2)
    configure_logging(settings.log_level)

    app = QApplication(sys.argv)
    app.setApplicationName("Japa")
    app.setApplicationDisplayName("Mantra Harmony Trainer")
    configure_font(app)

    mantras = MantraRepository()
    mantra = mantras.default()
    store, fallback = build_stores(settings)

    directory = store if isinstance(store, RemoteTableStore) else None
    login = LoginDialog(AccountRegistry(settings.accounts_path, directory))
    user_name = login.user_name if login.exec() == QDialog.DialogCode.Accepted else None
    if user_name is None:
        # guests never touch the shared table
        store, fallback = JsonProgressStore(settings.progress_path), None

    variant = settings.default_variant
    session = MantraSession(
        MantraScorer(mantra.text(variant), variant),
        store,
        user_name or GUEST_KEY,
        fallback=fallback,
    )
    window = MainWindow(
        mantra,
        session,
        store,
        user_name=user_name,
        admin_service=AdminService(store, settings.admins),
        leaderboard_limit=settings.leaderboard_limit,
    )
    window.show()

    sys.exit(app.exec())
