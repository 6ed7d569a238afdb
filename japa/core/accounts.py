"""User accounts and admin corrections of stored progress."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import os
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from japa.core.achievements import check_achievements
from japa.core.progress import ProgressStore, StoreError, UserProgress

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 3
_HASH_ITERATIONS = 120_000


class AccountError(Exception):
    """Account or admin operation rejected; the message is shown to the user."""


def validate_name(name: str) -> str:
    """Return the stripped name or raise AccountError."""
    name = name.strip()
    if not name:
        raise AccountError("Please enter a name")
    if len(name) < MIN_NAME_LENGTH:
        raise AccountError(f"Name must be at least {MIN_NAME_LENGTH} characters long")
    return name


def validate_password(password: str) -> str:
    if not password.strip():
        raise AccountError("Please enter a password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AccountError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    salt = salt if salt is not None else os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _HASH_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_hex, digest_hex = stored.split("$", 1)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    return hmac.compare_digest(hash_password(password, salt), f"{salt_hex}${digest_hex}")


class AccountDirectory(Protocol):
    """Shared table of accounts, so names stay unique across devices."""

    def password_hash(self, user_key: str) -> Optional[str]:
        ...

    def create_user(self, user_key: str, password_hash: str) -> bool:
        ...


class AccountRegistry:
    """Name/password accounts kept in a JSON file (``{"accounts": {name: hash}}``).

    With a *directory* the shared table decides: registration must claim the
    name there and login checks the hash stored there. The local file then
    only caches hashes, so a user can still log in while the table is
    unreachable.
    """

    def __init__(self, file_path: Optional[Path] = None, directory: Optional[AccountDirectory] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else Path.home() / ".japa" / "accounts.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._directory = directory
        self._accounts = self._load()

    def exists(self, name: str) -> bool:
        return self._find(name.strip()) is not None

    def register(self, name: str, password: str) -> str:
        name = validate_name(name)
        validate_password(password)
        if self._find(name) is not None:
            raise AccountError("Username already taken, please choose a different one")
        hashed = hash_password(password)
        if self._directory is not None:
            try:
                created = self._directory.create_user(name, hashed)
            except StoreError as e:
                raise AccountError("Could not reach the user table, please try again") from e
            if not created:
                raise AccountError("Username already taken, please choose a different one")
        self._accounts[name] = hashed
        self._save()
        logger.info("Registered account %s", name)
        return name

    def login(self, name: str, password: str) -> str:
        """Return the registered spelling of *name* if the password matches."""
        name = name.strip()
        if self._directory is not None:
            try:
                stored = self._directory.password_hash(name)
            except StoreError as e:
                logger.warning("User table unreachable, checking cached accounts: %s", e)
            else:
                if stored is None or not verify_password(password, stored):
                    raise AccountError("Invalid username or password")
                self._remember(name, stored)
                return name
        canonical = self._find(name)
        if canonical is None or not verify_password(password, self._accounts[canonical]):
            raise AccountError("Invalid username or password")
        return canonical

    def _remember(self, name: str, stored: str) -> None:
        if self._accounts.get(name) == stored:
            return
        self._accounts[name] = stored
        try:
            self._save()
        except AccountError:
            logger.warning("Could not cache account %s in %s", name, self._file_path)

    def _find(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for existing in self._accounts:
            if existing.lower() == wanted:
                return existing
        return None

    def _load(self) -> Dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load accounts from %s: %s", self._file_path, e)
            return {}
        accounts = payload.get("accounts", {}) if isinstance(payload, dict) else {}
        if not isinstance(accounts, dict):
            return {}
        return {str(k): str(v) for k, v in accounts.items()}

    def _save(self) -> None:
        payload = {"accounts": self._accounts}
        try:
            self._file_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise AccountError("Could not save account, please try again") from e


def parse_count(raw: object) -> int:
    """Lenient integer parse for admin form fields: invalid or negative -> 0."""
    try:
        value = int(str(raw).strip())
    except ValueError:
        return 0
    return max(0, value)


class AdminService:
    def __init__(self, store: ProgressStore, admins: Iterable[str]) -> None:
        self._store = store
        self._admins = {a.strip().lower() for a in admins if a.strip()}

    def is_admin(self, name: Optional[str]) -> bool:
        return bool(name) and name.strip().lower() in self._admins

    def list_users(self) -> List[Tuple[str, UserProgress]]:
        try:
            records = self._store.all_records()
        except StoreError as e:
            raise AccountError("Failed to fetch users") from e
        return sorted(records.items(), key=lambda item: (-item[1].total_points, item[0].lower()))

    def update_user(
        self,
        admin_name: str,
        user_key: str,
        *,
        points: object,
        sessions: object,
        message: str = "",
        featured: bool = False,
    ) -> UserProgress:
        """Overwrite a user's stored values; achievements are re-checked, never removed."""
        if not self.is_admin(admin_name):
            raise AccountError("You don't have permission to access the admin panel")
        try:
            current = self._store.load(user_key)
        except StoreError as e:
            raise AccountError("Failed to fetch user data") from e
        updated = replace(
            current,
            total_points=parse_count(points),
            completed_sessions=parse_count(sessions),
            custom_message=message.strip(),
            is_featured=bool(featured),
            last_active=datetime.now(timezone.utc),
        )
        updated, _ = check_achievements(updated)
        if not self._store.save(user_key, updated):
            raise AccountError("Failed to update user data")
        logger.info(
            "%s updated %s: %d points, %d sessions",
            admin_name,
            user_key,
            updated.total_points,
            updated.completed_sessions,
        )
        return updated
