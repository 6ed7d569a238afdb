"""Tests for japa.core.accounts – registration, login and admin edits."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from japa.core.accounts import (
    AccountError,
    AccountRegistry,
    AdminService,
    hash_password,
    parse_count,
    validate_name,
    validate_password,
    verify_password,
)
from japa.core.achievements import Achievement
from japa.core.progress import StoreError, UserProgress


@pytest.fixture()
def accounts_file(tmp_path: Path) -> Path:
    return tmp_path / "accounts.json"


@pytest.fixture()
def registry(accounts_file: Path) -> AccountRegistry:
    return AccountRegistry(accounts_file)


# ---------------------------------------------------------------------------
# Validation and hashing
# ---------------------------------------------------------------------------

class TestValidation:
    def test_name_is_stripped(self):
        assert validate_name("  Asha ") == "Asha"

    @pytest.mark.parametrize(
        "name,message",
        [("", "Please enter a name"), ("   ", "Please enter a name"), ("A", "at least 2 characters")],
    )
    def test_bad_names(self, name: str, message: str):
        with pytest.raises(AccountError, match=message):
            validate_name(name)

    def test_bad_passwords(self):
        with pytest.raises(AccountError, match="Please enter a password"):
            validate_password("")
        with pytest.raises(AccountError, match="at least 3 characters"):
            validate_password("ab")

    def test_minimum_password(self):
        assert validate_password("abc") == "abc"


class TestPasswordHash:
    def test_verifies(self):
        stored = hash_password("secret")
        assert verify_password("secret", stored)
        assert not verify_password("Secret", stored)

    def test_salted(self):
        assert hash_password("secret") != hash_password("secret")

    def test_not_plaintext(self):
        assert "secret" not in hash_password("secret")

    def test_garbage_stored_value(self):
        assert not verify_password("secret", "plaintext")
        assert not verify_password("secret", "zz$00")


# ---------------------------------------------------------------------------
# AccountRegistry
# ---------------------------------------------------------------------------

class TestAccountRegistry:
    def test_register_then_login(self, registry: AccountRegistry):
        assert registry.register(" Asha ", "om123") == "Asha"
        assert registry.login("Asha", "om123") == "Asha"

    def test_login_returns_registered_spelling(self, registry: AccountRegistry):
        registry.register("Darkskull", "pass")
        assert registry.login("darkskull", "pass") == "Darkskull"

    def test_duplicate_name_rejected(self, registry: AccountRegistry):
        registry.register("Asha", "om123")
        with pytest.raises(AccountError, match="already taken"):
            registry.register("asha", "other")

    def test_wrong_password(self, registry: AccountRegistry):
        registry.register("Asha", "om123")
        with pytest.raises(AccountError, match="Invalid username or password"):
            registry.login("Asha", "nope")

    def test_unknown_user(self, registry: AccountRegistry):
        with pytest.raises(AccountError, match="Invalid username or password"):
            registry.login("ghost", "whatever")

    def test_exists(self, registry: AccountRegistry):
        registry.register("Asha", "om123")
        assert registry.exists("ASHA")
        assert not registry.exists("Ravi")

    def test_persisted_hashed(self, registry: AccountRegistry, accounts_file: Path):
        registry.register("Asha", "om123")
        data = json.loads(accounts_file.read_text(encoding="utf-8"))
        assert "Asha" in data["accounts"]
        assert data["accounts"]["Asha"] != "om123"
        assert AccountRegistry(accounts_file).login("Asha", "om123") == "Asha"

    def test_corrupt_file_is_empty(self, accounts_file: Path):
        accounts_file.write_text("not json", encoding="utf-8")
        assert not AccountRegistry(accounts_file).exists("Asha")


# ---------------------------------------------------------------------------
# Shared account table
# ---------------------------------------------------------------------------

class FakeDirectory:
    """Shared account table: name -> stored hash (None for rows without one)."""

    def __init__(self) -> None:
        self.rows: dict[str, str | None] = {}
        self.unreachable = False

    def password_hash(self, user_key: str) -> str | None:
        if self.unreachable:
            raise StoreError("table unreachable")
        return self.rows.get(user_key)

    def create_user(self, user_key: str, password_hash: str) -> bool:
        if self.unreachable:
            raise StoreError("table unreachable")
        if user_key in self.rows:
            return False
        self.rows[user_key] = password_hash
        return True


class TestSharedAccounts:
    @pytest.fixture()
    def directory(self) -> FakeDirectory:
        return FakeDirectory()

    def test_register_claims_name_in_shared_table(self, accounts_file: Path, directory: FakeDirectory):
        AccountRegistry(accounts_file, directory).register("Asha", "om123")
        assert verify_password("om123", directory.rows["Asha"])

    def test_name_taken_on_another_device(self, accounts_file: Path, directory: FakeDirectory):
        directory.rows["Darkskull"] = hash_password("theirs")
        registry = AccountRegistry(accounts_file, directory)
        with pytest.raises(AccountError, match="already taken"):
            registry.register("Darkskull", "mine")
        assert not registry.exists("Darkskull")

    def test_progress_row_without_password_blocks_name(self, accounts_file: Path, directory: FakeDirectory):
        directory.rows["legacy"] = None
        registry = AccountRegistry(accounts_file, directory)
        with pytest.raises(AccountError, match="already taken"):
            registry.register("legacy", "pass")
        with pytest.raises(AccountError, match="Invalid username or password"):
            registry.login("legacy", "pass")

    def test_login_on_second_device(self, tmp_path: Path, directory: FakeDirectory):
        AccountRegistry(tmp_path / "first.json", directory).register("Asha", "om123")
        other = AccountRegistry(tmp_path / "second.json", directory)
        assert other.login("Asha", "om123") == "Asha"
        assert other.exists("Asha")

    def test_local_only_account_rejected(self, accounts_file: Path, directory: FakeDirectory):
        AccountRegistry(accounts_file).register("Darkskull", "mine")
        registry = AccountRegistry(accounts_file, directory)
        with pytest.raises(AccountError, match="Invalid username or password"):
            registry.login("Darkskull", "mine")

    def test_wrong_password_against_shared_hash(self, accounts_file: Path, directory: FakeDirectory):
        directory.rows["Asha"] = hash_password("om123")
        with pytest.raises(AccountError, match="Invalid username or password"):
            AccountRegistry(accounts_file, directory).login("Asha", "nope")

    def test_register_needs_reachable_table(self, accounts_file: Path, directory: FakeDirectory):
        directory.unreachable = True
        registry = AccountRegistry(accounts_file, directory)
        with pytest.raises(AccountError, match="Could not reach"):
            registry.register("Asha", "om123")
        assert not registry.exists("Asha")

    def test_cached_login_while_unreachable(self, accounts_file: Path, directory: FakeDirectory):
        AccountRegistry(accounts_file, directory).register("Asha", "om123")
        directory.unreachable = True
        assert AccountRegistry(accounts_file, directory).login("Asha", "om123") == "Asha"


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class TestParseCount:
    @pytest.mark.parametrize(
        "raw,expected",
        [("42", 42), (" 7 ", 7), (15, 15), ("-3", 0), ("abc", 0), ("", 0), (None, 0), ("1.5", 0)],
    )
    def test_values(self, raw, expected):
        assert parse_count(raw) == expected


class TestAdminService:
    @pytest.fixture()
    def service(self, memory_store) -> AdminService:
        return AdminService(memory_store, ["Kunj thakur", "Darkskull"])

    def test_is_admin(self, service: AdminService):
        assert service.is_admin("darkskull")
        assert service.is_admin(" Kunj thakur ")
        assert not service.is_admin("Asha")
        assert not service.is_admin(None)
        assert not service.is_admin("")

    def test_list_users_sorted(self, service: AdminService, memory_store):
        memory_store.records.update(
            {"b": UserProgress(total_points=10), "a": UserProgress(total_points=10), "c": UserProgress(total_points=50)}
        )
        assert [name for name, _ in service.list_users()] == ["c", "a", "b"]

    def test_list_users_failure(self, service: AdminService, memory_store):
        memory_store.fail_loads = True
        with pytest.raises(AccountError, match="Failed to fetch users"):
            service.list_users()

    def test_non_admin_rejected(self, service: AdminService, memory_store):
        with pytest.raises(AccountError, match="permission"):
            service.update_user("Asha", "Asha", points=1000, sessions=100)
        assert memory_store.save_calls == []

    def test_update_overwrites_fields(self, service: AdminService, memory_store):
        memory_store.records["Asha"] = UserProgress(total_points=20, completed_sessions=2)
        updated = service.update_user(
            "Darkskull", "Asha", points="150", sessions="15", message=" Well done ", featured=True
        )
        assert updated.total_points == 150
        assert updated.completed_sessions == 15
        assert updated.custom_message == "Well done"
        assert updated.is_featured is True
        assert updated.last_active is not None
        assert memory_store.records["Asha"] == updated

    def test_update_unlocks_achievements(self, service: AdminService):
        updated = service.update_user("Darkskull", "Asha", points=600, sessions=60)
        assert updated.achievements == {Achievement.SANSKRIT_LEARNER, Achievement.BRONZE_MANTRA_MEDAL}

    def test_lowering_points_keeps_achievements(self, service: AdminService, memory_store):
        memory_store.records["Asha"] = UserProgress(
            total_points=120, achievements=frozenset({Achievement.SANSKRIT_LEARNER})
        )
        updated = service.update_user("Darkskull", "Asha", points=0, sessions=0)
        assert Achievement.SANSKRIT_LEARNER in updated.achievements

    def test_invalid_numbers_become_zero(self, service: AdminService):
        updated = service.update_user("Darkskull", "Asha", points="lots", sessions="-4")
        assert updated.total_points == 0
        assert updated.completed_sessions == 0

    def test_load_failure(self, service: AdminService, memory_store):
        memory_store.fail_loads = True
        with pytest.raises(AccountError, match="Failed to fetch user data"):
            service.update_user("Darkskull", "Asha", points=1, sessions=1)

    def test_save_failure(self, service: AdminService, memory_store):
        memory_store.failing_saves = 1
        with pytest.raises(AccountError, match="Failed to update user data"):
            service.update_user("Darkskull", "Asha", points=1, sessions=1)
