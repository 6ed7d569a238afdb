"""Progress store backed by a remote PostgREST table (e.g. a Supabase project)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from japa.core.progress import StoreError, UserProgress

logger = logging.getLogger(__name__)


def _eq(value: str) -> str:
    """PostgREST equality filter with the value double-quoted, so , ( ) stay literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'eq."{escaped}"'


class RemoteTableStore:
    """Reads and upserts user rows keyed by ``name`` in a REST table."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "users",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    @property
    def url(self) -> str:
        return self._url

    def load(self, user_key: str) -> UserProgress:
        rows = self._get({"select": "*", "name": _eq(user_key), "limit": "1"})
        if not rows:
            return UserProgress()
        return UserProgress.from_dict(rows[0])

    def save(self, user_key: str, record: UserProgress) -> bool:
        row: Dict[str, Any] = {"name": user_key, **record.to_dict()}
        if row["last_active"] is None:
            # let the table default fill it
            del row["last_active"]
        try:
            response = self._session.post(
                self._url,
                params={"on_conflict": "name"},
                json=row,
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Could not save progress for %s to %s: %s", user_key, self._url, e)
            return False
        return True

    def all_records(self) -> Dict[str, UserProgress]:
        rows = self._get({"select": "*", "order": "total_points.desc"})
        records: Dict[str, UserProgress] = {}
        for row in rows:
            name = row.get("name")
            if not name:
                continue
            records[str(name)] = UserProgress.from_dict(row)
        return records

    def password_hash(self, user_key: str) -> Optional[str]:
        """Stored password hash for *user_key*, or None if the row or hash is missing."""
        rows = self._get({"select": "name,password_hash", "name": _eq(user_key), "limit": "1"})
        if not rows:
            return None
        return rows[0].get("password_hash") or None

    def create_user(self, user_key: str, password_hash: str) -> bool:
        """Insert a new account row; False if the name is already taken."""
        try:
            response = self._session.post(
                self._url,
                json={"name": user_key, "password_hash": password_hash},
                headers={"Prefer": "return=minimal"},
                timeout=self._timeout,
            )
            if response.status_code == 409:
                return False
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Could not create account %s in %s: %s", user_key, self._url, e)
            raise StoreError(f"Could not write {self._url}: {e}") from e
        return True

    def _get(self, params: Dict[str, str]) -> list[Dict[str, Any]]:
        try:
            response = self._session.get(self._url, params=params, timeout=self._timeout)
            response.raise_for_status()
            rows = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Could not read %s: %s", self._url, e)
            raise StoreError(f"Could not read {self._url}: {e}") from e
        if not isinstance(rows, list):
            raise StoreError(f"Unexpected response from {self._url}: {rows!r}")
        return rows
