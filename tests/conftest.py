"""Shared fixtures: an in-memory progress store with switchable failures."""

from __future__ import annotations

from typing import Dict, List, Tuple

import pytest

from japa.core.progress import StoreError, UserProgress


class InMemoryStore:
    def __init__(self) -> None:
        self.records: Dict[str, UserProgress] = {}
        self.save_calls: List[Tuple[str, UserProgress]] = []
        self.failing_saves = 0  # number of upcoming saves that fail; -1 fails forever
        self.fail_loads = False

    def load(self, user_key: str) -> UserProgress:
        if self.fail_loads:
            raise StoreError("table unreachable")
        return self.records.get(user_key, UserProgress())

    def save(self, user_key: str, record: UserProgress) -> bool:
        self.save_calls.append((user_key, record))
        if self.failing_saves:
            if self.failing_saves > 0:
                self.failing_saves -= 1
            return False
        self.records[user_key] = record
        return True

    def all_records(self) -> Dict[str, UserProgress]:
        if self.fail_loads:
            raise StoreError("table unreachable")
        return dict(self.records)


@pytest.fixture()
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def local_store() -> InMemoryStore:
    """Second in-memory store used as the local fallback."""
    return InMemoryStore()
