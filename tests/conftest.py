import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Ensure project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from apps.api.main import app, get_draft_store, get_index_store, get_llm_client
from notecraft.core.demo import DEMO_DRAFT
from notecraft.core.exceptions import StorageError
from notecraft.storage import DraftIndexStore, LocalDraftStore, ManualScheduler, MemoryStorage
from notecraft.storage.backends import StorageBackend


class RecordingStorage(MemoryStorage):
    """Memory storage that remembers every write."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        super().__init__(initial)
        self.writes: List[Tuple[str, str]] = []

    def set_item(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        super().set_item(key, value)

    def writes_for(self, key: str) -> List[str]:
        return [value for k, value in self.writes if k == key]


class BrokenStorage(StorageBackend):
    """Storage whose every operation fails, like a full or disabled medium."""

    def get_item(self, key: str) -> Optional[str]:
        raise StorageError("unavailable")

    def set_item(self, key: str, value: str) -> None:
        raise StorageError("quota exceeded")

    def remove_item(self, key: str) -> None:
        raise StorageError("unavailable")


@pytest.fixture()
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def llm() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def client(storage, scheduler, llm):
    """FastAPI test client with dependencies overridden."""

    draft_store = LocalDraftStore(storage, scheduler, demo_draft=DEMO_DRAFT)
    index_store = DraftIndexStore(storage)
    app.dependency_overrides[get_draft_store] = lambda: draft_store
    app.dependency_overrides[get_index_store] = lambda: index_store
    app.dependency_overrides[get_llm_client] = lambda: llm

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
