"""Storage backends and the draft stores built on top of them."""

from .backends import FileStorage, MemoryStorage, SqlStorage, StorageBackend, build_storage
from .scheduling import AsyncioScheduler, Debouncer, ManualScheduler, Scheduler
from .draft_store import LocalDraftStore
from .drafts_index import DraftIndexStore

__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "FileStorage",
    "SqlStorage",
    "build_storage",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "Debouncer",
    "LocalDraftStore",
    "DraftIndexStore",
]
