"""Collection of drafts backing the listing view."""

from __future__ import annotations

import logging
import uuid
from typing import Callable, List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from notecraft.core.draft import enrich, now_ms
from notecraft.core.exceptions import StorageError
from notecraft.core.metrics import EXCERPT_LENGTH
from notecraft.core.models import DraftFull, DraftMeta

from .backends import StorageBackend

DRAFTS_KEY = "notecraft-drafts-v2"

logger = logging.getLogger(__name__)

_collection = TypeAdapter(List[DraftFull])


def new_draft_id() -> str:
    return uuid.uuid4().hex[:12]


def _detached(drafts: List[DraftFull]) -> List[DraftFull]:
    # Callers get copies so the cached records only change through save_draft
    return [draft.model_copy(deep=True) for draft in drafts]


class DraftIndexStore:
    """Every draft persisted as one blob, most recently saved first.

    Creation, deletion and saves write synchronously. Derived fields of a
    saved draft are always recomputed from its content and sources.
    """

    def __init__(
        self,
        storage: StorageBackend,
        *,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_draft_id,
        excerpt_length: int = EXCERPT_LENGTH,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self.id_factory = id_factory
        self.excerpt_length = excerpt_length
        self._drafts: List[DraftFull] = []
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def drafts(self) -> List[DraftFull]:
        self._ensure_loaded()
        return _detached(self._drafts)

    def load(self) -> List[DraftFull]:
        self._drafts = self._load_all()
        self._loaded = True
        return _detached(self._drafts)

    def list_drafts(self) -> List[DraftMeta]:
        self._ensure_loaded()
        return [draft.summary() for draft in self._drafts]

    def create_draft(self) -> str:
        self._ensure_loaded()
        draft = DraftFull.blank(self.id_factory(), self.clock())
        self._drafts = [draft, *self._drafts]
        self._save_all()
        logger.info("Draft created", extra={"draft_id": draft.id})
        return draft.id

    def delete_draft(self, draft_id: str) -> None:
        self._ensure_loaded()
        self._drafts = [d for d in self._drafts if d.id != draft_id]
        self._save_all()

    def save_draft(self, draft: DraftFull) -> DraftFull:
        """Upsert ``draft`` with a fresh timestamp and derived fields."""

        self._ensure_loaded()
        enriched = enrich(draft, self.clock(), self.excerpt_length)
        drafts = list(self._drafts)
        for idx, existing in enumerate(drafts):
            if existing.id == enriched.id:
                drafts[idx] = enriched
                break
        else:
            drafts.insert(0, enriched)
        # sorted() is stable, equal timestamps keep their relative order
        self._drafts = sorted(drafts, key=lambda d: d.updated_at, reverse=True)
        self._save_all()
        return enriched.model_copy(deep=True)

    def get_draft(self, draft_id: str) -> Optional[DraftFull]:
        """Look up a draft in storage, bypassing the in-memory list."""
        for draft in self._load_all():
            if draft.id == draft_id:
                return draft
        return None

    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _load_all(self) -> List[DraftFull]:
        try:
            raw = self.storage.get_item(DRAFTS_KEY)
        except StorageError:
            logger.warning("Storage read failed", extra={"key": DRAFTS_KEY}, exc_info=True)
            return []
        if not raw:
            return []
        try:
            return _collection.validate_json(raw)
        except PydanticValidationError:
            logger.warning("Ignoring unreadable draft collection", extra={"key": DRAFTS_KEY})
            return []

    def _save_all(self) -> None:
        try:
            self.storage.set_item(DRAFTS_KEY, _collection.dump_json(self._drafts, by_alias=True).decode())
        except StorageError:
            logger.warning("Storage write failed", extra={"key": DRAFTS_KEY}, exc_info=True)


__all__ = ["DraftIndexStore", "DRAFTS_KEY", "new_draft_id"]
