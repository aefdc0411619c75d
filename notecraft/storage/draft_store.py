"""Persistence of the single active draft with debounced writes."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from notecraft.core.exceptions import StorageError
from notecraft.core.models import Draft, Source
from notecraft.core.sources import add_source, remove_source

from .backends import StorageBackend
from .scheduling import Debouncer, Scheduler

DRAFT_KEY = "notecraft-draft"
VISITED_KEY = "notecraft-visited"
DEBOUNCE_MS = 500

logger = logging.getLogger(__name__)


class LocalDraftStore:
    """Owns "the" draft kept in storage.

    In-memory state is updated synchronously by every mutation and is the
    source of truth for the session. Persistence is a trailing-edge debounced
    write; failures to read or write storage are logged and never raised.
    """

    def __init__(
        self,
        storage: StorageBackend,
        scheduler: Scheduler,
        *,
        demo_draft: Optional[Draft] = None,
        demo_requested: bool = False,
        debounce_ms: int = DEBOUNCE_MS,
    ) -> None:
        self.storage = storage
        self.demo_draft = demo_draft
        self.demo_requested = demo_requested
        self._debouncer = Debouncer(scheduler, debounce_ms / 1000)
        self._draft = Draft()
        self._loaded = False
        self._demo_mode = False

    # ------------------------------------------------------------------
    # state
    @property
    def draft(self) -> Draft:
        self._ensure_loaded()
        return self._draft

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_demo_mode(self) -> bool:
        return self._demo_mode

    @property
    def has_pending_write(self) -> bool:
        return self._debouncer.pending

    # ------------------------------------------------------------------
    # lifecycle
    def load(self) -> Draft:
        """Hydrate from storage, falling back to demo content or an empty draft."""

        visited = self._read(VISITED_KEY) is not None
        persisted = self._read_draft()

        if persisted is not None:
            self._draft = persisted
            self._demo_mode = False
        elif (self.demo_requested or not visited) and self.demo_draft is not None:
            self._draft = self.demo_draft.model_copy(deep=True)
            self._demo_mode = True
        else:
            self._draft = Draft()
            self._demo_mode = False

        # An explicit demo request does not count as a visit
        if not visited and not self.demo_requested:
            self._write(VISITED_KEY, "true")

        self._loaded = True
        logger.debug(
            "Draft loaded",
            extra={"persisted": persisted is not None, "demo_mode": self._demo_mode},
        )
        return self._draft

    def flush(self) -> None:
        """Write any pending change immediately."""
        self._debouncer.flush()

    # ------------------------------------------------------------------
    # mutations
    def update_title(self, title: str) -> Draft:
        return self._save(self.draft.model_copy(update={"title": title}))

    def update_content(self, content: str) -> Draft:
        return self._save(self.draft.model_copy(update={"content": content}))

    def insert_content(self, html: str) -> Draft:
        """Append an HTML fragment, e.g. a quote picked from the assistant."""
        return self.update_content(self.draft.content + html)

    def add_source(self, source: Source) -> Draft:
        sources = add_source(self.draft.sources, source)
        return self._save(self.draft.model_copy(update={"sources": sources}))

    def remove_source(self, source_id: str) -> Draft:
        sources = remove_source(self.draft.sources, source_id)
        return self._save(self.draft.model_copy(update={"sources": sources}))

    def clear_draft(self) -> Draft:
        """Reset to an empty draft and erase it from storage now."""
        self._ensure_loaded()
        self._debouncer.cancel()
        self._draft = Draft()
        self._remove(DRAFT_KEY)
        return self._draft

    def dismiss_demo(self) -> Draft:
        """Leave demo mode: the draft becomes empty and nothing stays persisted."""
        self._ensure_loaded()
        self._demo_mode = False
        return self.clear_draft()

    # ------------------------------------------------------------------
    # helpers
    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _save(self, draft: Draft) -> Draft:
        self._draft = draft
        payload = draft.model_dump_json(by_alias=True)
        self._debouncer.schedule(lambda: self._write(DRAFT_KEY, payload))
        return draft

    def _read_draft(self) -> Optional[Draft]:
        raw = self._read(DRAFT_KEY)
        if not raw:
            return None
        try:
            return Draft.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Ignoring unreadable persisted draft", extra={"key": DRAFT_KEY})
            return None

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.storage.get_item(key)
        except StorageError:
            logger.warning("Storage read failed", extra={"key": key}, exc_info=True)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self.storage.set_item(key, value)
        except StorageError:
            logger.warning("Storage write failed", extra={"key": key}, exc_info=True)

    def _remove(self, key: str) -> None:
        try:
            self.storage.remove_item(key)
        except StorageError:
            logger.warning("Storage remove failed", extra={"key": key}, exc_info=True)


__all__ = ["LocalDraftStore", "DRAFT_KEY", "VISITED_KEY", "DEBOUNCE_MS"]
