"""Key/value storage backends for persisted drafts.

The interface mirrors browser ``localStorage``: string values addressed by a
fixed key. Backend-specific failures are re-raised as
:class:`~notecraft.core.exceptions.StorageError` so that stores only need to
handle one exception type.
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional

from sqlalchemy import String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from notecraft.core.exceptions import StorageError
from notecraft.core.settings import Settings, get_settings

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageBackend(ABC):
    """Abstract string store addressed by key."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or ``None`` when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; absent keys are ignored."""


class MemoryStorage(StorageBackend):
    """Process-local storage, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileStorage(StorageBackend):
    """One JSON file per key inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Cannot read {path}") from exc
        except UnicodeDecodeError as exc:
            raise StorageError(f"Cannot decode {path}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"Cannot write {path}") from exc

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot remove {path}") from exc


class Base(DeclarativeBase):
    """Base class for ORM models."""


class StorageItem(Base):
    __tablename__ = "storage_items"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SqlStorage(StorageBackend):
    """Key/value table in any SQLAlchemy-supported database."""

    def __init__(self, url: str = "sqlite:///notecraft.db", engine: Optional[Engine] = None) -> None:
        self.engine = engine or create_engine(url, future=True, pool_pre_ping=True)
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError("Cannot create storage table") from exc

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Provide a transactional scope around a single storage operation."""

        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(str(exc)) from exc
        finally:
            session.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._session() as session:
            item = session.get(StorageItem, key)
            return item.value if item is not None else None

    def set_item(self, key: str, value: str) -> None:
        with self._session() as session:
            session.merge(StorageItem(key=key, value=value))

    def remove_item(self, key: str) -> None:
        with self._session() as session:
            item = session.get(StorageItem, key)
            if item is not None:
                session.delete(item)


def build_storage(settings: Settings | None = None) -> StorageBackend:
    """Instantiate the backend selected by ``settings.storage_backend``."""
    settings = settings or get_settings()
    kind = settings.storage_backend.lower()
    if kind == "file":
        return FileStorage(settings.storage_dir)
    if kind == "sqlite":
        return SqlStorage(settings.database_url)
    if kind == "memory":
        return MemoryStorage()
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "FileStorage",
    "SqlStorage",
    "StorageItem",
    "build_storage",
]
