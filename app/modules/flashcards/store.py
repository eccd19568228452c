"""Durable storage for the category and flashcard collections.

Two layers:

- ``KeyValueStore`` implementations hold opaque text blobs under string keys
  (an in-memory dict for tests, a SQLAlchemy table for real runs).
- ``FlashcardStore`` serializes the collections to JSON under the two fixed
  keys and falls back to the seed collections when a slot is missing or
  cannot be parsed.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.db.base import Base
from app.core.db.schemas.storage import StorageSlot
from app.core.logging import get_logger
from app.modules.flashcards.exceptions import StorageError
from app.modules.flashcards.models import Category, Flashcard
from app.modules.flashcards.seed import seed_categories, seed_flashcards

logger = get_logger(__name__)

_CATEGORIES = TypeAdapter(list[Category])
_FLASHCARDS = TypeAdapter(list[Flashcard])


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def set_many(self, values: Mapping[str, str]) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local slots; contents vanish with the process."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def set_many(self, values: Mapping[str, str]) -> None:
        self._data.update(values)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore:
    """Slots persisted in the ``storage_slots`` table.

    Calls block on a synchronous engine. The API handlers call it from the
    event loop on purpose, so every deck mutation runs on one thread; the
    writes are small single-row upserts against SQLite.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = sessionmaker(engine, expire_on_commit=False)
        self._ready = False

    def _ensure_schema(self) -> None:
        if self._ready:
            return
        Base.metadata.create_all(self.engine, tables=[StorageSlot.__table__])
        self._ready = True

    def _session(self) -> Session:
        self._ensure_schema()
        return self._sessions()

    def get(self, key: str) -> Optional[str]:
        try:
            with self._session() as session:
                return session.execute(
                    select(StorageSlot.value).where(StorageSlot.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read storage slot {key!r}: {e}")
            raise StorageError(f"Cannot read storage slot {key!r}: {e}") from e

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        try:
            with self._session() as session, session.begin():
                for key, value in values.items():
                    session.merge(StorageSlot(key=key, value=value))
        except SQLAlchemyError as e:
            logger.error(f"Failed to write storage slots {sorted(values)}: {e}")
            raise StorageError(f"Cannot write storage slots: {e}") from e

    def delete(self, key: str) -> None:
        try:
            with self._session() as session, session.begin():
                session.execute(delete(StorageSlot).where(StorageSlot.key == key))
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete storage slot {key!r}: {e}")
            raise StorageError(f"Cannot delete storage slot {key!r}: {e}") from e


def dump_categories(categories: list[Category]) -> str:
    return _CATEGORIES.dump_json(categories, by_alias=True, exclude_none=True).decode()


def dump_flashcards(flashcards: list[Flashcard]) -> str:
    return _FLASHCARDS.dump_json(flashcards, by_alias=True, exclude_none=True).decode()


class FlashcardStore:
    """Loads and saves both collections under their fixed keys."""

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        categories_key: str = settings.storage.categories_key,
        flashcards_key: str = settings.storage.flashcards_key,
    ) -> None:
        self.backend = backend
        self.categories_key = categories_key
        self.flashcards_key = flashcards_key

    def load_categories(self) -> list[Category]:
        raw = self.backend.get(self.categories_key)
        if raw is None:
            return seed_categories()
        try:
            return _CATEGORIES.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Unparseable {self.categories_key!r} slot, using seed: {e.error_count()} errors"
            )
            return seed_categories()

    def load_flashcards(self) -> list[Flashcard]:
        raw = self.backend.get(self.flashcards_key)
        if raw is None:
            return seed_flashcards()
        try:
            return _FLASHCARDS.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Unparseable {self.flashcards_key!r} slot, using seed: {e.error_count()} errors"
            )
            return seed_flashcards()

    def save_categories(self, categories: list[Category]) -> None:
        self.backend.set(self.categories_key, dump_categories(categories))

    def save_flashcards(self, flashcards: list[Flashcard]) -> None:
        self.backend.set(self.flashcards_key, dump_flashcards(flashcards))

    def save_all(self, categories: list[Category], flashcards: list[Flashcard]) -> None:
        """Write both collections in one atomic backend call."""
        self.backend.set_many(
            {
                self.categories_key: dump_categories(categories),
                self.flashcards_key: dump_flashcards(flashcards),
            }
        )
