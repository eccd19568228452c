"""Flashcards service class and simple module entrypoint.

Wires the durable store, the repository and the AI sync importer together so
API handlers and the CLI share one object. The module also remains
executable as a convenience entrypoint that delegates to the CLI.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from sqlalchemy.engine import Engine

from app.modules.flashcards.importer import FetchBatch, SyncImporter, SyncReport
from app.modules.flashcards.models import Category, Flashcard
from app.modules.flashcards.repository import FlashcardRepository
from app.modules.flashcards.store import (
    FlashcardStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SqlKeyValueStore,
)


class FlashcardsService:
    """High-level service over one repository and its importer.

    Example (persistent):
        svc = FlashcardsService.from_engine()
        svc.repository.add_category("Heaps")

    Example (ephemeral, e.g. tests):
        svc = FlashcardsService.in_memory()
        report = svc.sync_blocking()
    """

    def __init__(
        self,
        repository: FlashcardRepository,
        *,
        fetch: Optional[FetchBatch] = None,
    ) -> None:
        self.repository = repository
        self.importer = (
            SyncImporter(repository, fetch) if fetch else SyncImporter(repository)
        )

    @classmethod
    def from_backend(
        cls, backend: KeyValueStore, *, fetch: Optional[FetchBatch] = None
    ) -> "FlashcardsService":
        return cls(FlashcardRepository(FlashcardStore(backend)), fetch=fetch)

    @classmethod
    def from_engine(
        cls, engine: Optional[Engine] = None, *, fetch: Optional[FetchBatch] = None
    ) -> "FlashcardsService":
        if engine is None:
            from app.core.db.base import engine as default_engine

            engine = default_engine
        return cls.from_backend(SqlKeyValueStore(engine), fetch=fetch)

    @classmethod
    def in_memory(cls, *, fetch: Optional[FetchBatch] = None) -> "FlashcardsService":
        return cls.from_backend(MemoryKeyValueStore(), fetch=fetch)

    async def sync(self) -> SyncReport:
        return await self.importer.sync()

    def sync_blocking(self) -> SyncReport:
        """Synchronous wrapper if an event loop is unavailable."""
        return asyncio.run(self.importer.sync())

    def snapshot(self) -> dict[str, Any]:
        return {
            "active_category_id": self.repository.active_category_id,
            "categories": [self.to_jsonable(c) for c in self.repository.categories],
            "flashcards": [self.to_jsonable(f) for f in self.repository.flashcards],
        }

    @staticmethod
    def to_jsonable(item: Category | Flashcard) -> dict[str, Any]:
        return item.model_dump(by_alias=True, exclude_none=True)


if __name__ == "__main__":
    from app.modules.flashcards.cli import main as _cli_main

    raise SystemExit(_cli_main())
