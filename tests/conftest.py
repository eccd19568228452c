"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pydantic_ai import Agent
from pydantic_ai.models.test import TestModel

from app.apis.deps import get_flashcards_service, get_session_manager, get_tutor
from app.core.db.base import build_engine
from app.modules.auth import SessionManager
from app.modules.chat import TutorChat
from app.modules.flashcards import FlashcardRepository, FlashcardsService
from app.modules.flashcards.store import (
    FlashcardStore,
    MemoryKeyValueStore,
    SqlKeyValueStore,
)
from main import app

TUTOR_REPLY = "Use two pointers for **O(N)** time."


def batch_fetch(*batches: list[dict[str, str]]) -> Callable[[], Any]:
    """Fake generator returning the given batches on successive calls."""
    pending = list(batches)

    async def fetch() -> list[dict[str, str]]:
        return pending.pop(0)

    return fetch


@pytest.fixture
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(backend: MemoryKeyValueStore) -> FlashcardStore:
    return FlashcardStore(backend)


@pytest.fixture
def repo(store: FlashcardStore) -> FlashcardRepository:
    return FlashcardRepository(store)


@pytest.fixture
def sql_backend(tmp_path) -> SqlKeyValueStore:
    return SqlKeyValueStore(build_engine(f"sqlite:///{tmp_path / 'deck.db'}"))


@pytest.fixture
def tutor() -> TutorChat:
    return TutorChat(agent=Agent(TestModel(custom_output_text=TUTOR_REPLY)))


@pytest.fixture
def service() -> FlashcardsService:
    return FlashcardsService.in_memory(
        fetch=batch_fetch(
            [
                {"category": "Binary Search", "question": "Q-bs", "short_answer": "log n"},
                {"category": "arrays", "question": "Q-arr", "short_answer": "Kadane"},
            ]
        )
    )


@pytest.fixture
def client(
    service: FlashcardsService, tutor: TutorChat
) -> Generator[TestClient, Any, None]:
    """Create a test client over in-memory dependencies."""
    sessions = SessionManager(MemoryKeyValueStore())

    app.dependency_overrides[get_flashcards_service] = lambda: service
    app.dependency_overrides[get_tutor] = lambda: tutor
    app.dependency_overrides[get_session_manager] = lambda: sessions

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
