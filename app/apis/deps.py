from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, status

from app.modules.auth import SessionManager
from app.modules.chat import TutorChat
from app.modules.flashcards import FlashcardRepository, FlashcardsService
from app.modules.flashcards.results import ErrorKind, MutationResult
from app.modules.flashcards.store import KeyValueStore, SqlKeyValueStore


@lru_cache(maxsize=1)
def get_backend() -> KeyValueStore:
    """Process-wide durable slots shared by the deck and the session."""
    from app.core.db.base import engine

    return SqlKeyValueStore(engine)


@lru_cache(maxsize=1)
def get_flashcards_service() -> FlashcardsService:
    return FlashcardsService.from_backend(get_backend())


def get_repository(
    service: FlashcardsService = Depends(get_flashcards_service),
) -> FlashcardRepository:
    return service.repository


@lru_cache(maxsize=1)
def get_tutor() -> TutorChat:
    return TutorChat()


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    return SessionManager(get_backend())


def unwrap(result: MutationResult):
    """Return the result value or raise the matching HTTP error."""
    if result.ok:
        return result.value
    if result.kind is ErrorKind.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    # 422 spelled out; starlette renamed the constant
    raise HTTPException(status_code=422, detail=result.error)


def require_confirmation(confirm: bool = False) -> None:
    """Destructive routes need an explicit ``?confirm=true``."""
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Deletion must be confirmed with confirm=true",
        )
