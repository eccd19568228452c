"""Flashcards module exports."""

from .models import Category, Flashcard, SyncCandidate
from .repository import FlashcardRepository
from .importer import SyncImporter, SyncReport, SyncState, SyncStatus
from .main import FlashcardsService

__all__ = [
    "Category",
    "Flashcard",
    "SyncCandidate",
    "FlashcardRepository",
    "SyncImporter",
    "SyncReport",
    "SyncState",
    "SyncStatus",
    "FlashcardsService",
]
