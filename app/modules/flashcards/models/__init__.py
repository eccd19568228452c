from .flashcards import Category, Flashcard, new_id
from .sync import SyncCandidate

__all__ = [
    "Category",
    "Flashcard",
    "SyncCandidate",
    "new_id",
]
