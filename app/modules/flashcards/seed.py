"""First-run seed collections, used when the store has nothing usable."""

from __future__ import annotations

from app.modules.flashcards.models import Category, Flashcard


def seed_categories() -> list[Category]:
    return [
        Category(id="1", name="Arrays"),
        Category(id="2", name="Strings"),
        Category(id="3", name="Graphs"),
        Category(id="4", name="Trees"),
    ]


def seed_flashcards() -> list[Flashcard]:
    return [
        Flashcard(
            id="f1",
            category_id="1",
            question="What is an array?",
            answer="A collection of elements identified by index or key.",
        ),
        Flashcard(
            id="f2",
            category_id="1",
            question="What is the index of the first element in an array?",
            answer="0",
        ),
        Flashcard(
            id="f3",
            category_id="2",
            question="What is a string?",
            answer="A sequence of characters.",
        ),
        Flashcard(
            id="f4",
            category_id="2",
            question="How do you concatenate two strings?",
            answer="Using the + operator or concat() function.",
        ),
    ]
