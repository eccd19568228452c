"""Merge an AI-generated batch into the category/flashcard collections.

Pure function: takes the current collections and the validated candidates,
returns new collections without touching the inputs. Rules:

- a candidate's category resolves to an existing category by
  case-insensitive name; otherwise a category is created and is visible to
  the rest of the batch;
- a candidate whose question exactly equals (case-sensitive, untrimmed) an
  existing or already-merged question is skipped; first occurrence wins;
- a candidate with a blank category or question is skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from app.modules.flashcards.models import Category, Flashcard, SyncCandidate, new_id


@dataclass(frozen=True)
class MergeOutcome:
    categories: tuple[Category, ...]
    flashcards: tuple[Flashcard, ...]
    imported: tuple[Flashcard, ...] = ()
    created_categories: tuple[Category, ...] = ()
    skipped: int = 0
    active_category_id: Optional[str] = None


@dataclass
class _WorkingSet:
    categories: list[Category]
    flashcards: list[Flashcard]
    questions: set[str] = field(default_factory=set)

    def find_category(self, name: str) -> Optional[Category]:
        key = name.lower()
        return next((c for c in self.categories if c.name.lower() == key), None)


def merge_candidates(
    categories: Iterable[Category],
    flashcards: Iterable[Flashcard],
    candidates: Iterable[SyncCandidate],
    *,
    make_id: Callable[[str], str] = new_id,
) -> MergeOutcome:
    work = _WorkingSet(categories=list(categories), flashcards=list(flashcards))
    work.questions = {f.question for f in work.flashcards}

    imported: list[Flashcard] = []
    created: list[Category] = []
    skipped = 0

    for item in candidates:
        if not item.category.strip() or not item.question.strip():
            skipped += 1
            continue

        category = work.find_category(item.category)
        if category is None:
            category = Category(id=make_id("cat"), name=item.category)
            work.categories.append(category)
            created.append(category)

        if item.question in work.questions:
            skipped += 1
            continue

        card = Flashcard(
            id=make_id("f"),
            category_id=category.id,
            question=item.question,
            answer=item.short_answer,
        )
        work.flashcards.append(card)
        work.questions.add(card.question)
        imported.append(card)

    return MergeOutcome(
        categories=tuple(work.categories),
        flashcards=tuple(work.flashcards),
        imported=tuple(imported),
        created_categories=tuple(created),
        skipped=skipped,
        active_category_id=imported[0].category_id if imported else None,
    )
