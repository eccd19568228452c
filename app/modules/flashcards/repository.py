"""Canonical in-memory category/flashcard collections with persistence.

Every committed mutation is written to the injected ``FlashcardStore`` once,
before the in-memory collections are swapped, so a failed save leaves the
repository unchanged and the ``StorageError`` reaches the caller.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from app.core.logging import get_logger
from app.modules.flashcards.attachments import AttachmentKind, is_attachment
from app.modules.flashcards.merge import MergeOutcome
from app.modules.flashcards.models import Category, Flashcard, new_id
from app.modules.flashcards.results import MutationResult
from app.modules.flashcards.store import FlashcardStore

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"category_id", "question", "answer", "answer_image", "answer_pdf"}
)


class FlashcardRepository:
    def __init__(self, store: FlashcardStore) -> None:
        self.store = store
        self._categories: list[Category] = store.load_categories()
        self._flashcards: list[Flashcard] = store.load_flashcards()
        self.active_category_id: Optional[str] = (
            self._categories[0].id if self._categories else None
        )
        self._revealed: set[str] = set()

    # Snapshots ----------------------------------------------------------
    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._categories)

    @property
    def flashcards(self) -> tuple[Flashcard, ...]:
        return tuple(self._flashcards)

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self._categories if c.id == category_id), None)

    def get_flashcard(self, flashcard_id: str) -> Optional[Flashcard]:
        return next((f for f in self._flashcards if f.id == flashcard_id), None)

    def list_by_category(self, category_id: str) -> list[Flashcard]:
        return [f for f in self._flashcards if f.category_id == category_id]

    # Categories ---------------------------------------------------------
    def add_category(self, name: str) -> MutationResult[Category]:
        if not name or not name.strip():
            return MutationResult.invalid("Category name is required")
        category = Category(id=new_id("cat"), name=name)
        categories = [*self._categories, category]
        self.store.save_categories(categories)
        self._categories = categories
        self.active_category_id = category.id
        return MutationResult.success(category)

    def rename_category(self, category_id: str, new_name: str) -> MutationResult[Category]:
        if not new_name or not new_name.strip():
            return MutationResult.invalid("Category name is required")
        current = self.get_category(category_id)
        if current is None:
            return MutationResult.not_found(f"Category {category_id} not found")
        renamed = current.model_copy(update={"name": new_name})
        categories = [renamed if c.id == category_id else c for c in self._categories]
        self.store.save_categories(categories)
        self._categories = categories
        return MutationResult.success(renamed)

    def delete_category(self, category_id: str) -> MutationResult[Category]:
        """Remove a category and every flashcard bound to it.

        Callers are expected to have confirmed the deletion with the user.
        """
        current = self.get_category(category_id)
        if current is None:
            return MutationResult.not_found(f"Category {category_id} not found")
        categories = [c for c in self._categories if c.id != category_id]
        removed = {f.id for f in self._flashcards if f.category_id == category_id}
        flashcards = [f for f in self._flashcards if f.id not in removed]
        self.store.save_all(categories, flashcards)
        self._categories = categories
        self._flashcards = flashcards
        self._revealed -= removed
        if self.active_category_id == category_id:
            self.active_category_id = categories[0].id if categories else None
        logger.info(
            f"Deleted category with {len(removed)} flashcards",
            extra={"category_id": category_id},
        )
        return MutationResult.success(current)

    def select_category(self, category_id: str) -> MutationResult[Category]:
        category = self.get_category(category_id)
        if category is None:
            return MutationResult.not_found(f"Category {category_id} not found")
        self.active_category_id = category_id
        return MutationResult.success(category)

    # Flashcards ---------------------------------------------------------
    def _validate_card(self, card: Flashcard) -> Optional[str]:
        if not card.category_id:
            return "Select a category first"
        if self.get_category(card.category_id) is None:
            return f"Category {card.category_id} does not exist"
        if not card.question.strip():
            return "Question is required"
        if card.answer_image is not None and not is_attachment(
            card.answer_image, AttachmentKind.IMAGE
        ):
            return "Answer image must be an embedded image"
        if card.answer_pdf is not None and not is_attachment(
            card.answer_pdf, AttachmentKind.PDF
        ):
            return "Answer document must be an embedded PDF"
        if not card.answer.strip() and not card.has_attachment:
            return "Answer is required unless an image or PDF is attached"
        return None

    def add_flashcard(
        self,
        category_id: Optional[str],
        question: str,
        answer: str = "",
        image: Optional[str] = None,
        pdf: Optional[str] = None,
    ) -> MutationResult[Flashcard]:
        if not category_id:
            return MutationResult.invalid("Select a category first")
        card = Flashcard(
            id=new_id("f"),
            category_id=category_id,
            question=question or "",
            answer=answer or "",
            answer_image=image,
            answer_pdf=pdf,
        )
        error = self._validate_card(card)
        if error:
            return MutationResult.invalid(error)
        flashcards = [*self._flashcards, card]
        self.store.save_flashcards(flashcards)
        self._flashcards = flashcards
        return MutationResult.success(card)

    def update_flashcard(self, flashcard_id: str, **fields: Any) -> MutationResult[Flashcard]:
        current = self.get_flashcard(flashcard_id)
        if current is None:
            return MutationResult.not_found(f"Flashcard {flashcard_id} not found")
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            return MutationResult.invalid(f"Unknown fields: {', '.join(sorted(unknown))}")
        try:
            updated = Flashcard.model_validate({**current.model_dump(), **fields})
        except ValidationError as e:
            return MutationResult.invalid(str(e.errors()[0]["msg"]))
        error = self._validate_card(updated)
        if error:
            return MutationResult.invalid(error)
        flashcards = [updated if f.id == flashcard_id else f for f in self._flashcards]
        self.store.save_flashcards(flashcards)
        self._flashcards = flashcards
        return MutationResult.success(updated)

    def delete_flashcard(self, flashcard_id: str) -> MutationResult[Flashcard]:
        """Remove a flashcard; callers confirm with the user beforehand."""
        current = self.get_flashcard(flashcard_id)
        if current is None:
            return MutationResult.not_found(f"Flashcard {flashcard_id} not found")
        flashcards = [f for f in self._flashcards if f.id != flashcard_id]
        self.store.save_flashcards(flashcards)
        self._flashcards = flashcards
        self._revealed.discard(flashcard_id)
        return MutationResult.success(current)

    # Reveal markers (never persisted) -----------------------------------
    def toggle_reveal(self, flashcard_id: str) -> MutationResult[bool]:
        if self.get_flashcard(flashcard_id) is None:
            return MutationResult.not_found(f"Flashcard {flashcard_id} not found")
        if flashcard_id in self._revealed:
            self._revealed.discard(flashcard_id)
        else:
            self._revealed.add(flashcard_id)
        return MutationResult.success(flashcard_id in self._revealed)

    def is_revealed(self, flashcard_id: str) -> bool:
        return flashcard_id in self._revealed

    # Import commit ------------------------------------------------------
    def commit_import(self, outcome: MergeOutcome) -> None:
        """Swap in both merged collections at once."""
        categories = list(outcome.categories)
        flashcards = list(outcome.flashcards)
        self.store.save_all(categories, flashcards)
        self._categories = categories
        self._flashcards = flashcards
        if outcome.active_category_id is not None:
            self.active_category_id = outcome.active_category_id
