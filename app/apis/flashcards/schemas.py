from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.modules.flashcards.models import Category, Flashcard


class CategoryCreate(BaseModel):
    name: str = Field(..., description="Display label for the new category")


class CategoryRename(BaseModel):
    name: str


class ActiveCategoryUpdate(BaseModel):
    category_id: str


class CategoryRead(BaseModel):
    id: str
    name: str

    @classmethod
    def from_model(cls, category: Category) -> "CategoryRead":
        return cls(id=category.id, name=category.name)


class CategoriesResponse(BaseModel):
    active_category_id: Optional[str] = None
    categories: list[CategoryRead] = Field(default_factory=list)


class FlashcardCreate(BaseModel):
    category_id: str
    question: str
    answer: str = ""
    answer_image: Optional[str] = Field(
        default=None, description="Image as a base64 data URL"
    )
    answer_pdf: Optional[str] = Field(
        default=None, description="PDF as a base64 data URL"
    )


class FlashcardUpdate(BaseModel):
    category_id: Optional[str] = None
    question: Optional[str] = None
    answer: Optional[str] = None
    answer_image: Optional[str] = None
    answer_pdf: Optional[str] = None


class FlashcardRead(BaseModel):
    id: str
    category_id: str
    question: str
    answer: str
    answer_image: Optional[str] = None
    answer_pdf: Optional[str] = None
    revealed: bool = False

    @classmethod
    def from_model(cls, card: Flashcard, *, revealed: bool = False) -> "FlashcardRead":
        return cls(**card.model_dump(), revealed=revealed)


class FlipResponse(BaseModel):
    id: str
    revealed: bool


class SyncResponse(BaseModel):
    status: str
    imported: int = 0
    skipped: int = 0
    categories_created: int = 0
    active_category_id: Optional[str] = None
    message: Optional[str] = None
