"""Pydantic models for categories and flashcards.

Field names are snake_case in Python and camelCase on the wire
(``categoryId``, ``answerImage``, ``answerPdf``) so stored collections keep
the shape the browser app wrote to local storage.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id(prefix: str) -> str:
    """Fresh opaque id: prefix plus a random 128-bit UUID."""
    return f"{prefix}-{uuid4().hex}"


class Category(BaseModel):
    """A named grouping of flashcards (a study module)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str


class Flashcard(BaseModel):
    """Question/answer unit bound to exactly one category."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    category_id: str = Field(alias="categoryId")
    question: str
    answer: str = ""
    answer_image: Optional[str] = Field(default=None, alias="answerImage")
    answer_pdf: Optional[str] = Field(default=None, alias="answerPdf")

    @property
    def has_attachment(self) -> bool:
        return bool(self.answer_image or self.answer_pdf)
