"""Structured output contract for AI-generated flashcard batches.

Kept flat so the Gemini structured output schema stays simple: exactly
three non-blank string fields per item, nothing else. Values are kept
as generated; only the blank check looks at the stripped text.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SyncCandidate(BaseModel):
    """One generated flashcard, addressed by category name rather than id."""

    model_config = ConfigDict(extra="forbid")

    category: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    short_answer: str = Field(..., min_length=1)

    @field_validator("category", "question", "short_answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
