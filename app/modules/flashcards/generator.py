"""A2Z sync batch generator using pydantic-ai and the Gemini provider.

``generate_sync_batch`` returns a validated list of ``SyncCandidate`` items.
Imports for the LLM provider are kept lazy so the module imports cleanly
when credentials are missing; the missing key is reported as a
``MissingCredentialError`` at call time instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_ai import Agent

from app.core.config import settings
from app.modules.flashcards.exceptions import MissingCredentialError, SyncPayloadError
from app.modules.flashcards.models import SyncCandidate

_BATCH = TypeAdapter(list[SyncCandidate])


def build_google_model(model_name: str):
    """Build the Google Gemini model provider (lazy import)."""
    api_key = settings.gemini_api_key
    if not api_key:
        raise MissingCredentialError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=api_key)
    return GoogleModel(model_name, provider=provider)


SYSTEM_PROMPT = (
    "You are the TUF AI Assistant. Your goal is to help students learn the A2Z roadmap. "
    "Identify key problems and concepts from the Striver's A2Z sheet. "
    "Return a JSON array where each object has exactly these string fields: "
    "- category: the module name (e.g. 'Basics', 'Arrays', 'Binary Search', 'Linked List'). "
    "- question: a concept-based question or 'How do you solve [Problem Name] optimally?'. "
    "- short_answer: a concise explanation of the logic or time complexity. "
    "Avoid duplicates and focus on high-yield interview concepts. "
    "No extra keys or commentary; do not include code fences."
)


def _build_instruction(batch_size: int) -> str:
    return (
        f"Generate a new batch of {int(batch_size)} high-quality DSA flashcards based "
        "specifically on the content of Striver's A2Z DSA Sheet "
        "(https://takeuforward.org/dsa/strivers-a2z-sheet-learn-dsa-a-to-z)."
    )


def parse_sync_payload(raw: Any) -> list[SyncCandidate]:
    """Validate a generated batch (JSON text or Python objects).

    Every item must carry exactly ``category``, ``question`` and
    ``short_answer`` as strings; anything else is a ``SyncPayloadError``.
    """
    try:
        if isinstance(raw, (str, bytes)):
            return _BATCH.validate_json(raw)
        return _BATCH.validate_python(raw)
    except ValidationError as e:
        raise SyncPayloadError(
            f"Generated batch does not match the flashcard contract: {e.error_count()} errors"
        ) from e


async def generate_sync_batch(batch_size: int | None = None) -> list[SyncCandidate]:
    """Ask Gemini for a fresh batch of candidate flashcards."""
    model = build_google_model(settings.sync_model)
    agent: Agent[None, list[SyncCandidate]] = Agent[None, list[SyncCandidate]](
        model=model,
        output_type=list[SyncCandidate],
        system_prompt=SYSTEM_PROMPT,
        retries=2,
    )
    res = await agent.run(_build_instruction(batch_size or settings.sync_batch_size))
    return res.output
