"""Streaming DSA tutor chat on pydantic-ai and Gemini.

One ``TutorChat`` holds a single conversation: the visible transcript of
``ChatMessage`` items plus the pydantic-ai message history passed back to
the model on every turn.
"""

from __future__ import annotations

from typing import AsyncIterator, Optional

from pydantic_ai import Agent
from pydantic_ai.messages import ModelMessage

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.chat.models import ChatMessage
from app.modules.flashcards.generator import build_google_model

logger = get_logger(__name__)

TUTOR_SYSTEM_PROMPT = (
    "You are a DSA tutor. "
    "1. Format complexity as **O(N)**. "
    "2. Use `code blocks` for logic. "
    "3. Be concise and professional. "
    "4. NEVER use LaTeX symbols like $."
)

CONNECTION_ISSUE_REPLY = (
    "I encountered a connection issue. Please try your question again."
)


def build_tutor_agent() -> Agent[None, str]:
    return Agent[None, str](
        model=build_google_model(settings.tutor_model),
        system_prompt=TUTOR_SYSTEM_PROMPT,
    )


class TutorChat:
    def __init__(self, agent: Optional[Agent[None, str]] = None) -> None:
        self._agent = agent
        self.messages: list[ChatMessage] = []
        self._history: list[ModelMessage] = []
        self.is_loading = False

    def reset(self) -> None:
        self.messages.clear()
        self._history.clear()

    async def send(self, query: str) -> AsyncIterator[str]:
        """Stream the tutor's reply to ``query`` as text deltas.

        Empty queries and queries sent while a reply is streaming yield
        nothing. Failures are logged and recorded as a model message.
        """
        query = (query or "").strip()
        if not query or self.is_loading:
            return

        self.messages.append(ChatMessage(role="user", text=query))
        self.is_loading = True
        reply = ChatMessage(role="model", text="")
        try:
            if self._agent is None:
                self._agent = build_tutor_agent()
            async with self._agent.run_stream(
                query, message_history=self._history
            ) as result:
                self.messages.append(reply)
                async for delta in result.stream_text(delta=True):
                    reply.text += delta
                    yield delta
            self._history = result.all_messages()
        except Exception as e:  # noqa: BLE001
            logger.error(f"Tutor chat failed: {type(e).__name__}: {e}")
            if not reply.text:
                self.messages = [m for m in self.messages if m is not reply]
            self.messages.append(ChatMessage(role="model", text=CONNECTION_ISSUE_REPLY))
            yield CONNECTION_ISSUE_REPLY
        finally:
            self.is_loading = False
