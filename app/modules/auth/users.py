"""Local sign-in session for the study deck.

There is no password check: signing in records who is studying so the UI can
greet them. The record lives in the same key-value store as the collections,
under its own key.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.flashcards.results import MutationResult
from app.modules.flashcards.store import KeyValueStore

logger = get_logger(__name__)

AVATAR_URL = "https://api.dicebear.com/7.x/initials/svg?seed={seed}"


class UserRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    avatar_url: str = Field(alias="avatarUrl")


def _make_user(email: str, name: Optional[str]) -> UserRecord:
    entered = (name or "").strip()
    return UserRecord(
        name=entered or email.split("@")[0],
        email=email,
        avatar_url=AVATAR_URL.format(seed=quote(entered or email)),
    )


class SessionManager:
    def __init__(
        self, backend: KeyValueStore, *, key: str = settings.storage.user_key
    ) -> None:
        self.backend = backend
        self.key = key

    def current(self) -> Optional[UserRecord]:
        raw = self.backend.get(self.key)
        if raw is None:
            return None
        try:
            return UserRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding unparseable {self.key!r} session record")
            return None

    def sign_in(self, email: str, name: Optional[str] = None) -> MutationResult[UserRecord]:
        email = (email or "").strip()
        if not email or "@" not in email:
            return MutationResult.invalid("A valid email address is required")
        user = _make_user(email, name)
        self.backend.set(self.key, user.model_dump_json(by_alias=True))
        logger.info(f"Signed in {user.email}")
        return MutationResult.success(user)

    def sign_up(self, email: str, name: Optional[str] = None) -> MutationResult[UserRecord]:
        return self.sign_in(email, name)

    def sign_out(self) -> None:
        self.backend.delete(self.key)
