import time
from typing import Literal

from pydantic import BaseModel, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatMessage(BaseModel):
    role: Literal["user", "model"] = Field(
        ..., description="Author of the message. Either user or model"
    )
    text: str = Field(..., description="Content of the message")
    timestamp: int = Field(
        default_factory=_now_ms, description="Creation time in epoch milliseconds"
    )
