from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from app.apis.deps import get_tutor
from app.core.config import settings
from app.modules.chat import ChatMessage, TutorChat


router = APIRouter()


class ChatRequest(BaseModel):
    message: str = Field(..., description="Question for the DSA tutor")


@router.get(
    f"/{settings.app.version}/chat/messages",
    response_model=list[ChatMessage],
    tags=["chat"],
)
async def list_messages(tutor: TutorChat = Depends(get_tutor)) -> list[ChatMessage]:
    return list(tutor.messages)


@router.post(f"/{settings.app.version}/chat/messages", tags=["chat"])
async def send_message(
    req: ChatRequest, tutor: TutorChat = Depends(get_tutor)
) -> StreamingResponse:
    if not req.message.strip():
        raise HTTPException(status_code=422, detail="Message is required")
    if tutor.is_loading:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="The tutor is still answering"
        )
    return StreamingResponse(tutor.send(req.message), media_type="text/plain")


@router.delete(
    f"/{settings.app.version}/chat/messages",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["chat"],
)
async def reset_chat(tutor: TutorChat = Depends(get_tutor)) -> None:
    tutor.reset()
