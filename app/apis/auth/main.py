from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from app.apis.deps import get_session_manager, unwrap
from app.core.config import settings
from app.modules.auth import SessionManager, UserRecord


router = APIRouter()


class LoginRequest(BaseModel):
    email: str
    name: Optional[str] = None


class UserResponse(BaseModel):
    name: str
    email: str
    avatar_url: str

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls(name=user.name, email=user.email, avatar_url=user.avatar_url)


@router.post(
    f"/{settings.app.version}/auth/login", response_model=UserResponse, tags=["auth"]
)
async def login(
    req: LoginRequest, sessions: SessionManager = Depends(get_session_manager)
) -> UserResponse:
    return UserResponse.from_record(unwrap(sessions.sign_in(req.email, req.name)))


@router.post(
    f"/{settings.app.version}/auth/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["auth"],
)
async def signup(
    req: LoginRequest, sessions: SessionManager = Depends(get_session_manager)
) -> UserResponse:
    return UserResponse.from_record(unwrap(sessions.sign_up(req.email, req.name)))


@router.post(
    f"/{settings.app.version}/auth/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["auth"],
)
async def logout(sessions: SessionManager = Depends(get_session_manager)) -> None:
    sessions.sign_out()


@router.get(f"/{settings.app.version}/auth/me", response_model=UserResponse, tags=["auth"])
async def me(sessions: SessionManager = Depends(get_session_manager)) -> UserResponse:
    user = sessions.current()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return UserResponse.from_record(user)
