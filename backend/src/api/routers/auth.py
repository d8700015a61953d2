"""Registration and login endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.auth import create_access_token
from core.config import Settings
from schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserProfile,
)
from services import user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=MessageResponse)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """
    Register a new user.

    Returns 400 if a field is missing or the email is already registered.
    """
    await user_service.register_user(db, data.name, data.email, data.password)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """
    Log in and receive a session token valid for 7 days.

    Unknown email and wrong password both return 401 "Invalid credentials".
    """
    user = await user_service.authenticate(db, data.email, data.password)
    token = create_access_token(user.id, user.email, settings)
    return LoginResponse(token=token, user=UserProfile.model_validate(user))
