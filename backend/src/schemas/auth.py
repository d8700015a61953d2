"""Pydantic schemas for registration, login and profile endpoints."""
from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for registering a new user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """Public user info - never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class MessageResponse(BaseModel):
    """Generic acknowledgement."""

    message: str


class LoginResponse(BaseModel):
    """Session token plus the logged-in user's profile."""

    token: str
    user: UserProfile


class MeResponse(BaseModel):
    """Response for the current user endpoint."""

    user: UserProfile
