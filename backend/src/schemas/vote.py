"""Pydantic schemas for dashboard vote endpoints."""
from pydantic import BaseModel, ConfigDict, Field

from schemas.validators import UtcDatetime

# Dashboard widget keys that accept feedback
VALID_SECTIONS = ("news", "prices", "ai", "meme")

# "none" is never stored; it clears the existing vote
VOTE_NONE = "none"
VALID_VOTES = ("up", "down", VOTE_NONE)


class VoteRequest(BaseModel):
    """Schema for setting or clearing a vote."""

    section: str
    vote: str


class VoteResponse(BaseModel):
    """Response after a vote change."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    section: str
    vote: str
    updated_at: UtcDatetime = Field(alias="updatedAt")


class VotesResponse(BaseModel):
    """The current user's votes keyed by section."""

    votes: dict[str, str]
