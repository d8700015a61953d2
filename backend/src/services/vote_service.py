"""Service layer for per-section dashboard votes."""
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utcnow
from models.vote import Vote
from schemas.vote import VALID_SECTIONS, VALID_VOTES, VOTE_NONE
from services.exceptions import ValidationError
from services.utils import replace_by_key


async def set_vote(
    db: AsyncSession,
    user_id: int,
    section: str,
    vote: str,
) -> datetime:
    """
    Record, replace or clear the user's vote on a dashboard section.

    "none" deletes any existing vote (deleting a missing vote is not an error).
    "up"/"down" replace the previous vote; no history is kept.

    Returns:
        The timestamp of the change.

    Raises:
        ValidationError: If section or vote is not an allowed value.
    """
    if section not in VALID_SECTIONS:
        raise ValidationError("section", "Invalid section", allowed=list(VALID_SECTIONS))
    if vote not in VALID_VOTES:
        raise ValidationError("vote", "Invalid vote", allowed=list(VALID_VOTES))

    updated_at = utcnow()

    if vote == VOTE_NONE:
        await db.execute(
            delete(Vote).where(Vote.user_id == user_id, Vote.section == section),
        )
        return updated_at

    await replace_by_key(
        db,
        Vote,
        key_columns=["user_id", "section"],
        values={
            "user_id": user_id,
            "section": section,
            "vote": vote,
            "updated_at": updated_at,
        },
    )
    return updated_at


async def get_votes(db: AsyncSession, user_id: int) -> dict[str, str]:
    """Get the user's current votes keyed by section. Cleared sections are absent."""
    result = await db.execute(
        select(Vote.section, Vote.vote).where(Vote.user_id == user_id),
    )
    return {section: vote for section, vote in result.all()}
