"""Per-section dashboard feedback endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import Identity, get_async_session, get_current_identity
from schemas.vote import VOTE_NONE, VoteRequest, VoteResponse, VotesResponse
from services import vote_service

router = APIRouter(prefix="/api", tags=["votes"])


@router.post("/vote", response_model=VoteResponse)
async def set_vote(
    data: VoteRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> VoteResponse:
    """
    Vote on a dashboard section.

    - **section**: one of news, prices, ai, meme
    - **vote**: up, down, or none (none clears the existing vote)
    """
    updated_at = await vote_service.set_vote(db, identity.user_id, data.section, data.vote)
    message = "Vote cleared" if data.vote == VOTE_NONE else "Vote saved"
    return VoteResponse(
        message=message,
        section=data.section,
        vote=data.vote,
        updated_at=updated_at,
    )


@router.get("/votes", response_model=VotesResponse)
async def get_votes(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> VotesResponse:
    """Get the current user's votes keyed by section."""
    votes = await vote_service.get_votes(db, identity.user_id)
    return VotesResponse(votes=votes)
