"""Current user endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import Identity, get_async_session, get_current_identity
from schemas.auth import MeResponse, UserProfile
from services import user_service


router = APIRouter(prefix="/api", tags=["users"])


@router.get("/me", response_model=MeResponse)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> MeResponse:
    """Get the current authenticated user's profile."""
    user = await user_service.get_profile(db, identity.user_id)
    return MeResponse(user=UserProfile.model_validate(user))
