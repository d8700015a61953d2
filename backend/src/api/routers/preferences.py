"""Dashboard preference endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import Identity, get_async_session, get_current_identity
from schemas.preference import (
    PreferencesOut,
    PreferencesResponse,
    PreferencesSavedResponse,
    PreferencesUpdate,
)
from services import preference_service

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.post("", response_model=PreferencesSavedResponse)
async def save_preferences(
    data: PreferencesUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> PreferencesSavedResponse:
    """
    Save preferences, replacing any previously saved values entirely.

    assets and content must be non-empty arrays; investorType is required.
    """
    updated_at = await preference_service.save_preferences(
        db,
        identity.user_id,
        assets=data.assets,
        investor_type=data.investor_type,
        content=data.content,
    )
    return PreferencesSavedResponse(message="Preferences saved", updated_at=updated_at)


@router.get("", response_model=PreferencesResponse)
async def get_preferences(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> PreferencesResponse:
    """Get saved preferences, or null if the user has not saved any yet."""
    preference = await preference_service.get_preferences(db, identity.user_id)
    if preference is None:
        return PreferencesResponse(preferences=None)
    return PreferencesResponse(preferences=PreferencesOut.model_validate(preference))
