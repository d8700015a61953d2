"""Service layer for dashboard preference operations."""
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utcnow
from models.preference import Preference
from services.exceptions import ValidationError
from services.utils import replace_by_key


def _validate(assets: Any, investor_type: Any, content: Any) -> None:
    if not isinstance(assets, list) or len(assets) == 0:
        raise ValidationError("assets", "assets must be a non-empty array")
    if not isinstance(investor_type, str) or not investor_type.strip():
        raise ValidationError("investorType", "investorType is required")
    if not isinstance(content, list) or len(content) == 0:
        raise ValidationError("content", "content must be a non-empty array")


async def save_preferences(
    db: AsyncSession,
    user_id: int,
    assets: list[str],
    investor_type: str,
    content: list[str],
) -> datetime:
    """
    Create or fully replace the user's preferences.

    There is no merge: every field of an existing row is overwritten.

    Returns:
        The new updated_at timestamp.

    Raises:
        ValidationError: Naming the first offending field.
    """
    _validate(assets, investor_type, content)

    updated_at = utcnow()
    await replace_by_key(
        db,
        Preference,
        key_columns=["user_id"],
        values={
            "user_id": user_id,
            "assets": list(assets),
            "investor_type": investor_type,
            "content": list(content),
            "updated_at": updated_at,
        },
    )
    return updated_at


async def get_preferences(db: AsyncSession, user_id: int) -> Preference | None:
    """Get user preferences, returns None if never saved."""
    # populate_existing: the row may have been replaced by an upsert earlier in this session
    query = (
        select(Preference)
        .where(Preference.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()
