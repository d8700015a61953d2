"""Tests for service-layer helpers."""
from types import SimpleNamespace

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utcnow
from models.user import User
from models.vote import Vote
from services.utils import replace_by_key


async def test__replace_by_key__inserts_then_updates(db_session: AsyncSession) -> None:
    user = User(name="Alice", email="alice@example.com", password_hash="x")
    db_session.add(user)
    await db_session.flush()

    values = {"user_id": user.id, "section": "news", "vote": "up", "updated_at": utcnow()}
    await replace_by_key(db_session, Vote, ["user_id", "section"], values)
    await replace_by_key(
        db_session, Vote, ["user_id", "section"], {**values, "vote": "down"},
    )

    rows = (await db_session.execute(select(Vote.section, Vote.vote))).all()
    assert rows == [("news", "down")]


async def test__replace_by_key__unsupported_dialect_raises_value_error() -> None:
    session = SimpleNamespace(
        get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mysql")),
    )

    with pytest.raises(ValueError, match="mysql"):
        await replace_by_key(
            session, Vote, ["user_id", "section"], {"user_id": 1},
        )
