"""Shared utility functions for service layer."""
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base

# Dialects whose INSERT supports ON CONFLICT ... DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def replace_by_key(
    db: AsyncSession,
    model: type[Base],
    key_columns: list[str],
    values: dict[str, Any],
) -> None:
    """
    Insert a row, or replace every non-key field of the row with the same key.

    Runs as a single INSERT ... ON CONFLICT DO UPDATE statement, so two
    concurrent writers for the same key can never produce two rows and there
    is no read-then-write window. key_columns must be covered by a unique
    constraint on the table.

    Raises:
        ValueError: If the bound database dialect has no ON CONFLICT upsert.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise ValueError(f"Upsert is not supported for dialect: {dialect}")

    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=key_columns,
        set_={name: stmt.excluded[name] for name in values if name not in key_columns},
    )
    await db.execute(stmt)
