"""Shared validation functions for Pydantic schemas."""
from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator


def ensure_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes.

    SQLite returns naive datetimes even for timezone-aware columns; all stored
    timestamps are written in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
