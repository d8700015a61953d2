"""Preference model for storing a user's dashboard choices."""
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.user import User


class Preference(Base, TimestampMixin):
    """
    Dashboard preferences - at most one row per user.

    The row is always written wholesale (see preference_service.save_preferences);
    there is no partial update.

    assets:  ordered list of asset symbols, e.g. ["BTC", "ETH"]
    content: list of widget names, e.g. ["Market News", "Coin Prices"]
    """

    __tablename__ = "preferences"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )
    assets: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    investor_type: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[list[str]] = mapped_column(JSON, nullable=False)

    user: Mapped["User"] = relationship(back_populates="preference")
