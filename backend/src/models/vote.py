"""Vote model for per-section dashboard feedback."""
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.user import User


class Vote(Base, TimestampMixin):
    """A user's current up/down vote on one dashboard section."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("user_id", "section", name="uq_votes_user_section"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    section: Mapped[str] = mapped_column(String(20), nullable=False)
    vote: Mapped[str] = mapped_column(String(10), nullable=False, comment="'up' or 'down'")

    user: Mapped["User"] = relationship(back_populates="votes")
