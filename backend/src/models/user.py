"""User model for storing registered users."""
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.preference import Preference
    from models.vote import Vote


class User(Base, TimestampMixin):
    """User model - identity plus bcrypt password hash."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        comment="Login identifier - uniqueness enforced by the database",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        comment="bcrypt hash (includes its own random salt); plaintext is never stored",
    )

    preference: Mapped["Preference | None"] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
    votes: Mapped[list["Vote"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
