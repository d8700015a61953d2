"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.user import User
from models.preference import Preference
from models.vote import Vote

__all__ = [
    "Base",
    "Preference",
    "TimestampMixin",
    "User",
    "Vote",
]
