"""Service layer for registration, login and profile lookup."""
import base64
import hashlib
import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from services.exceptions import DuplicateEmailError, InvalidCredentialsError, NotFoundError

logger = logging.getLogger(__name__)


def _prehash(password: str) -> bytes:
    # bcrypt only accepts 72 bytes; a base64 SHA-256 digest is 44 bytes
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """One-way hash a password of any length with a fresh random salt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def register_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
) -> User:
    """
    Create a user with a hashed password.

    Email uniqueness is enforced by the database constraint rather than a
    pre-check, so two concurrent registrations cannot both succeed.

    Important: Registration is the only database work in its request, so the
    rollback on IntegrityError cannot undo anything else.

    Raises:
        DuplicateEmailError: If the email is already registered.
    """
    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError()

    logger.info("Registered user id=%s", user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Return the user for valid credentials.

    Raises:
        InvalidCredentialsError: For an unknown email or a wrong password alike.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    return user


async def get_profile(db: AsyncSession, user_id: int) -> User:
    """
    Get a user by ID.

    Raises:
        NotFoundError: If the user no longer exists (e.g. deleted out of band).
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user
