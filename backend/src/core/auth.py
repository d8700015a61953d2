"""Session token issuing and validation (HS256 JWTs signed with a server secret)."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings
from models.base import utcnow
from services.exceptions import ConfigError

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme (auto_error=False so we can report our own 401 reasons)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, decoded from a session token."""

    user_id: int
    email: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        raise ConfigError("JWT_SECRET")
    return settings.jwt_secret


def create_access_token(
    user_id: int,
    email: str,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """
    Issue a signed, self-contained session token.

    The token embeds userId and email and expires jwt_expire_days after
    issuance. No server-side session state is kept.

    Raises:
        ConfigError: If JWT_SECRET is not configured.
    """
    secret = _require_secret(settings)
    issued_at = now or utcnow()
    payload = {
        "sub": str(user_id),
        "userId": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """
    Verify a session token's signature and expiry.

    Expired and otherwise invalid tokens produce the same 401 so the response
    does not reveal which check failed.

    Raises:
        HTTPException: 401 if the token is invalid or expired.
        ConfigError: If JWT_SECRET is not configured.
    """
    secret = _require_secret(settings)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        # Log full details for debugging (server-side only)
        logger.info("Session token rejected: %s", e)
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("userId")
    email = payload.get("email")
    if not isinstance(user_id, int) or not isinstance(email, str):
        raise _unauthorized("Invalid or expired token")
    return Identity(user_id=user_id, email=email)


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Resolve the authenticated identity for protected routes.

    Failure reasons:
    - no Authorization header: "Missing credentials"
    - header present but not "Bearer <token>": "Malformed credentials"
    - bad signature or expired: "Invalid or expired token"
    """
    if credentials is None:
        if request.headers.get("Authorization") is None:
            raise _unauthorized("Missing credentials")
        raise _unauthorized("Malformed credentials")

    return decode_access_token(credentials.credentials, settings)
