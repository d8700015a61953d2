"""Shared exceptions for service layer operations."""
from typing import Any


class ValidationError(Exception):
    """Raised when request input is missing or malformed."""

    def __init__(self, field: str, message: str, allowed: list[str] | None = None) -> None:
        self.field = field
        self.message = message
        self.allowed = allowed
        super().__init__(message)


class DuplicateEmailError(Exception):
    """Raised when registering an email that already belongs to a user."""

    def __init__(self) -> None:
        super().__init__("Email already exists")


class InvalidCredentialsError(Exception):
    """
    Raised when login fails.

    Unknown email and wrong password raise the same error so callers cannot
    tell which accounts exist.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class NotFoundError(Exception):
    """Raised when a referenced entity no longer exists."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity} not found")


class ConfigError(Exception):
    """Raised when a required server-side secret or setting is missing."""

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"{setting} is not configured on the server")


class UpstreamError(Exception):
    """
    Raised when a third-party API call fails.

    Covers network errors, timeouts, non-2xx responses and unparseable bodies.
    """

    def __init__(
        self,
        upstream: str,
        message: str,
        status: int | None = None,
        details: Any = None,
    ) -> None:
        self.upstream = upstream
        self.status = status
        self.details = details
        super().__init__(f"{upstream}: {message}")


class AllProvidersFailedError(Exception):
    """Raised when every insight provider failed in turn."""

    def __init__(
        self,
        tried: list[str],
        last_model: str | None,
        last_error: UpstreamError | None,
    ) -> None:
        self.tried = tried
        self.last_model = last_model
        self.last_error = last_error
        super().__init__(f"All insight providers failed: {', '.join(tried)}")
