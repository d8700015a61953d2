"""FastAPI dependencies for injection."""
from fastapi import Depends, Request

from core.auth import Identity, get_current_identity
from core.config import Settings, get_settings
from db.session import get_async_session
from services.exceptions import ConfigError
from services.insight_service import InsightService
from services.news_service import NewsService
from services.price_service import PriceService


def get_price_service(request: Request) -> PriceService:
    """Resolve the shared PriceService from app.state (created at startup)."""
    return request.app.state.price_service


def get_news_service(request: Request) -> NewsService:
    """Resolve the shared NewsService from app.state."""
    return request.app.state.news_service


def get_insight_service(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> InsightService:
    """
    Resolve the shared InsightService from app.state.

    Raises:
        ConfigError: If HF_TOKEN is not configured.
    """
    if not settings.hf_token:
        raise ConfigError("HF_TOKEN")
    return request.app.state.insight_service


__all__ = [
    "Identity",
    "get_async_session",
    "get_current_identity",
    "get_insight_service",
    "get_news_service",
    "get_price_service",
    "get_settings",
]
