"""Dashboard widget endpoints: prices, news, AI insight and meme of the day."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    Identity,
    get_async_session,
    get_current_identity,
    get_insight_service,
    get_news_service,
    get_price_service,
)
from schemas.market import (
    InsightResponse,
    Meme,
    NewsResponse,
    PricesResponse,
)
from services import meme_service, preference_service
from services.insight_service import InsightService
from services.news_service import NewsService
from services.price_service import PriceService

router = APIRouter(prefix="/api", tags=["market"])


@router.get("/prices", response_model=PricesResponse, response_model_exclude_none=True)
async def get_prices(
    assets: str | None = Query(default=None, description="Comma-separated symbols, e.g. BTC,ETH"),
    prices: PriceService = Depends(get_price_service),
) -> PricesResponse:
    """
    Get USD prices and 24h change for the requested assets.

    Supported symbols: BTC, ETH, SOL, DOGE, ADA, XRP. Unsupported symbols are
    ignored unless none of the requested symbols is supported (400).

    Upstream failures never surface as errors: the last cached quotes (with
    `cached` and `note`) or zero-valued fallback quotes (`source=fallback`)
    are returned instead.
    """
    result = await prices.get_prices(assets)
    return PricesResponse(
        prices=result.payload,
        updated_at=result.updated_at,
        cached=result.cached or None,
        source=result.source,
        note=result.note,
    )


@router.get("/news", response_model=NewsResponse, response_model_exclude_none=True)
async def get_news(
    _identity: Identity = Depends(get_current_identity),
    news: NewsService = Depends(get_news_service),
) -> NewsResponse:
    """
    Get the top four crypto headlines.

    Every item URL is an http(s) URL. Upstream failures return cached or
    fallback headlines rather than an error.
    """
    result = await news.get_news()
    return NewsResponse(
        items=result.payload,
        source=result.source,
        updated_at=result.updated_at,
        cached=result.cached or None,
        note=result.note,
    )


@router.get("/ai-insight", response_model=InsightResponse)
async def get_ai_insight(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
    insights: InsightService = Depends(get_insight_service),
) -> InsightResponse:
    """
    Generate a short market insight tailored to the user's preferences.

    Models are tried in order; 502 if every model fails.
    """
    preference = await preference_service.get_preferences(db, identity.user_id)
    insight = await insights.generate(preference)
    return InsightResponse(
        insight=insight.text,
        model=insight.model,
        updated_at=insight.updated_at,
    )


@router.get("/meme", response_model=Meme)
async def get_meme(
    exclude: str | None = Query(default=None, description="ID of the meme to skip"),
) -> Meme:
    """Get a random meme, optionally skipping the one currently shown."""
    return meme_service.pick_meme(exclude=exclude)
