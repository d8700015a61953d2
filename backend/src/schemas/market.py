"""Pydantic schemas for the price, news, insight and meme widgets."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer

from schemas.validators import UtcDatetime


class PriceQuote(BaseModel):
    """USD quote for one symbol. note is set only on fallback quotes."""

    symbol: str
    usd: float | None = None
    usd_24h_change: float | None = None
    note: str | None = None

    @model_serializer(mode="wrap")
    def _keep_price_keys(self, handler: SerializerFunctionWrapHandler) -> Any:
        # usd and usd_24h_change stay in the output (as null) under exclude_none
        data = handler(self)
        if isinstance(data, dict):
            data.setdefault("usd", self.usd)
            data.setdefault("usd_24h_change", self.usd_24h_change)
        return data


class PricesResponse(BaseModel):
    """Price feed response. cached/source/note are omitted when unset."""

    model_config = ConfigDict(populate_by_name=True)

    prices: list[PriceQuote]
    updated_at: UtcDatetime = Field(alias="updatedAt")
    cached: bool | None = None
    source: str | None = None
    note: str | None = None


class NewsItem(BaseModel):
    """A single headline. url is always an http(s) URL."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    url: str
    source: str
    published_at: str | None = Field(alias="publishedAt")


class NewsResponse(BaseModel):
    """News feed response. cached/note are omitted when unset."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[NewsItem]
    source: str
    updated_at: UtcDatetime = Field(alias="updatedAt")
    cached: bool | None = None
    note: str | None = None


class InsightResponse(BaseModel):
    """Generated insight and the model that produced it."""

    model_config = ConfigDict(populate_by_name=True)

    insight: str
    model: str
    updated_at: UtcDatetime = Field(alias="updatedAt")


class Meme(BaseModel):
    """A meme-of-the-day entry."""

    id: str
    title: str
    img: str
