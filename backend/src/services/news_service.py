"""Market news feed backed by CryptoPanic."""
from typing import Any
from urllib.parse import urlparse

import httpx
import pydantic

from core.cache import TTLCache
from models.base import utcnow
from schemas.market import NewsItem
from services.exceptions import UpstreamError
from services.gateway import (
    SOURCE_FALLBACK,
    GatewayResult,
    cache_then_fetch,
    request_json,
)

UPSTREAM = "CryptoPanic"
SOURCE_CRYPTOPANIC = "cryptopanic"

# The feed has no query parameters, so one key covers every request
NEWS_CACHE_KEY = "news"
MAX_ITEMS = 4
DEFAULT_NEWS_URL = "https://cryptopanic.com/"

STALE_NOTE = "Served from cache due to API error"
FALLBACK_NOTE = "Fallback due to server error"

FALLBACK_HEADLINES = [
    ("Bitcoin steadies as markets wait for macro signals", "https://www.coindesk.com/"),
    ("Ethereum activity rises as L2 adoption grows", "https://cointelegraph.com/"),
    ("Altcoins see mixed performance amid low volatility", "https://decrypt.co/"),
    ("Crypto market pauses ahead of macro data", "https://www.bloomberg.com/crypto"),
]


def safe_url(maybe_url: Any) -> str:
    """
    Return maybe_url if it is an absolute http(s) URL, else the default news URL.

    Blocks javascript:, data: and other schemes, relative paths, and values
    that cannot be parsed at all.
    """
    if not isinstance(maybe_url, str):
        return DEFAULT_NEWS_URL
    try:
        parsed = urlparse(maybe_url.strip())
    except ValueError:
        return DEFAULT_NEWS_URL
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return DEFAULT_NEWS_URL
    return maybe_url.strip()


def fallback_items() -> list[NewsItem]:
    """Pre-written headlines, timestamped now."""
    published_at = utcnow().isoformat()
    return [
        NewsItem(title=title, url=safe_url(url), source="Fallback", published_at=published_at)
        for title, url in FALLBACK_HEADLINES[:MAX_ITEMS]
    ]


def _to_item(post: Any) -> NewsItem:
    post = post if isinstance(post, dict) else {}
    source = post.get("source") if isinstance(post.get("source"), dict) else {}
    return NewsItem(
        title=post.get("title") or "Untitled",
        url=safe_url(post.get("url") or source.get("url") or DEFAULT_NEWS_URL),
        source=source.get("title") or "CryptoPanic",
        published_at=post.get("published_at") or post.get("created_at") or None,
    )


class NewsService:
    """Top crypto headlines with a single global TTL cache and fallback."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: TTLCache[list[NewsItem]],
        base_url: str,
        api_key: str = "",
    ) -> None:
        self._client = client
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key

    async def get_news(self) -> GatewayResult[list[NewsItem]]:
        """
        Get the latest headlines.

        Without an API key the fallback headlines are returned directly and
        nothing is cached.
        """
        if not self._api_key:
            return GatewayResult(
                payload=fallback_items(),
                updated_at=utcnow(),
                source=SOURCE_FALLBACK,
            )

        result = await cache_then_fetch(
            self._cache,
            NEWS_CACHE_KEY,
            self._fetch,
            fallback_items,
            stale_note=STALE_NOTE,
            fallback_note=FALLBACK_NOTE,
        )
        if result.source is None:
            result.source = SOURCE_CRYPTOPANIC
        return result

    async def _fetch(self) -> list[NewsItem]:
        data = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/posts/",
            upstream=UPSTREAM,
            params={
                "auth_token": self._api_key,
                "public": "true",
                "kind": "news",
                "currencies": "BTC,ETH",
            },
        )
        if not isinstance(data, dict):
            raise UpstreamError(UPSTREAM, "returned an unexpected body")

        results = data.get("results")
        if not isinstance(results, list):
            results = []
        try:
            return [_to_item(post) for post in results[:MAX_ITEMS]]
        except pydantic.ValidationError as e:
            raise UpstreamError(UPSTREAM, "returned an unexpected body") from e
