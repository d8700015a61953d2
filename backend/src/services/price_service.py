"""Price feed backed by CoinGecko's simple price API."""
import httpx
import pydantic

from core.cache import TTLCache
from schemas.market import PriceQuote
from services.exceptions import UpstreamError, ValidationError
from services.gateway import GatewayResult, cache_then_fetch, request_json

UPSTREAM = "CoinGecko"

# Only these symbols map to upstream ids; anything else is dropped from the request
COINGECKO_ID_BY_SYMBOL = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "DOGE": "dogecoin",
    "ADA": "cardano",
    "XRP": "ripple",
}

STALE_NOTE = "Served from cache due to CoinGecko error"
FALLBACK_NOTE = "Fallback due to CoinGecko error"


def parse_symbols(assets: str | None) -> list[str]:
    """
    Split a comma-separated symbol list into trimmed, upper-cased symbols.

    Raises:
        ValidationError: If no symbols were given.
    """
    symbols = [s.strip().upper() for s in (assets or "").split(",")]
    symbols = [s for s in symbols if s]
    if not symbols:
        raise ValidationError(
            "assets",
            "Missing assets query param (example: /api/prices?assets=BTC,ETH)",
        )
    return symbols


def fallback_quotes(symbols: list[str]) -> list[PriceQuote]:
    """Zero-valued quotes for every requested symbol, including unsupported ones."""
    return [
        PriceQuote(symbol=s, usd=0, usd_24h_change=0, note="fallback")
        for s in symbols
    ]


class PriceService:
    """
    Quotes for a fixed allow-list of assets with a TTL cache and fallback.

    The cache key is the normalized symbol list in request order, so
    "BTC,ETH" and "ETH,BTC" are cached separately; cached payloads keep the
    order the caller asked for.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: TTLCache[list[PriceQuote]],
        base_url: str,
        api_key: str = "",
    ) -> None:
        self._client = client
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key

    async def get_prices(self, assets: str | None) -> GatewayResult[list[PriceQuote]]:
        """
        Get USD quotes and 24h change for the requested symbols.

        Raises:
            ValidationError: If assets is empty or names no supported symbol.
                This is never downgraded to a fallback.
        """
        symbols = parse_symbols(assets)
        ids = [COINGECKO_ID_BY_SYMBOL[s] for s in symbols if s in COINGECKO_ID_BY_SYMBOL]
        if not ids:
            raise ValidationError(
                "assets",
                "No supported assets provided",
                allowed=list(COINGECKO_ID_BY_SYMBOL),
            )

        return await cache_then_fetch(
            self._cache,
            ",".join(symbols),
            lambda: self._fetch(symbols, ids),
            lambda: fallback_quotes(symbols),
            stale_note=STALE_NOTE,
            fallback_note=FALLBACK_NOTE,
        )

    async def _fetch(self, symbols: list[str], ids: list[str]) -> list[PriceQuote]:
        headers = {"x-cg-demo-api-key": self._api_key} if self._api_key else {}
        data = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/simple/price",
            upstream=UPSTREAM,
            params={
                "ids": ",".join(ids),
                "vs_currencies": "usd",
                "include_24hr_change": "true",
            },
            headers=headers,
        )
        if not isinstance(data, dict):
            raise UpstreamError(UPSTREAM, "returned an unexpected body")

        quotes = []
        for symbol in symbols:
            coin = data.get(COINGECKO_ID_BY_SYMBOL.get(symbol, ""))
            if not isinstance(coin, dict):
                continue
            try:
                quotes.append(PriceQuote(
                    symbol=symbol,
                    usd=coin.get("usd"),
                    usd_24h_change=coin.get("usd_24h_change"),
                ))
            except pydantic.ValidationError as e:
                raise UpstreamError(UPSTREAM, "returned an unexpected body") from e
        return quotes
