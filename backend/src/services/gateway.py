"""
Shared plumbing for the external data integrations.

Every cached integration follows the same cache-then-fetch-then-fallback flow:

1. A fresh cache entry is returned as-is (cached=True).
2. Otherwise the upstream is called. A successful result replaces the cache entry.
3. If the upstream fails, a stale entry is served (cached=True plus a note),
   and without one a hardcoded fallback payload is returned (source="fallback").

The payload shape is the same in all three cases; only the tag fields differ.
"""
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

import httpx

from core.cache import TTLCache
from models.base import utcnow
from services.exceptions import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "Mozilla/5.0 (compatible; CryptoDashboard/1.0)"
SOURCE_FALLBACK = "fallback"


@dataclass
class GatewayResult(Generic[T]):
    """A payload plus the tags describing where it came from."""

    payload: T
    updated_at: datetime
    cached: bool = False
    source: str | None = None
    note: str | None = None


def create_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """Shared client for upstream calls; every request is bounded by timeout_seconds."""
    return httpx.AsyncClient(
        timeout=timeout_seconds,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )


def _error_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    upstream: str,
    **kwargs: Any,
) -> Any:
    """
    Make an upstream request and return its parsed JSON body.

    Raises:
        UpstreamError: On network errors, timeouts, non-2xx responses, or a
            body that is not valid JSON.
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise UpstreamError(upstream, f"timed out: {e}") from e
    except httpx.HTTPError as e:
        raise UpstreamError(upstream, f"request failed: {e}") from e

    if not response.is_success:
        raise UpstreamError(
            upstream,
            f"failed ({response.status_code})",
            status=response.status_code,
            details=_error_details(response),
        )

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(
            upstream,
            "returned an unparseable body",
            status=response.status_code,
        ) from e


async def cache_then_fetch(
    cache: TTLCache[T],
    key: str,
    fetch: Callable[[], Awaitable[T]],
    fallback: Callable[[], T],
    *,
    stale_note: str,
    fallback_note: str,
) -> GatewayResult[T]:
    """
    Serve key from cache, upstream, stale cache, or fallback - in that order.

    Only UpstreamError is absorbed here; anything else is a bug and propagates.
    """
    entry = cache.get(key)
    if entry is not None and cache.is_fresh(entry):
        return GatewayResult(payload=entry.payload, updated_at=entry.updated_at, cached=True)

    try:
        payload = await fetch()
    except UpstreamError as e:
        if entry is not None:
            logger.warning("Serving stale cache for %r: %s", key, e)
            return GatewayResult(
                payload=entry.payload,
                updated_at=entry.updated_at,
                cached=True,
                note=stale_note,
            )
        logger.warning("Serving fallback for %r: %s", key, e)
        return GatewayResult(
            payload=fallback(),
            updated_at=utcnow(),
            source=SOURCE_FALLBACK,
            note=fallback_note,
        )

    entry = cache.put(key, payload)
    return GatewayResult(payload=entry.payload, updated_at=entry.updated_at)
