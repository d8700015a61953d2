"""In-process TTL cache used by the external data gateways."""
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from models.base import utcnow

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """
    A cached upstream payload.

    cached_at comes from the cache's clock (monotonic by default) and drives
    freshness. updated_at is the wall-clock time reported to clients.
    """

    key: str
    payload: T
    cached_at: float
    updated_at: datetime


class TTLCache(Generic[T]):
    """
    Plain key -> entry map with time-based freshness.

    Entries are never evicted: a stale entry stays available as a degraded
    fallback until it is overwritten by the next successful refresh. No
    locking; concurrent refreshes of the same key race and the last put wins.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache with a TTL and an injectable clock (for tests)."""
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> CacheEntry[T] | None:
        """Return the entry for key, fresh or stale, or None if never stored."""
        return self._entries.get(key)

    def put(self, key: str, payload: T, updated_at: datetime | None = None) -> CacheEntry[T]:
        """Store payload under key, resetting its age."""
        entry = CacheEntry(
            key=key,
            payload=payload,
            cached_at=self._clock(),
            updated_at=updated_at or utcnow(),
        )
        self._entries[key] = entry
        return entry

    def is_fresh(self, entry: CacheEntry[T]) -> bool:
        """True while the entry is younger than the TTL."""
        return self._clock() - entry.cached_at < self.ttl_seconds

    def __len__(self) -> int:
        return len(self._entries)
