"""In-memory TTL cache for catalog API responses.

Entries live for the lifetime of the process. Expired entries are evicted
lazily when read; there is no background sweeper and no capacity bound.
Entries are replaced, never patched: a fresh fetch for an evicted key writes
a new entry.

Concurrent misses for the same key may both fetch and both write. The
payload for a URL is the same within a TTL window, so last write wins.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


@dataclass(frozen=True)
class CacheStats:
    size: int
    keys: list[str]


@dataclass(frozen=True)
class _Entry:
    value: Any
    timestamp_ms: float


class ResponseCache:
    """Keyed store of parsed payloads, implementing CacheProtocol."""

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_ms = ttl_seconds * 1000
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._now_ms() - entry.timestamp_ms > self._ttl_ms:
            del self._entries[key]
            log.debug("cache_evicted", key=key)
            return None

        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = _Entry(value=value, timestamp_ms=self._now_ms())

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), keys=list(self._entries))
