from __future__ import annotations

import asyncio
import re
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from icon_search_mcp.errors import CacheError
from icon_search_mcp.models import CacheConfig

T = TypeVar("T")

_KEY_UNSAFE = re.compile(r"[^a-z0-9:]")


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class CacheEntry:
    value: Any
    expires_at_epoch_ms: float
    access_count: int
    last_accessed_epoch_ms: float


class CacheService:
    """In-memory TTL cache with LRU eviction and a background expiry sweep.

    Entries expire lazily on read and are also swept periodically by an asyncio
    task once ``start_cleanup_timer()`` has been called from a running loop.
    The sweep task is cancelled by ``stop_cleanup_timer()`` or ``destroy()``.
    """

    def __init__(self, config: CacheConfig | None = None, *, clock: Callable[[], float] = _now_ms):
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._misses = 0
        self._cleanup_task: asyncio.Task | None = None

    @property
    def config(self) -> CacheConfig:
        return self._config

    def set(self, key: str, value: Any, ttl_ms: float | None = None) -> None:
        try:
            ttl = self._config.ttl_ms if ttl_ms is None else ttl_ms
            now = self._clock()

            if key not in self._entries and len(self._entries) >= self._config.max_size:
                self._evict_least_recently_used()

            self._entries[key] = CacheEntry(
                value=value,
                expires_at_epoch_ms=now + ttl,
                access_count=0,
                last_accessed_epoch_ms=now,
            )
            self._entries.move_to_end(key)
        except Exception as ex:
            raise CacheError(f'Failed to set cache entry for key "{key}": {ex}', key=key) from ex

    def get(self, key: str) -> Any | None:
        try:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            now = self._clock()
            if now > entry.expires_at_epoch_ms:
                del self._entries[key]
                self._misses += 1
                return None

            entry.access_count += 1
            entry.last_accessed_epoch_ms = now
            self._entries.move_to_end(key)
            return entry.value
        except Exception as ex:
            raise CacheError(f'Failed to get cache entry for key "{key}": {ex}', key=key) from ex

    def has(self, key: str) -> bool:
        try:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._clock() > entry.expires_at_epoch_ms:
                del self._entries[key]
                return False
            return True
        except Exception as ex:
            raise CacheError(f'Failed to check cache entry for key "{key}": {ex}', key=key) from ex

    def delete(self, key: str) -> bool:
        try:
            return self._entries.pop(key, None) is not None
        except Exception as ex:
            raise CacheError(f'Failed to delete cache entry for key "{key}": {ex}', key=key) from ex

    def clear(self) -> None:
        try:
            self._entries.clear()
        except Exception as ex:
            raise CacheError(f"Failed to clear cache: {ex}") from ex
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> dict[str, Any]:
        now = self._clock()
        total_accesses = 0
        expired_entries = 0
        for entry in self._entries.values():
            if now > entry.expires_at_epoch_ms:
                expired_entries += 1
            else:
                total_accesses += entry.access_count

        lookups = total_accesses + self._misses
        return {
            "size": len(self._entries),
            "maxSize": self._config.max_size,
            "hitRate": total_accesses / lookups if lookups > 0 else 0.0,
            "totalAccesses": total_accesses,
            "expiredEntries": expired_entries,
        }

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[T]],
        ttl_ms: float | None = None,
    ) -> T:
        cached = self.get(key)
        if cached is not None:
            return cached

        try:
            value = await factory()
        except Exception as ex:
            raise CacheError(f'Failed to execute factory function for key "{key}": {ex}', key=key) from ex

        self.set(key, value, ttl_ms)
        return value

    def start_cleanup_timer(self) -> None:
        """Start the periodic sweep; requires a running event loop."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        loop = asyncio.get_running_loop()
        self._cleanup_task = loop.create_task(self._run_cleanup())

    def stop_cleanup_timer(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            self._cleanup_task = None

    @property
    def cleanup_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    def cleanup_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at_epoch_ms]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Cache sweep removed {len(expired)} expired entries")
        return len(expired)

    async def _run_cleanup(self) -> None:
        period_seconds = max(0.01, self._config.check_period_ms / 1000)
        while True:
            await asyncio.sleep(period_seconds)
            self.cleanup_expired()

    def _evict_least_recently_used(self) -> None:
        if not self._entries:
            return
        # min() keeps the first of equal timestamps; entries are ordered by last touch.
        oldest_key = min(self._entries, key=lambda k: self._entries[k].last_accessed_epoch_ms)
        del self._entries[oldest_key]
        logger.debug(f"Cache evicted least recently used key: {oldest_key}")

    @staticmethod
    def generate_key(*parts: str | int | float | bool) -> str:
        joined = ":".join(str(part) for part in parts).lower()
        return _KEY_UNSAFE.sub("_", joined)

    def destroy(self) -> None:
        self.stop_cleanup_timer()
        self.clear()
