"""Process-local schema cache on top of ``cachetools.TTLCache``.

Holds the hybrid-search schema between requests so the sidebar does not
hit the backend on every page load.  Keys are namespaced per backend so
that pointing the console at another deployment never serves a schema
fetched from the previous one.
"""

from __future__ import annotations

from typing import Any

import structlog
from cachetools import TTLCache

from intelsearch.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """TTL cache for slow-changing backend payloads.

    Parameters
    ----------
    max_size:
        Entry count after which the oldest entries are evicted.
    ttl:
        Seconds an entry stays valid.
    namespace:
        Prefix applied to every key, usually the backend base URL.
    """

    def __init__(self, max_size: int = 128, ttl: int = 300, namespace: str = "") -> None:
        self._entries: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl)
        self._namespace = namespace

    def _qualify(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    async def get(self, key: str) -> Any | None:
        value = self._entries.get(self._qualify(key))
        logger.debug("cache_lookup", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any) -> None:
        self._entries[self._qualify(key)] = value

    async def delete(self, key: str) -> None:
        self._entries.pop(self._qualify(key), None)
