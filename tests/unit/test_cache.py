"""Unit tests for MemoryCacheProvider."""

from __future__ import annotations

import pytest

from intelsearch.providers.cache.memory_cache import MemoryCacheProvider


class TestMemoryCacheProvider:
    @pytest.mark.asyncio
    async def test_set_and_get(self) -> None:
        cache = MemoryCacheProvider()
        await cache.set("key", {"value": 1})
        assert await cache.get("key") == {"value": 1}

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        assert await MemoryCacheProvider().get("absent") is None

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        cache = MemoryCacheProvider()
        await cache.set("key", "value")
        await cache.delete("key")
        await cache.delete("never-set")
        assert await cache.get("key") is None

    @pytest.mark.asyncio
    async def test_max_size_evicts(self) -> None:
        cache = MemoryCacheProvider(max_size=1)
        await cache.set("a", 1)
        await cache.set("b", 2)
        assert await cache.get("a") is None
        assert await cache.get("b") == 2

    @pytest.mark.asyncio
    async def test_keys_are_namespaced(self) -> None:
        cache = MemoryCacheProvider(namespace="https://a.example")
        await cache.set("schema", "a")

        assert await cache.get("schema") == "a"
        assert list(cache._entries) == ["https://a.example:schema"]
