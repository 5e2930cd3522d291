"""Tests for CachedDataSource list caching and invalidation."""

from __future__ import annotations

import json

import pytest

from tenantforms.core.exceptions import CacheError
from tenantforms.persistence.cached_source import CachedDataSource
from tests.fakes import MemoryCacheBackend, MemoryDataSource


@pytest.fixture
def inner():
    return MemoryDataSource({"countries": [{"code": "ZM", "name": "Zambia"}]})


@pytest.fixture
def cached(inner, cache):
    return CachedDataSource(inner, cache, ttl_seconds=120)


class TestFetchList:
    async def test_second_fetch_served_from_cache(self, cached, inner):
        first = await cached.fetch_list("countries")
        second = await cached.fetch_list("countries")
        assert first == second == [{"code": "ZM", "name": "Zambia"}]
        assert [c[0] for c in inner.calls] == ["fetch_list"]

    async def test_stored_as_json_with_ttl(self, cached, cache):
        await cached.fetch_list("countries")
        key = cached.cache_key("countries")
        assert json.loads(cache.get(key)) == [{"code": "ZM", "name": "Zambia"}]
        assert cache.ttls[key] == 120

    async def test_params_are_part_of_key(self, cached, inner):
        await cached.fetch_list("countries", {"region": "south"})
        await cached.fetch_list("countries", {"region": "east"})
        assert len(inner.calls) == 2
        assert cached.cache_key("k", {"b": 1, "a": 2}) == cached.cache_key("k", {"a": 2, "b": 1})

    async def test_cache_failure_falls_through(self, inner):
        class BrokenCache(MemoryCacheBackend):
            def get(self, key):
                raise CacheError("down")

            def setex(self, key, ttl, value):
                raise CacheError("down")

        cached = CachedDataSource(inner, BrokenCache())
        assert await cached.fetch_list("countries") == [{"code": "ZM", "name": "Zambia"}]


class TestInvalidation:
    async def test_create_invalidates_kind(self, cache):
        cached_source = CachedDataSource(MemoryDataSource(), cache)
        assert await cached_source.fetch_list("employees") == []
        await cached_source.create("employees", {"name": "Mwila"})
        employees = await cached_source.fetch_list("employees")
        assert [e["name"] for e in employees] == ["Mwila"]

    async def test_update_invalidates_kind(self, cache):
        source = MemoryDataSource()
        cached_source = CachedDataSource(source, cache)
        created = await cached_source.create("items", {"itemName": "Milk"})
        await cached_source.fetch_list("items")
        await cached_source.update("items", created["id"], {"itemName": "Milk 2L"})
        items = await cached_source.fetch_list("items")
        assert items[0]["itemName"] == "Milk 2L"

    async def test_fetch_by_id_not_cached(self, cache):
        source = MemoryDataSource()
        cached_source = CachedDataSource(source, cache)
        created = await cached_source.create("items", {"itemName": "Milk"})
        await cached_source.fetch_by_id("items", created["id"])
        await cached_source.fetch_by_id("items", created["id"])
        assert [c[0] for c in source.calls].count("fetch_by_id") == 2

    async def test_invalidation_reaches_lists_cached_by_another_instance(self, cache):
        source = MemoryDataSource()
        reader = CachedDataSource(source, cache)
        writer = CachedDataSource(source, cache)
        await reader.fetch_list("items", {"itemTypeCode": "1"})
        await reader.fetch_list("item_groups")
        await writer.create("items", {"itemName": "Milk"})
        assert cache.get(reader.cache_key("items", {"itemTypeCode": "1"})) is None
        assert cache.get(reader.cache_key("item_groups")) == "[]"

    async def test_failed_invalidation_does_not_fail_the_write(self):
        class NoPrefixDelete(MemoryCacheBackend):
            def delete_prefix(self, prefix):
                raise CacheError("down")

        cached_source = CachedDataSource(MemoryDataSource(), NoPrefixDelete())
        created = await cached_source.create("items", {"itemName": "Milk"})
        assert created["itemName"] == "Milk"
