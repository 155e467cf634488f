"""缓存层测试"""

import json

import pytest

from echoregistry.cache import CacheService, KeyValueStore, MemoryStore
from echoregistry.exceptions import APIError
from echoregistry.models import Loader, MinecraftVersion, VersionRecord


class BrokenStore(KeyValueStore):
    """所有操作都失败的存储"""

    async def get(self, key):
        raise ConnectionError("store unavailable")

    async def put(self, key, value, ttl_seconds):
        raise ConnectionError("store unavailable")

    async def delete(self, key):
        raise ConnectionError("store unavailable")


class Counter:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


def sample_record(version="0.16.5"):
    return VersionRecord(
        name="fabric-loader",
        loader=Loader.FABRIC,
        version=version,
        mc_version="1.21.1",
        source_url="https://meta.fabricmc.net/v2/versions/loader/",
    )


@pytest.mark.asyncio
async def test_memory_store_expires_entries(store, clock):
    await store.put("k", "v", 10)

    clock.advance(9.9)
    assert await store.get("k") == "v"

    clock.advance(0.1)
    assert await store.get("k") is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_memory_store_overwrite_and_delete(store):
    await store.put("k", "old", 10)
    await store.put("k", "new", 10)
    assert await store.get("k") == "new"

    await store.delete("k")
    await store.delete("missing")
    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_get_or_fetch_hits_cache(cache):
    fetch = Counter({"answer": 42})

    first = await cache.get_or_fetch("key", fetch, ttl=60)
    second = await cache.get_or_fetch("key", fetch, ttl=60)

    assert first == second == {"answer": 42}
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_fetch_errors_propagate_and_are_not_cached(cache, store):
    async def failing():
        raise APIError("boom")

    with pytest.raises(APIError):
        await cache.get_or_fetch("key", failing, ttl=60)
    assert len(store) == 0


@pytest.mark.asyncio
async def test_dependency_round_trip(cache, store):
    fetch = Counter(sample_record())

    first = await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)
    second = await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)

    assert fetch.calls == 1
    assert second.version == first.version == "0.16.5"
    assert second.loader is Loader.FABRIC
    assert second.cached_at is not None and second.cached_at.endswith("Z")

    raw = json.loads(await store.get("dep:fabric-loader:1.21.1"))
    assert raw["version"] == "0.16.5"


@pytest.mark.asyncio
async def test_dependency_expires_after_ttl(cache, clock, config):
    fetch = Counter(sample_record())

    await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)
    clock.advance(config.cache.ttl_dependencies)
    await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)

    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_corrupt_entry_is_a_miss(cache, store):
    await store.put("dep:fabric-loader:1.21.1", "not json", 60)
    fetch = Counter(sample_record())

    record = await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)

    assert record.version == "0.16.5"
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_empty_minecraft_catalog_is_a_miss(cache):
    fetch = Counter([])

    await cache.get_or_fetch_minecraft_versions(fetch)
    await cache.get_or_fetch_minecraft_versions(fetch)

    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_minecraft_catalog_is_cached(cache):
    fetch = Counter([MinecraftVersion("1.21.1", "release", "2024-08-08T12:24:45+00:00")])

    await cache.get_or_fetch_minecraft_versions(fetch)
    versions = await cache.get_or_fetch_minecraft_versions(fetch)

    assert fetch.calls == 1
    assert versions[0].id == "1.21.1"


@pytest.mark.asyncio
async def test_broken_store_degrades_to_fetching(config):
    cache = CacheService(BrokenStore(), config.cache)
    fetch = Counter(sample_record())

    record = await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)
    await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", fetch)

    assert record.version == "0.16.5"
    assert fetch.calls == 2
    assert await cache.check_health() == "error"
    assert not await cache.invalidate_dependency("fabric-loader", "1.21.1")


@pytest.mark.asyncio
async def test_invalidate_dependency(cache, store):
    await cache.get_or_fetch_dependency("fabric-loader", "1.21.1", Counter(sample_record()))

    assert await cache.invalidate_dependency("fabric-loader", "1.21.1")
    assert await store.get("dep:fabric-loader:1.21.1") is None
    assert await cache.check_health() == "connected"


def test_store_is_injectable():
    assert isinstance(MemoryStore(), KeyValueStore)


@pytest.mark.asyncio
async def test_memory_store_sweeps_unread_expired_keys(clock):
    store = MemoryStore(clock=clock, sweep_interval=60)
    for i in range(3):
        await store.put(f"dep:mod-{i}:1.21.1", "{}", 10)

    clock.advance(61)
    await store.put("dep:fresh:1.21.1", "{}", 10)

    assert len(store) == 1
    assert await store.get("dep:fresh:1.21.1") == "{}"


@pytest.mark.asyncio
async def test_memory_store_manual_sweep_keeps_live_entries(store, clock):
    await store.put("short", "v", 5)
    await store.put("long", "v", 500)

    clock.advance(10)

    assert store.sweep() == 1
    assert len(store) == 1
