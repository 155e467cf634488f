"""Minecraft 版本目录、健康检查与协调器测试"""

import json

import pytest

from echoregistry import EchoRegistry
from echoregistry.cache import MemoryStore
from echoregistry.exceptions import APIServerError
from echoregistry.services.health import HealthService
from echoregistry.services.minecraft_service import MinecraftService

MANIFEST = {
    "latest": {"release": "1.21.1", "snapshot": "24w33a"},
    "versions": [
        {"id": "24w33a", "type": "snapshot", "releaseTime": "2024-08-15T12:00:00+00:00"},
        {"id": "1.21.1", "type": "release", "releaseTime": "2024-08-08T12:24:45+00:00"},
        {"type": "release"},
    ],
}


@pytest.mark.asyncio
async def test_minecraft_versions_are_parsed_and_cached(http, cache, config):
    http.add(config.urls.minecraft_manifest, json.dumps(MANIFEST))
    service = MinecraftService(http, cache, config)

    versions = await service.fetch_minecraft_versions()
    again = await service.fetch_minecraft_versions()

    assert [v.id for v in versions] == ["24w33a", "1.21.1"]
    assert versions[1].version_type == "release"
    assert versions[1].release_time == "2024-08-08T12:24:45+00:00"
    assert [v.id for v in again] == ["24w33a", "1.21.1"]
    assert http.count(config.urls.minecraft_manifest) == 1


@pytest.mark.asyncio
async def test_minecraft_manifest_failure_raises(http, cache, config):
    http.add(config.urls.minecraft_manifest, status=502)

    with pytest.raises(APIServerError):
        await MinecraftService(http, cache, config).fetch_minecraft_versions()


class TestHealth:
    def add_endpoints(self, http, config, status=200):
        for url in config.health.endpoints.values():
            http.add(url, status=status)

    @pytest.mark.asyncio
    async def test_all_upstreams_reachable(self, http, cache, config):
        self.add_endpoints(http, config)

        report = await HealthService(http, cache, config).check()

        assert report["status"] == "ok"
        assert report["cache_status"] == "connected"
        assert set(report["external_apis"].values()) == {"ok"}
        assert all(method == "HEAD" for method, _, _ in http.calls)

    @pytest.mark.asyncio
    async def test_single_failure_is_tolerated(self, http, cache, config):
        self.add_endpoints(http, config)
        http.add(config.health.endpoints["modrinth"], status=503)

        report = await HealthService(http, cache, config).check()

        assert report["status"] == "ok"
        assert report["external_apis"]["modrinth"] == "error"

    @pytest.mark.asyncio
    async def test_degraded_when_upstreams_down(self, http, cache, config):
        report = await HealthService(http, cache, config).check()

        assert report["status"] == "degraded"
        assert report["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_registry_resolves_and_purges(http, config):
    http.add(
        f"{config.urls.fabric_loader}/1.21.1",
        json.dumps([{"loader": {"version": "0.16.5"}}]),
    )
    store = MemoryStore()

    async with EchoRegistry(config, store=store, http=http) as registry:
        records = await registry.resolve_all("1.21.1", ["fabric-api"])
        assert len(records) == len(config.built_in_components) + 1
        assert len(store) == 1

        assert await registry.purge("fabric-loader", "1.21.1")
        assert len(store) == 0

        assert not registry.is_compatible("neoforge", "1.20.1")
        record = await registry.resolve_one("neoforge", "1.20.1")
        assert record.version == "N/A"
