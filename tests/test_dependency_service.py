"""依赖解析服务测试"""

import json

import pytest

from echoregistry.exceptions import APIServerError, APITimeoutError
from echoregistry.models import BUILT_IN_COMPONENTS, INCOMPATIBLE
from echoregistry.services.dependency_service import DependencyService, unique_names
from echoregistry.sources import SourceAdapter


@pytest.fixture
def service(http, cache, config):
    return DependencyService(http, cache, config)


def fabric_loader_url(config, mc_version):
    return f"{config.urls.fabric_loader}/{mc_version}"


class ExplodingAdapter(SourceAdapter):
    name = "forge"

    async def fetch(self, name, mc_version):
        raise RuntimeError("unexpected")


def test_unique_names_keeps_order():
    assert unique_names(["b", " a ", "b", "", "a"]) == ["b", "a"]


@pytest.mark.asyncio
async def test_incompatible_request_skips_upstream(service, http, store):
    record = await service.resolve_one("neoforge", "1.20.1")

    assert record.version == INCOMPATIBLE
    assert record.is_incompatible
    assert "1.20.2" in record.notes
    assert http.calls == []
    assert len(store) == 0


@pytest.mark.asyncio
async def test_server_error_becomes_error_record(service, http, config, store):
    http.add(fabric_loader_url(config, "1.21.1"), status=500)

    record = await service.resolve_one("fabric-loader", "1.21.1")

    assert record.version is None
    assert record.is_error
    assert record.notes.startswith("获取失败")
    assert record.source_url == config.source_url_for("fabric-loader")
    assert len(store) == 0


@pytest.mark.asyncio
async def test_timeout_becomes_error_record(service, http, config):
    url = fabric_loader_url(config, "1.21.1")
    http.fail(url, APITimeoutError("请求超时", status=408, url=url))

    record = await service.resolve_one("fabric-loader", "1.21.1")

    assert record.version is None
    assert "E408" in record.notes


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_error_record(service, http, config):
    service.registry.register(ExplodingAdapter(http, config))

    record = await service.resolve_one("forge", "1.21.1")

    assert record.version is None
    assert "unexpected" in record.notes


@pytest.mark.asyncio
async def test_successful_result_is_cached(service, http, config):
    url = fabric_loader_url(config, "1.21.1")
    http.add(url, json.dumps([{"loader": {"version": "0.16.5"}}]))

    first = await service.resolve_one("fabric-loader", "1.21.1")
    second = await service.resolve_one("fabric-loader", "1.21.1")

    assert first.version == second.version == "0.16.5"
    assert http.count(url) == 1


@pytest.mark.asyncio
async def test_resolve_all_returns_one_record_per_name(service, http, config):
    http.add(fabric_loader_url(config, "1.21.1"), json.dumps([{"loader": {"version": "0.16.5"}}]))

    records = await service.resolve_all("1.21.1", ["fabric-api", "fabric-api", "forge"])

    assert [r.name for r in records] == [*BUILT_IN_COMPONENTS, "fabric-api"]
    by_name = {r.name: r for r in records}
    assert by_name["fabric-loader"].version == "0.16.5"
    assert by_name["fabric-api"].version is None
    assert by_name["parchment"].version is None
    assert all(r.mc_version == "1.21.1" for r in records)


@pytest.mark.asyncio
async def test_resolve_all_marks_gated_components(service):
    records = await service.resolve_all("1.19.2")

    by_name = {r.name: r for r in records}
    assert by_name["neoforge"].version == INCOMPATIBLE
    assert by_name["moddev-gradle"].version == INCOMPATIBLE
    assert by_name["forge"].version is None


@pytest.mark.asyncio
async def test_find_invalid_projects(service, http, config):
    http.add(f"{config.urls.modrinth_api}/sodium/version", "[]")

    invalid = await service.find_invalid_projects(["sodium", "nope", "sodium"], "1.21.1")

    assert invalid == ["nope"]


@pytest.mark.asyncio
async def test_find_invalid_projects_propagates_server_errors(service, http, config):
    http.add(f"{config.urls.modrinth_api}/sodium/version", status=503)

    with pytest.raises(APIServerError):
        await service.find_invalid_projects(["sodium"], "1.21.1")
