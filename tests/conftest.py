"""
测试公共夹具

上游请求全部由 FakeHttp 按 URL 返回预设响应，不访问网络。
"""

from typing import List

import pytest
from loguru import logger

from echoregistry.cache import CacheService, MemoryStore
from echoregistry.models import RegistryConfig
from echoregistry.services.api_client import HttpResponse


class FakeHttp:
    """按 URL 返回预设响应的 HTTP 客户端，未登记的 URL 返回 404"""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, url: str, body: str = "", status: int = 200):
        self.routes[url] = HttpResponse(status=status, body=body, url=url)

    def fail(self, url: str, error: Exception):
        self.routes[url] = error

    def route(self, url: str, handler):
        """handler(url, params) -> HttpResponse"""
        self.routes[url] = handler

    def count(self, url: str) -> int:
        return sum(1 for _, called, _ in self.calls if called == url)

    async def fetch(self, url, timeout=None, params=None, method="GET"):
        self.calls.append((method, url, params))
        result = self.routes.get(url)
        if result is None:
            return HttpResponse(status=404, body="", url=url)
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(url, params)
        return result

    async def close(self):
        pass


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, now: float = 0.0):
        self.now = now

    def advance(self, seconds: float):
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def maven_xml(versions: List[str], latest: str = None, release: str = None) -> str:
    """生成 maven-metadata.xml 文本"""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<metadata>",
        "  <groupId>net.example</groupId>",
        "  <artifactId>example</artifactId>",
        "  <versioning>",
    ]
    if latest:
        parts.append(f"    <latest>{latest}</latest>")
    if release:
        parts.append(f"    <release>{release}</release>")
    parts.append("    <versions>")
    parts.extend(f"      <version>{v}</version>" for v in versions)
    parts.extend(["    </versions>", "  </versioning>", "</metadata>"])
    return "\n".join(parts)


@pytest.fixture
def config():
    return RegistryConfig()


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def cache(store, config):
    return CacheService(store, config.cache)


@pytest.fixture
def log_messages():
    """收集 loguru 输出的日志"""
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
