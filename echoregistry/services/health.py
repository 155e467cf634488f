"""
健康检查服务

检查缓存存储与各上游数据源是否可用。
"""

import asyncio
from typing import Any, Dict

from loguru import logger

from echoregistry.cache import CacheService, utc_timestamp
from echoregistry.exceptions import APIError
from echoregistry.models import RegistryConfig
from echoregistry.services.api_client import HttpClient


class HealthService:
    """健康检查服务"""

    def __init__(self, http: HttpClient, cache: CacheService, config: RegistryConfig):
        self.http = http
        self.cache = cache
        self.config = config

    async def _probe(self, name: str, url: str) -> str:
        try:
            response = await self.http.fetch(
                url, timeout=self.config.http.health_timeout, method="HEAD"
            )
        except APIError as e:
            logger.warning(f"[健康检查] {name} 不可用: {e}")
            return "error"
        return "ok" if response.ok else "error"

    async def check(self) -> Dict[str, Any]:
        """
        执行健康检查

        Returns:
            {status, timestamp, cache_status, external_apis}
        """
        endpoints = self.config.health.endpoints
        cache_status, *statuses = await asyncio.gather(
            self.cache.check_health(),
            *(self._probe(name, url) for name, url in endpoints.items()),
        )
        external_apis = dict(zip(endpoints, statuses))

        error_count = sum(1 for status in statuses if status == "error")
        degraded = (
            error_count > self.config.health.error_threshold
            or cache_status != "connected"
        )

        return {
            "status": "degraded" if degraded else "ok",
            "timestamp": utc_timestamp(),
            "cache_status": cache_status,
            "external_apis": external_apis,
        }
