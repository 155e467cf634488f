"""
依赖解析服务

解析单个组件、并发解析一组组件，以及校验第三方项目是否存在。
这里是错误的边界：适配器抛出的任何异常都会被转换为 version 为 None 的记录。
"""

import asyncio
import json
from typing import Iterable, List, Optional

from loguru import logger

from echoregistry.cache import CacheService
from echoregistry.exceptions import APIError, EchoRegistryError
from echoregistry.models import INCOMPATIBLE, RegistryConfig, VersionRecord
from echoregistry.services.api_client import HttpClient
from echoregistry.services.compatibility import CompatibilityGate
from echoregistry.sources.registry import AdapterRegistry


def unique_names(names: Iterable[str]) -> List[str]:
    """去掉空白与重复项，保持原有顺序"""
    return list(dict.fromkeys(n.strip() for n in names if n and n.strip()))


class DependencyService:
    """依赖解析服务"""

    def __init__(
        self,
        http: HttpClient,
        cache: CacheService,
        config: RegistryConfig,
        registry: Optional[AdapterRegistry] = None,
        gate: Optional[CompatibilityGate] = None,
    ):
        self.http = http
        self.cache = cache
        self.config = config
        self.registry = registry or AdapterRegistry(http, config)
        self.gate = gate or CompatibilityGate(config.minimum_versions)

    async def resolve_one(self, name: str, mc_version: str) -> VersionRecord:
        """
        解析单个组件，永不抛出上游错误

        Args:
            name: 内置组件名或 Modrinth 项目 slug
            mc_version: Minecraft 版本

        Returns:
            成功、不兼容（"N/A"）或失败（None）三者之一的完整记录
        """
        if not self.gate.is_compatible(name, mc_version):
            logger.debug(f"{name} 不支持 Minecraft {mc_version}")
            return self._incompatible_record(name, mc_version)

        adapter = self.registry.get(name)
        try:
            return await self.cache.get_or_fetch_dependency(
                name, mc_version, lambda: adapter.fetch(name, mc_version)
            )
        except EchoRegistryError as e:
            logger.error(f"获取 {name} ({mc_version}) 失败: {e}")
            return self._error_record(name, mc_version, str(e))
        except Exception as e:
            logger.exception(f"获取 {name} ({mc_version}) 时发生意外错误: {e}")
            return self._error_record(name, mc_version, str(e))

    async def resolve_all(
        self, mc_version: str, extra_names: Iterable[str] = ()
    ) -> List[VersionRecord]:
        """
        并发解析所有内置组件以及额外的第三方项目

        单个组件失败不会影响其他组件，每个名字都会对应一条记录。
        """
        names = unique_names([*self.config.built_in_components, *extra_names])
        logger.info(f"开始解析 Minecraft {mc_version} 的 {len(names)} 个组件...")

        results = await asyncio.gather(
            *(self.resolve_one(name, mc_version) for name in names),
            return_exceptions=True,
        )

        records = []
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(f"组件 {name} 的解析任务异常退出: {result}")
                continue
            records.append(result)
        return records

    async def find_invalid_projects(
        self, projects: Iterable[str], mc_version: str
    ) -> List[str]:
        """
        返回 Modrinth 上不存在的项目

        Raises:
            APIError: Modrinth 返回了 404 以外的错误，或响应格式不正确
        """
        candidates = unique_names(projects)
        if not candidates:
            return []

        params = {"game_versions": json.dumps([mc_version])}

        async def check(project: str) -> Optional[str]:
            url = f"{self.config.urls.modrinth_api}/{project}/version"
            response = await self.http.fetch(url, params=params)
            if response.status == 404:
                return project
            response.raise_for_status(
                f"无法通过 Modrinth 校验项目 \"{project}\" (状态码 {response.status})"
            )
            if not isinstance(response.json(), list):
                raise APIError(f"校验项目 \"{project}\" 时 Modrinth 响应异常", url=url)
            return None

        results = await asyncio.gather(*(check(p) for p in candidates))
        return [project for project in results if project]

    def _incompatible_record(self, name: str, mc_version: str) -> VersionRecord:
        min_version = self.gate.minimum_for(name)
        return VersionRecord(
            name=name,
            loader=self.config.loader_for(name),
            version=INCOMPATIBLE,
            mc_version=mc_version,
            source_url=self.config.source_url_for(name),
            notes=f"不适用于 Minecraft {mc_version}，需要 {min_version} 或更高版本",
        )

    def _error_record(self, name: str, mc_version: str, error: str) -> VersionRecord:
        return VersionRecord(
            name=name,
            loader=self.config.loader_for(name),
            version=None,
            mc_version=mc_version,
            source_url=self.config.source_url_for(name),
            notes=f"获取失败: {error}",
        )
