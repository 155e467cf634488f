"""
主协调器

整合 HTTP 客户端、缓存、数据源与各服务，对外提供全部公开操作。
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from echoregistry.cache import CacheService, KeyValueStore, MemoryStore
from echoregistry.models import (
    CompatibilityMatrix,
    MinecraftVersion,
    RegistryConfig,
    VersionRecord,
)
from echoregistry.services.api_client import HttpClient
from echoregistry.services.compatibility import CompatibilityGate
from echoregistry.services.dependency_service import DependencyService
from echoregistry.services.health import HealthService
from echoregistry.services.matrix_builder import CompatibilityMatrixBuilder
from echoregistry.services.minecraft_service import MinecraftService
from echoregistry.sources.registry import AdapterRegistry


class EchoRegistry:
    """EchoRegistry 主协调器"""

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        store: Optional[KeyValueStore] = None,
        http: Optional[HttpClient] = None,
    ):
        self.config = config or RegistryConfig()
        self.http = http or HttpClient(self.config.http)
        self.cache = CacheService(store or MemoryStore(), self.config.cache)
        self.gate = CompatibilityGate(self.config.minimum_versions)
        self.adapters = AdapterRegistry(self.http, self.config)
        self.dependencies = DependencyService(
            self.http, self.cache, self.config, registry=self.adapters, gate=self.gate
        )
        self.matrix_builder = CompatibilityMatrixBuilder(self.dependencies, self.config)
        self.minecraft = MinecraftService(self.http, self.cache, self.config)
        self.health = HealthService(self.http, self.cache, self.config)

    def is_compatible(self, name: str, mc_version: str) -> bool:
        """纯粹的兼容性预检查，不发起任何请求"""
        return self.gate.is_compatible(name, mc_version)

    async def resolve_one(self, name: str, mc_version: str) -> VersionRecord:
        """解析单个组件"""
        return await self.dependencies.resolve_one(name, mc_version)

    async def resolve_all(
        self, mc_version: str, extra_names: Iterable[str] = ()
    ) -> List[VersionRecord]:
        """解析全部内置组件与额外的第三方项目"""
        records = await self.dependencies.resolve_all(mc_version, extra_names)
        failed = sum(1 for record in records if record.is_error)
        if failed:
            logger.warning(f"Minecraft {mc_version}: {failed}/{len(records)} 个组件解析失败")
        else:
            logger.success(f"Minecraft {mc_version}: {len(records)} 个组件解析完成")
        return records

    async def build_matrix(
        self, names: Iterable[str], mc_versions: Iterable[str]
    ) -> CompatibilityMatrix:
        """构建兼容性矩阵"""
        return await self.matrix_builder.build(names, mc_versions)

    async def find_invalid_projects(
        self, projects: Iterable[str], mc_version: str
    ) -> List[str]:
        """返回 Modrinth 上不存在的项目"""
        return await self.dependencies.find_invalid_projects(projects, mc_version)

    async def minecraft_versions(self) -> List[MinecraftVersion]:
        """获取 Minecraft 版本目录"""
        return await self.minecraft.fetch_minecraft_versions()

    async def check_health(self) -> Dict[str, Any]:
        """检查缓存与上游的健康状态"""
        return await self.health.check()

    async def purge(self, name: str, mc_version: str) -> bool:
        """清除单个组件的缓存"""
        return await self.cache.invalidate_dependency(name, mc_version)

    async def close(self):
        """关闭 HTTP 客户端"""
        await self.http.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
