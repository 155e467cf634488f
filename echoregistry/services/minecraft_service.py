"""
Minecraft 版本目录服务

从 Mojang 官方清单获取全部 Minecraft 版本，并长时间缓存。
"""

from typing import List

from loguru import logger

from echoregistry.cache import CacheService
from echoregistry.exceptions import APIError
from echoregistry.models import MinecraftVersion, RegistryConfig
from echoregistry.services.api_client import HttpClient


class MinecraftService:
    """Minecraft 版本目录服务"""

    def __init__(self, http: HttpClient, cache: CacheService, config: RegistryConfig):
        self.http = http
        self.cache = cache
        self.config = config

    async def fetch_minecraft_versions(self) -> List[MinecraftVersion]:
        """
        获取 Minecraft 版本列表（优先使用缓存）

        Raises:
            APIError: 清单获取或解析失败
        """
        return await self.cache.get_or_fetch_minecraft_versions(self._fetch_manifest)

    async def _fetch_manifest(self) -> List[MinecraftVersion]:
        url = self.config.urls.minecraft_manifest
        try:
            response = await self.http.fetch(url)
            response.raise_for_status("无法获取 Minecraft 版本清单")
            manifest = response.json()
            entries = manifest.get("versions") if isinstance(manifest, dict) else None
            if not isinstance(entries, list):
                raise APIError("Minecraft 版本清单格式无效", url=url)
            versions = [
                MinecraftVersion.from_manifest(entry)
                for entry in entries
                if isinstance(entry, dict) and entry.get("id")
            ]
        except APIError as e:
            logger.error(f"获取 Minecraft 版本失败: {e}")
            raise

        logger.info(f"获取到 {len(versions)} 个 Minecraft 版本")
        return versions
