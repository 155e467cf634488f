"""
缓存服务

在注入的键值存储之上实现"命中直接返回，未命中则获取并写入"的语义。
存储故障只会让缓存失效，不会阻止解析本身。
"""

import json
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from loguru import logger

from echoregistry.cache.store import KeyValueStore
from echoregistry.models import CacheConfig, MinecraftVersion, VersionRecord

T = TypeVar("T")

MINECRAFT_VERSIONS_KEY = "minecraft-versions"
HEALTH_CHECK_KEY = "health-check"


def utc_timestamp() -> str:
    """ISO 8601 格式的当前 UTC 时间"""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _identity(value: Any) -> Any:
    return value


class CacheService:
    """缓存服务"""

    def __init__(self, store: KeyValueStore, config: Optional[CacheConfig] = None):
        self.store = store
        self.config = config or CacheConfig()

    @staticmethod
    def dependency_key(name: str, mc_version: str) -> str:
        return f"dep:{name}:{mc_version}"

    async def _read(self, key: str) -> Optional[Any]:
        try:
            raw = await self.store.get(key)
        except Exception as e:
            logger.error(f"缓存读取失败 ({key}): {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"缓存内容无法解析 ({key}): {e}")
            return None

    async def _write(self, key: str, value: Any, ttl: int) -> bool:
        try:
            await self.store.put(key, json.dumps(value), ttl)
        except Exception as e:
            logger.error(f"缓存写入失败 ({key}): {e}")
            return False
        return True

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[T]],
        ttl: int,
        encode: Callable[[T], Any] = _identity,
        decode: Callable[[Any], T] = _identity,
        accept: Callable[[T], bool] = lambda value: True,
    ) -> T:
        """
        命中缓存时直接返回，否则调用 fetch_fn 获取并写入缓存

        Args:
            key: 缓存键
            fetch_fn: 未命中时调用的获取函数，其异常会原样抛出
            ttl: 过期时间（秒）
            encode: 写入前把值转换为可 JSON 序列化的对象
            decode: 读取后把对象还原为值
            accept: 判断缓存值是否可用，不可用时视为未命中
        """
        cached = await self._read(key)
        if cached is not None:
            try:
                value = decode(cached)
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"缓存内容无效 ({key}): {e}")
            else:
                if accept(value):
                    logger.debug(f"[缓存] 命中 {key}")
                    return value

        logger.debug(f"[缓存] 未命中 {key}")
        value = await fetch_fn()
        await self._write(key, encode(value), ttl)
        return value

    async def get_or_fetch_dependency(
        self,
        name: str,
        mc_version: str,
        fetch_fn: Callable[[], Awaitable[VersionRecord]],
    ) -> VersionRecord:
        """按 (组件, Minecraft 版本) 缓存解析结果"""

        def encode(record: VersionRecord) -> dict:
            record.cached_at = utc_timestamp()
            return record.to_dict()

        return await self.get_or_fetch(
            self.dependency_key(name, mc_version),
            fetch_fn,
            self.config.ttl_dependencies,
            encode=encode,
            decode=VersionRecord.from_dict,
        )

    async def get_or_fetch_minecraft_versions(
        self, fetch_fn: Callable[[], Awaitable[List[MinecraftVersion]]]
    ) -> List[MinecraftVersion]:
        """缓存 Minecraft 版本目录，空列表视为未命中"""
        return await self.get_or_fetch(
            MINECRAFT_VERSIONS_KEY,
            fetch_fn,
            self.config.ttl_minecraft,
            encode=lambda versions: [v.to_dict() for v in versions],
            decode=lambda data: [MinecraftVersion.from_dict(v) for v in data],
            accept=bool,
        )

    async def invalidate_dependency(self, name: str, mc_version: str) -> bool:
        """删除单个组件的缓存"""
        key = self.dependency_key(name, mc_version)
        try:
            await self.store.delete(key)
        except Exception as e:
            logger.error(f"缓存删除失败 ({key}): {e}")
            return False
        logger.info(f"[缓存] 已清除 {key}")
        return True

    async def check_health(self) -> str:
        """检查缓存存储是否可用"""
        try:
            await self.store.get(HEALTH_CHECK_KEY)
        except Exception as e:
            logger.error(f"缓存健康检查失败: {e}")
            return "error"
        return "connected"
