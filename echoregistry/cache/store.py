"""
键值缓存存储

CacheService 只通过 get / put / delete 三个异步方法访问存储，
任何实现了 KeyValueStore 的后端都可以注入。这里提供进程内的 TTL 实现。
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional


class KeyValueStore(ABC):
    """键值存储接口，过期由存储自身负责"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """读取键，不存在或已过期时返回 None"""
        pass

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """写入键（覆盖旧值），ttl_seconds 秒后过期"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass


@dataclass
class StoreEntry:
    """带过期时间的缓存条目"""

    value: str
    expires_at: float


class MemoryStore(KeyValueStore):
    """
    进程内 TTL 存储

    过期条目在读取时删除；写入时每隔 sweep_interval 秒整体清理一次，
    避免长期运行时不再读取的键无限累积。
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ):
        self._clock = clock
        self._entries: Dict[str, StoreEntry] = {}
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self.sweep(now)
        self._entries[key] = StoreEntry(value=value, expires_at=now + ttl_seconds)

    def sweep(self, now: Optional[float] = None) -> int:
        """删除所有已过期的条目，返回删除数量"""
        now = self._clock() if now is None else now
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self._sweep_interval
        return len(expired)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """清空所有条目"""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
