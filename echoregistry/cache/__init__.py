"""
EchoRegistry 缓存层

包含缓存服务与键值存储实现。
"""

from echoregistry.cache.store import KeyValueStore, MemoryStore, StoreEntry
from echoregistry.cache.service import CacheService, utc_timestamp

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "StoreEntry",
    "CacheService",
    "utc_timestamp",
]
