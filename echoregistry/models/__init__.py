"""
EchoRegistry 数据模型包

包含配置模型和 API 模型定义。
"""

from echoregistry.models.config import (
    Loader,
    MATRIX_LOADERS,
    BUILT_IN_COMPONENTS,
    HttpConfig,
    CacheConfig,
    FallbackConfig,
    UpstreamUrls,
    HealthConfig,
    RegistryConfig,
)
from echoregistry.models.api import (
    INCOMPATIBLE,
    CompatibilityMatrix,
    VersionRecord,
    MinecraftVersion,
    ModrinthFile,
    ModrinthVersion,
    empty_loader_slots,
)

__all__ = [
    # 配置模型
    "Loader",
    "MATRIX_LOADERS",
    "BUILT_IN_COMPONENTS",
    "HttpConfig",
    "CacheConfig",
    "FallbackConfig",
    "UpstreamUrls",
    "HealthConfig",
    "RegistryConfig",
    # API 模型
    "INCOMPATIBLE",
    "CompatibilityMatrix",
    "VersionRecord",
    "MinecraftVersion",
    "ModrinthFile",
    "ModrinthVersion",
    "empty_loader_slots",
]
