"""
EchoRegistry 数据源层

每个内置组件一个适配器，另有通用的 Modrinth 适配器。
"""

from echoregistry.sources.base import SourceAdapter
from echoregistry.sources.registry import AdapterRegistry, BUILT_IN_ADAPTERS
from echoregistry.sources.forge import ForgeAdapter
from echoregistry.sources.fabric import FabricLoaderAdapter
from echoregistry.sources.maven import (
    MavenMetadataAdapter,
    NeoForgeAdapter,
    NeoFormAdapter,
    ForgeGradleAdapter,
    LoomAdapter,
    ModDevGradleAdapter,
)
from echoregistry.sources.modrinth import ModrinthAdapter
from echoregistry.sources.parchment import ParchmentAdapter

__all__ = [
    "SourceAdapter",
    "AdapterRegistry",
    "BUILT_IN_ADAPTERS",
    "ForgeAdapter",
    "FabricLoaderAdapter",
    "MavenMetadataAdapter",
    "NeoForgeAdapter",
    "NeoFormAdapter",
    "ForgeGradleAdapter",
    "LoomAdapter",
    "ModDevGradleAdapter",
    "ModrinthAdapter",
    "ParchmentAdapter",
]
