"""
适配器注册表

组件名 -> 适配器的映射；未登记的名字一律交给默认的 Modrinth 适配器处理。
"""

from typing import Dict, Iterator, Optional, Tuple, Type

from echoregistry.models import RegistryConfig
from echoregistry.services.api_client import HttpClient
from echoregistry.sources.base import SourceAdapter
from echoregistry.sources.fabric import FabricLoaderAdapter
from echoregistry.sources.forge import ForgeAdapter
from echoregistry.sources.maven import (
    ForgeGradleAdapter,
    LoomAdapter,
    ModDevGradleAdapter,
    NeoFormAdapter,
    NeoForgeAdapter,
)
from echoregistry.sources.modrinth import ModrinthAdapter
from echoregistry.sources.parchment import ParchmentAdapter

BUILT_IN_ADAPTERS: Tuple[Type[SourceAdapter], ...] = (
    ForgeAdapter,
    NeoForgeAdapter,
    FabricLoaderAdapter,
    ParchmentAdapter,
    NeoFormAdapter,
    ModDevGradleAdapter,
    ForgeGradleAdapter,
    LoomAdapter,
)


class AdapterRegistry:
    """适配器注册表"""

    def __init__(
        self,
        http: HttpClient,
        config: RegistryConfig,
        default: Optional[SourceAdapter] = None,
    ):
        self._adapters: Dict[str, SourceAdapter] = {}
        self.default = default or ModrinthAdapter(http, config)
        for adapter_cls in BUILT_IN_ADAPTERS:
            self.register(adapter_cls(http, config))

    def register(self, adapter: SourceAdapter, name: Optional[str] = None):
        """注册（或替换）一个适配器"""
        key = name or adapter.name
        if not key:
            raise ValueError("适配器必须有名字")
        self._adapters[key] = adapter

    def get(self, name: str) -> SourceAdapter:
        """获取组件对应的适配器，未登记时返回默认适配器"""
        return self._adapters.get(name, self.default)

    def is_registered(self, name: str) -> bool:
        return name in self._adapters

    def __iter__(self) -> Iterator[str]:
        return iter(self._adapters)
