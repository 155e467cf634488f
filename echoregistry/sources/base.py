"""
数据源适配器基类

每个内置组件对应一个适配器，另有一个通用的 Modrinth 适配器处理第三方项目。
适配器负责请求上游并把结果规整为 VersionRecord，失败时抛出带描述的异常。
"""

from abc import ABC, abstractmethod
from typing import Optional

from echoregistry.exceptions import APIError
from echoregistry.models import Loader, RegistryConfig, VersionRecord
from echoregistry.services.api_client import HttpClient, HttpResponse


class SourceAdapter(ABC):
    """数据源适配器"""

    # 内置组件名；通用适配器为空
    name: str = ""

    def __init__(self, http: HttpClient, config: RegistryConfig):
        self.http = http
        self.config = config

    @abstractmethod
    async def fetch(self, name: str, mc_version: str) -> VersionRecord:
        """
        解析组件在指定 Minecraft 版本下的最新版本。

        Args:
            name: 组件名（第三方项目为 slug）
            mc_version: Minecraft 版本

        Raises:
            APIError: 上游请求失败
            ResolutionError: 没有符合条件的版本
        """
        pass

    async def _get_text(self, url: str, error_message: str) -> str:
        """请求上游文本，非成功状态或空响应时抛出 APIError"""
        response = await self.http.fetch(url)
        response.raise_for_status(error_message)
        if not response.body.strip():
            raise APIError(f"{error_message}（响应为空）", status=response.status, url=url)
        return response.body

    async def _get(self, url: str, error_message: str, **kwargs) -> HttpResponse:
        response = await self.http.fetch(url, **kwargs)
        return response.raise_for_status(error_message)

    def _record(
        self,
        name: str,
        mc_version: str,
        version: Optional[str],
        source_url: Optional[str] = None,
        loader: Optional[Loader] = None,
        notes: Optional[str] = None,
        **extra,
    ) -> VersionRecord:
        return VersionRecord(
            name=name,
            loader=loader or self.config.loader_for(name),
            version=version,
            mc_version=mc_version,
            source_url=source_url or self.config.source_url_for(name),
            notes=notes,
            **extra,
        )
