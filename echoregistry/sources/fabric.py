"""
Fabric Loader 数据源

通过 Fabric Meta 的 JSON 接口获取加载器版本，列表中的第一项即为最新版本。
"""

from echoregistry.exceptions import APIError, NoMatchingVersionError
from echoregistry.models import Loader, VersionRecord
from echoregistry.sources.base import SourceAdapter


class FabricLoaderAdapter(SourceAdapter):
    """Fabric Loader 适配器"""

    name = "fabric-loader"

    async def fetch(self, name: str, mc_version: str) -> VersionRecord:
        url = f"{self.config.urls.fabric_loader}/{mc_version}"
        response = await self._get(
            url, f"找不到 Minecraft {mc_version} 的 Fabric Loader"
        )

        data = response.json()
        if not isinstance(data, list) or not data:
            raise NoMatchingVersionError(
                "Fabric Loader 数据为空", context={"mc_version": mc_version}
            )

        entry = data[0]
        loader = entry.get("loader") if isinstance(entry, dict) else None
        version = loader.get("version") if isinstance(loader, dict) else None
        if not version:
            raise APIError("Fabric Loader 响应结构无效", url=url)

        return self._record(
            self.name, mc_version, version, source_url=url, loader=Loader.FABRIC
        )
