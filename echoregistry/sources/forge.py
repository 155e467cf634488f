"""
Forge 数据源

Forge 没有可用的结构化接口，从下载页面 HTML 中抓取推荐版本。
"""

import re

from echoregistry.exceptions import NoMatchingVersionError
from echoregistry.models import Loader, VersionRecord
from echoregistry.sources.base import SourceAdapter

_LABELLED_VERSIONS = (
    ("Recommended", re.compile(r"Recommended:\s*([0-9.]+)")),
    ("Latest", re.compile(r"Latest:\s*([0-9.]+)")),
)


class ForgeAdapter(SourceAdapter):
    """Forge 适配器"""

    name = "forge"

    async def fetch(self, name: str, mc_version: str) -> VersionRecord:
        url = f"{self.config.urls.forge_base}/index_{mc_version}.html"
        html = await self._get_text(url, f"找不到 Minecraft {mc_version} 的 Forge 页面")

        for label, pattern in _LABELLED_VERSIONS:
            match = pattern.search(html)
            if match:
                return self._record(
                    self.name,
                    mc_version,
                    match.group(1),
                    source_url=url,
                    loader=Loader.FORGE,
                    notes=label,
                )

        raise NoMatchingVersionError(
            "页面中没有 Forge 版本", context={"mc_version": mc_version, "url": url}
        )
