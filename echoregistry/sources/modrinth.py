"""
Modrinth 数据源

处理任意第三方项目：按 Minecraft 版本查询项目版本列表，选出整体最新版本，
并按加载器分别找出最新版本及其下载地址。
"""

import asyncio
import json
from typing import Dict, List, Optional, Tuple

from loguru import logger

from echoregistry.exceptions import APIError, NoMatchingVersionError
from echoregistry.models import (
    MATRIX_LOADERS,
    ModrinthVersion,
    VersionRecord,
    empty_loader_slots,
)
from echoregistry.models.config import MODRINTH_PAGE_URL
from echoregistry.sources.base import SourceAdapter


def _is_newer(candidate: ModrinthVersion, current: ModrinthVersion) -> bool:
    candidate_at = candidate.published_at
    current_at = current.published_at
    if candidate_at is None or current_at is None:
        return False
    return candidate_at > current_at


def find_latest(versions: List[ModrinthVersion]) -> Optional[ModrinthVersion]:
    """按发布时间选出最新的版本，时间相同时保留靠前的一项"""
    latest = None
    for version in versions:
        if latest is None or _is_newer(version, latest):
            latest = version
    return latest


def group_by_loader(versions: List[ModrinthVersion]) -> Dict[str, List[ModrinthVersion]]:
    """按声明的加载器分组，只保留矩阵中的三个加载器"""
    grouped: Dict[str, List[ModrinthVersion]] = {
        loader.value: [] for loader in MATRIX_LOADERS
    }
    for version in versions:
        for loader in version.loaders:
            if loader in grouped:
                grouped[loader].append(version)
    return grouped


def _filename_matches(filename: str, loader: str) -> bool:
    if loader == "forge":
        # neoforge 的文件名里也含有 forge
        return "forge" in filename and "neoforge" not in filename
    return loader in filename


def pick_download_url(version: ModrinthVersion, loader: str) -> Optional[str]:
    """
    为指定加载器挑选下载地址

    优先文件名中包含加载器名的文件，其次是 primary 文件，最后是第一个文件。
    """
    files = [f for f in version.files if f.filename and f.url]
    for file in files:
        if _filename_matches(file.filename.lower(), loader):
            return file.url

    if not version.files:
        return None
    primary = next((f for f in version.files if f.primary), version.files[0])
    return primary.url or None


def extract_loader_downloads(
    versions: List[ModrinthVersion],
) -> Tuple[Dict[str, Optional[str]], Dict[str, Optional[str]]]:
    """
    提取每个加载器的最新下载地址和版本号

    Returns:
        (download_urls, loader_versions)
    """
    download_urls = empty_loader_slots()
    loader_versions = empty_loader_slots()

    for loader, loader_group in group_by_loader(versions).items():
        latest = find_latest(loader_group)
        if latest is None:
            continue
        download_urls[loader] = pick_download_url(latest, loader)
        loader_versions[loader] = latest.version_number or None

    return download_urls, loader_versions


class ModrinthAdapter(SourceAdapter):
    """Modrinth 通用适配器"""

    async def fetch(self, name: str, mc_version: str) -> VersionRecord:
        versions_url = f"{self.config.urls.modrinth_api}/{name}/version"
        params = {"game_versions": json.dumps([mc_version])}

        response, icon_url = await asyncio.gather(
            self._get(
                versions_url,
                f"找不到 MC {mc_version} 下 {name} 的版本",
                params=params,
            ),
            self._fetch_icon(name),
        )

        payload = response.json()
        if not isinstance(payload, list) or not payload:
            raise NoMatchingVersionError(
                f"{name} 没有可用的版本", context={"mc_version": mc_version}
            )

        versions = [ModrinthVersion.from_modrinth(v) for v in payload if isinstance(v, dict)]
        latest = find_latest(versions)
        if latest is None or not latest.version_number:
            raise NoMatchingVersionError(
                f"{name} 没有可用的版本", context={"mc_version": mc_version}
            )

        download_urls, loader_versions = extract_loader_downloads(versions)

        return self._record(
            name,
            mc_version,
            latest.version_number,
            source_url=MODRINTH_PAGE_URL.format(slug=name),
            icon_url=icon_url,
            download_urls=download_urls,
            loader_versions=loader_versions,
            coordinates=f"maven.modrinth:{name}:{latest.version_number}",
        )

    async def _fetch_icon(self, name: str) -> Optional[str]:
        """尽力获取项目图标，任何失败都返回 None"""
        try:
            response = await self.http.fetch(f"{self.config.urls.modrinth_api}/{name}")
            if not response.ok:
                return None
            project = response.json()
        except APIError as e:
            logger.debug(f"获取 {name} 图标失败: {e}")
            return None
        if not isinstance(project, dict):
            return None
        return project.get("icon_url")
