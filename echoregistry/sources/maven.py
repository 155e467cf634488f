"""
Maven 元数据数据源

NeoForge、NeoForm、ForgeGradle、Fabric Loom 与 ModDev Gradle 都发布在 Maven 仓库，
它们共用"下载 maven-metadata.xml -> 过滤 -> 排序取最高"的流程，只在版本选择上不同。
"""

from typing import List, Optional

from loguru import logger

from echoregistry.exceptions import NoMatchingVersionError
from echoregistry.models import Loader, VersionRecord
from echoregistry.services.metadata_reader import (
    extract_version_tags,
    find_tag_content,
    parse_maven_metadata,
)
from echoregistry.services.version_matcher import (
    extract_minor_version,
    latest_version,
    leading_int,
    matches_version_prefix,
)
from echoregistry.sources.base import SourceAdapter


def _unique(versions: List[str]) -> List[str]:
    return list(dict.fromkeys(v for v in versions if isinstance(v, str)))


class MavenMetadataAdapter(SourceAdapter):
    """基于 maven-metadata.xml 的适配器基类"""

    loader: Loader = Loader.UNIVERSAL
    notes: Optional[str] = None

    def metadata_url(self) -> str:
        raise NotImplementedError

    def select_version(self, xml_content: str, mc_version: str) -> str:
        """从元数据中选出版本，找不到时抛出 NoMatchingVersionError"""
        raise NotImplementedError

    async def fetch(self, name: str, mc_version: str) -> VersionRecord:
        url = self.metadata_url()
        xml_content = await self._get_text(url, f"无法获取 {self.name} 的 Maven 元数据")
        version = self.select_version(xml_content, mc_version)
        return self._record(
            self.name,
            mc_version,
            version,
            loader=self.loader,
            notes=self.notes,
        )

    def _no_match(self, reason: str, mc_version: str) -> NoMatchingVersionError:
        return NoMatchingVersionError(
            reason, context={"component": self.name, "mc_version": mc_version}
        )


class NeoForgeAdapter(MavenMetadataAdapter):
    """NeoForge：按 "21.1" 这样的前缀过滤后取最高版本"""

    name = "neoforge"
    loader = Loader.NEOFORGE

    def metadata_url(self) -> str:
        return self.config.urls.neoforge_metadata

    def select_version(self, xml_content: str, mc_version: str) -> str:
        prefix = extract_minor_version(mc_version)
        metadata = parse_maven_metadata(xml_content)
        matching = [v for v in metadata.versions if matches_version_prefix(prefix, v)]
        version = latest_version(matching)
        if version is None:
            raise self._no_match("没有找到 NeoForge 版本", mc_version)
        return version


class NeoFormAdapter(MavenMetadataAdapter):
    """NeoForm：版本形如 "1.21.1-20240808.144430"，以 "<mc>-" 为前缀"""

    name = "neoform"
    loader = Loader.UNIVERSAL

    def metadata_url(self) -> str:
        return self.config.urls.neoform_metadata

    def select_version(self, xml_content: str, mc_version: str) -> str:
        matching = extract_version_tags(xml_content, f"{mc_version}-")
        version = latest_version(matching)
        if version is None:
            raise self._no_match(f"没有找到 MC {mc_version} 的 NeoForm 版本", mc_version)
        return version


class ForgeGradleAdapter(MavenMetadataAdapter):
    """ForgeGradle：与 Minecraft 版本无关，取整体最高版本"""

    name = "forgegradle"
    loader = Loader.FORGE
    notes = "Latest version"

    def metadata_url(self) -> str:
        return self.config.urls.forgegradle_metadata

    def select_version(self, xml_content: str, mc_version: str) -> str:
        metadata = parse_maven_metadata(xml_content)
        version = latest_version(_unique(metadata.versions))
        if version is None:
            raise self._no_match("ForgeGradle 元数据中没有版本", mc_version)

        # <latest> 指针不可全信，只做交叉检查
        latest_tag = find_tag_content(xml_content, "latest")
        if latest_tag and leading_int(latest_tag) != leading_int(version):
            logger.warning(
                f"ForgeGradle <latest> 标签为 '{latest_tag}'，"
                f"但计算得到的最新版本为 '{version}'"
            )
        return version


class LoomAdapter(MavenMetadataAdapter):
    """Fabric Loom：只考虑 SNAPSHOT 版本"""

    name = "loom"
    loader = Loader.FABRIC
    notes = "Fabric Loom Gradle plugin (SNAPSHOT)"

    def metadata_url(self) -> str:
        return self.config.urls.loom_metadata

    def select_version(self, xml_content: str, mc_version: str) -> str:
        metadata = parse_maven_metadata(xml_content)
        if not metadata.versions:
            raise self._no_match("Loom 元数据中没有版本", mc_version)

        snapshots = [v for v in _unique(metadata.versions) if "SNAPSHOT" in v]
        version = latest_version(snapshots)
        if version is None:
            raise self._no_match("Loom 元数据中没有 SNAPSHOT 版本", mc_version)
        return version


class ModDevGradleAdapter(MavenMetadataAdapter):
    """ModDev Gradle：与版本无关，直接读取 <latest> 标签"""

    name = "moddev-gradle"
    loader = Loader.UNIVERSAL
    notes = "Version-agnostic Gradle plugin"

    def metadata_url(self) -> str:
        return self.config.urls.moddev_gradle_metadata

    def select_version(self, xml_content: str, mc_version: str) -> str:
        version = find_tag_content(xml_content, "latest")
        if not version:
            raise self._no_match("找不到 ModDev Gradle 的最新版本", mc_version)
        return version
