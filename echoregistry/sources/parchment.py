"""
Parchment 数据源

Parchment 映射并非每个 Minecraft 版本都有发布，且对后续小版本向前兼容。
因此按回退链依次尝试候选版本，直到找到一个有正式版本的映射。
"""

from loguru import logger

from echoregistry.exceptions import (
    APIError,
    FallbackExhaustedError,
    NoMatchingVersionError,
)
from echoregistry.models import Loader, VersionRecord
from echoregistry.services.metadata_reader import parse_maven_metadata
from echoregistry.services.version_matcher import (
    generate_fallback_candidates,
    latest_version,
)
from echoregistry.sources.base import SourceAdapter

_UNSTABLE_MARKERS = ("nightly", "SNAPSHOT")


class ParchmentAdapter(SourceAdapter):
    """Parchment 适配器（带回退链）"""

    name = "parchment"

    def candidate_url(self, candidate: str) -> str:
        return self.config.urls.parchment_template.replace("{version}", candidate)

    def candidate_page(self, candidate: str) -> str:
        """候选版本在 Maven 仓库中的目录"""
        return self.candidate_url(candidate).rsplit("/", 1)[0] + "/"

    async def fetch(self, name: str, mc_version: str) -> VersionRecord:
        candidates = generate_fallback_candidates(mc_version, self.config.fallback)

        # 候选版本依次串行请求
        for candidate in candidates:
            try:
                version = await self._resolve_candidate(candidate)
            except (APIError, NoMatchingVersionError) as e:
                logger.debug(f"Parchment {candidate} 不可用: {e}")
                continue

            fallback_used = candidate != mc_version
            if fallback_used:
                logger.info(f"Parchment {mc_version} 回退到 {candidate}")
            return self._record(
                self.name,
                candidate,
                version,
                source_url=self.candidate_page(candidate),
                loader=Loader.UNIVERSAL,
                notes=(
                    f"使用 {candidate} 的 Parchment 映射（向前兼容）"
                    if fallback_used
                    else None
                ),
                fallback_used=fallback_used,
            )

        raise FallbackExhaustedError(
            "尝试所有回退版本后仍未找到 Parchment 版本",
            context={"mc_version": mc_version, "tried": len(candidates)},
        )

    async def _resolve_candidate(self, candidate: str) -> str:
        """获取单个候选版本的最高正式版本"""
        response = await self._get(
            self.candidate_url(candidate), f"Parchment {candidate} 不存在"
        )
        metadata = parse_maven_metadata(response.body)
        if not metadata.versions:
            raise NoMatchingVersionError(f"Parchment {candidate} 元数据为空")

        releases = [
            v
            for v in metadata.versions
            if not any(marker in v for marker in _UNSTABLE_MARKERS)
        ]
        version = latest_version(releases)
        if version is None:
            raise NoMatchingVersionError(f"Parchment {candidate} 只有预发布版本")
        return version
