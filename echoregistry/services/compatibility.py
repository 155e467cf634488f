"""
兼容性检查

根据最低版本表判断组件是否支持指定的 Minecraft 版本。
"""

from typing import Mapping, Optional, Tuple

from loguru import logger

from echoregistry.services.version_matcher import leading_int


def parse_release(version: str) -> Tuple[int, int, int]:
    """
    将 Minecraft 版本解析为 (major, minor, patch)

    缺少 patch 视为 0，非数字段视为 0。

    Raises:
        ValueError: 版本号不足两段
    """
    parts = version.split(".")
    if len(parts) < 2:
        raise ValueError(f"Invalid version format: {version}")

    major = leading_int(parts[0])
    minor = leading_int(parts[1])
    patch = leading_int(parts[2]) if len(parts) > 2 else 0
    return major, minor, patch


def is_release_at_least(mc_version: str, min_version: str) -> bool:
    """检查 mc_version >= min_version，无法解析时视为兼容"""
    try:
        return parse_release(mc_version) >= parse_release(min_version)
    except ValueError:
        logger.warning(f"无法解析版本 {mc_version} 或 {min_version}，视为兼容")
        return True


class CompatibilityGate:
    """兼容性检查器"""

    def __init__(self, minimum_versions: Mapping[str, str]):
        self.minimum_versions = minimum_versions

    def minimum_for(self, name: str) -> Optional[str]:
        return self.minimum_versions.get(name)

    def is_compatible(self, name: str, mc_version: str) -> bool:
        """
        判断组件是否支持指定的 Minecraft 版本

        未登记最低版本的组件（例如任意第三方项目）总是兼容。
        """
        min_version = self.minimum_for(name)
        if not min_version:
            return True
        return is_release_at_least(mc_version, min_version)
