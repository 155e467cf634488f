"""
版本匹配服务

实现版本字符串比较与排序、版本前缀匹配，以及 Parchment 回退候选版本生成。
"""

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional

from echoregistry.models.config import FallbackConfig

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_TOKEN_SPLIT = re.compile(r"[.\-]")
_PRERELEASE_MARKERS = ("-pre", "-rc", "-snapshot")


def leading_int(text: str, default: int = 0) -> int:
    """取字符串开头的整数部分，没有数字时返回 default"""
    match = _LEADING_INT.match(text)
    if not match:
        return default
    return int(match.group(1)) or default


def _tokens(version: str) -> List[int]:
    return [leading_int(part) for part in _TOKEN_SPLIT.split(version)]


def compare_versions(a: str, b: str) -> int:
    """
    比较两个版本字符串

    按 "." 和 "-" 分段，逐段按整数比较（非数字段视为 0，较短的一方补 0）。
    数字部分相同时，带 "-" 的预发布版本排在正式版本之前，
    仍然相同则按原始字符串比较。

    Returns:
        -1, 0 或 1
    """
    a_parts = _tokens(a)
    b_parts = _tokens(b)
    length = max(len(a_parts), len(b_parts))
    a_parts += [0] * (length - len(a_parts))
    b_parts += [0] * (length - len(b_parts))

    for x, y in zip(a_parts, b_parts):
        if x != y:
            return -1 if x < y else 1

    a_pre = "-" in a
    b_pre = "-" in b
    if a_pre != b_pre:
        return -1 if a_pre else 1

    return (a > b) - (a < b)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """按 compare_versions 升序排序，返回新列表"""
    return sorted(versions, key=cmp_to_key(compare_versions))


def latest_version(versions: Iterable[str]) -> Optional[str]:
    """排序后取最后（最高）的版本，列表为空时返回 None"""
    ordered = sort_versions(versions)
    return ordered[-1] if ordered else None


def extract_minor_version(mc_version: str) -> str:
    """
    提取 NeoForge 风格的版本前缀

    例如 "1.21.1" -> "21.1"，"1.21" -> "21"
    """
    parts = mc_version.split(".")
    if len(parts) >= 3:
        return f"{parts[1]}.{parts[2]}"
    if len(parts) == 2:
        return parts[1]
    return mc_version


def matches_version_prefix(prefix: str, version: str) -> bool:
    """
    检查版本是否以前缀开头，且前缀恰好落在 "." 或 "-" 分段边界上

    避免 "21.1" 误匹配 "21.10.x"。
    """
    if not version.startswith(prefix):
        return False
    if len(version) == len(prefix):
        return True
    return version[len(prefix)] in ".-"


def is_prerelease_release(mc_version: str) -> bool:
    return any(marker in mc_version for marker in _PRERELEASE_MARKERS)


def generate_fallback_candidates(
    mc_version: str, config: Optional[FallbackConfig] = None
) -> List[str]:
    """
    生成 Parchment 回退候选版本列表

    顺序：请求的版本本身；若为 pre/rc/snapshot 版本则接着是去掉后缀的基础版本；
    然后是同一 minor 下递减的 patch；最后是前 N 个 minor（从 minor-N 递增到
    minor-1），每个 minor 内 patch 从高到低。

    Args:
        mc_version: 请求的 Minecraft 版本
        config: 回退链参数

    Returns:
        候选版本列表
    """
    config = config or FallbackConfig()
    candidates = [mc_version]

    parts = mc_version.split(".")
    if len(parts) < 2:
        return candidates

    major = leading_int(parts[0], default=1)
    minor = leading_int(parts[1], default=21)

    if is_prerelease_release(mc_version):
        base = mc_version.split("-")[0]
        if base != mc_version:
            candidates.append(base)

    patch = leading_int(parts[2].split("-")[0]) if len(parts) >= 3 else 0

    for p in range(patch - 1, -1, -1):
        candidates.append(f"{major}.{minor}.{p}")

    for m in range(max(0, minor - config.max_previous_minors), minor):
        for p in range(config.max_patch_per_minor, config.patch_floor - 1, -1):
            candidates.append(f"{major}.{m}.{p}")

    return candidates
