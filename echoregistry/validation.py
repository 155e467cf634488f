"""
请求参数校验

在发起解析之前检查 Minecraft 版本号与项目列表。
"""

import re
from typing import Iterable, List, Optional, Tuple

from echoregistry.exceptions import ValidationError

_RELEASE = re.compile(r"^\d+\.\d+(\.\d+)?(-(pre|rc)\d+|-snapshot(-\d+)?)?$")
_WEEKLY_SNAPSHOT = re.compile(r"^\d{2}w\d{2}[a-z]$")
_SLUG = re.compile(r"^[\w!@$()`.+,\"\-']{1,64}$")


def validate_minecraft_version(mc_version: Optional[str]) -> str:
    """
    校验 Minecraft 版本号

    接受正式版本（1.21、1.21.1）、预发布版本（1.21.1-pre1、1.21-rc1、
    1.21.1-snapshot）以及周快照（24w14a）。

    Raises:
        ValidationError: 版本号为空或格式无效
    """
    value = (mc_version or "").strip()
    if not value:
        raise ValidationError("Minecraft 版本不能为空")
    if not (_RELEASE.match(value) or _WEEKLY_SNAPSHOT.match(value)):
        raise ValidationError(
            f"无效的 Minecraft 版本格式: {value}", context={"mc_version": value}
        )
    return value


def parse_csv_list(value: Optional[str]) -> List[str]:
    """把逗号分隔的字符串拆分为去除空白的列表"""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def validate_project_slugs(projects: Iterable[str]) -> List[str]:
    """校验 Modrinth 项目 slug 的字符集"""
    slugs = [p.strip() for p in projects if p and p.strip()]
    invalid = [slug for slug in slugs if not _SLUG.match(slug)]
    if invalid:
        raise ValidationError(
            f"无效的项目名: {', '.join(invalid)}", context={"projects": invalid}
        )
    return slugs


def validate_matrix_query(
    projects: Optional[str], versions: Optional[str]
) -> Tuple[List[str], List[str]]:
    """
    校验兼容性矩阵的查询参数

    Returns:
        (项目列表, 版本列表)
    """
    if not projects and not versions:
        raise ValidationError("必须同时提供 projects 和 versions 参数")
    if not projects:
        raise ValidationError("缺少 projects 参数")
    if not versions:
        raise ValidationError("缺少 versions 参数")

    project_list = validate_project_slugs(parse_csv_list(projects))
    version_list = [validate_minecraft_version(v) for v in parse_csv_list(versions)]
    if not project_list:
        raise ValidationError("projects 参数不能为空")
    if not version_list:
        raise ValidationError("versions 参数不能为空")
    return project_list, version_list
