"""
Maven 元数据读取

解析 maven-metadata.xml，提取版本列表和 <latest> 标签；
同时提供基于正则的标签提取作为兜底手段。
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger


@dataclass
class MavenMetadata:
    """Maven 元数据中的版本信息"""

    versions: List[str] = field(default_factory=list)
    latest: Optional[str] = None
    release: Optional[str] = None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def parse_maven_metadata(xml_content: str) -> MavenMetadata:
    """
    解析 Maven 元数据

    Args:
        xml_content: maven-metadata.xml 文本

    Returns:
        MavenMetadata，解析失败时返回空结果
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        logger.error(f"解析 Maven 元数据失败: {e}")
        return MavenMetadata()

    versioning = _child(root, "versioning")
    if versioning is None:
        return MavenMetadata()

    versions: List[str] = []
    versions_elem = _child(versioning, "versions")
    if versions_elem is not None:
        for version_elem in versions_elem:
            if _local_name(version_elem.tag) != "version":
                continue
            text = _text(version_elem)
            if text:
                versions.append(text)

    return MavenMetadata(
        versions=versions,
        latest=_text(_child(versioning, "latest")),
        release=_text(_child(versioning, "release")),
    )


def extract_version_tags(
    xml_content: str, version_prefix: Optional[str] = None
) -> List[str]:
    """
    用正则提取所有 <version> 标签内容（兜底方法）

    Args:
        xml_content: XML 文本
        version_prefix: 只保留以此开头的版本

    Returns:
        版本列表（按出现顺序）
    """
    versions = []
    for match in re.finditer(r"<version>(.*?)</version>", xml_content, re.DOTALL):
        version = match.group(1).strip()
        if not version_prefix or version.startswith(version_prefix):
            versions.append(version)
    return versions


def find_tag_content(xml_content: str, tag_name: str) -> Optional[str]:
    """查找第一个指定标签的内容（忽略大小写）"""
    tag = re.escape(tag_name)
    match = re.search(
        rf"<{tag}>(.*?)</{tag}>", xml_content, re.IGNORECASE | re.DOTALL
    )
    if not match:
        return None
    return match.group(1).strip()
