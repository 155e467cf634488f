"""
EchoRegistry 服务层

这里只导出无状态的基础服务：HTTP 客户端、版本比较、元数据读取、兼容性检查。
解析、矩阵、版本目录与健康检查服务依赖数据源层，请从各自模块导入。
"""

from echoregistry.services.api_client import HttpClient, HttpResponse
from echoregistry.services.compatibility import CompatibilityGate, parse_release
from echoregistry.services.metadata_reader import (
    MavenMetadata,
    parse_maven_metadata,
    extract_version_tags,
    find_tag_content,
)
from echoregistry.services.version_matcher import (
    compare_versions,
    sort_versions,
    generate_fallback_candidates,
)

__all__ = [
    "HttpClient",
    "HttpResponse",
    "CompatibilityGate",
    "parse_release",
    "MavenMetadata",
    "parse_maven_metadata",
    "extract_version_tags",
    "find_tag_content",
    "compare_versions",
    "sort_versions",
    "generate_fallback_candidates",
]
