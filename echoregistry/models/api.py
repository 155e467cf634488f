"""
API 数据模型

定义版本记录、Minecraft 版本目录以及 Modrinth 返回数据的数据类。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from echoregistry.models.config import Loader, MATRIX_LOADERS

# 已知不兼容的哨兵值（不是错误）
INCOMPATIBLE = "N/A"

# {组件: {Minecraft 版本: {加载器: 版本或 None}}}
CompatibilityMatrix = Dict[str, Dict[str, Dict[str, Optional[str]]]]


def empty_loader_slots() -> Dict[str, Optional[str]]:
    """矩阵单元格的初始值：三个加载器全部为 None"""
    return {loader.value: None for loader in MATRIX_LOADERS}


@dataclass
class VersionRecord:
    """
    单个组件在指定 Minecraft 版本下的解析结果。

    version 为 None 表示解析失败，为 "N/A" 表示兼容性检查拒绝了该请求。
    """

    name: str
    loader: Loader
    version: Optional[str]
    mc_version: str
    source_url: str
    download_urls: Optional[Dict[str, Optional[str]]] = None
    loader_versions: Optional[Dict[str, Optional[str]]] = None
    coordinates: Optional[str] = None
    icon_url: Optional[str] = None
    notes: Optional[str] = None
    fallback_used: bool = False
    cached_at: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.version is None

    @property
    def is_incompatible(self) -> bool:
        return self.version == INCOMPATIBLE

    def to_dict(self) -> Dict[str, Any]:
        """转换为 JSON 友好的字典"""
        data: Dict[str, Any] = {
            "name": self.name,
            "loader": self.loader.value,
            "version": self.version,
            "mc_version": self.mc_version,
            "source_url": self.source_url,
            "notes": self.notes,
            "fallback_used": self.fallback_used,
        }
        for key in (
            "download_urls",
            "loader_versions",
            "coordinates",
            "icon_url",
            "cached_at",
        ):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionRecord":
        """从缓存中的字典还原记录"""
        try:
            loader = Loader(data.get("loader", "universal"))
        except ValueError:
            loader = Loader.UNIVERSAL
        return cls(
            name=data["name"],
            loader=loader,
            version=data.get("version"),
            mc_version=data["mc_version"],
            source_url=data.get("source_url", ""),
            download_urls=data.get("download_urls"),
            loader_versions=data.get("loader_versions"),
            coordinates=data.get("coordinates"),
            icon_url=data.get("icon_url"),
            notes=data.get("notes"),
            fallback_used=bool(data.get("fallback_used", False)),
            cached_at=data.get("cached_at"),
        )


@dataclass
class MinecraftVersion:
    """Minecraft 版本目录条目"""

    id: str
    version_type: str  # release, snapshot, old_beta, old_alpha
    release_time: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "version_type": self.version_type,
            "release_time": self.release_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MinecraftVersion":
        return cls(
            id=data["id"],
            version_type=data.get("version_type", "release"),
            release_time=data.get("release_time", ""),
        )

    @classmethod
    def from_manifest(cls, data: Dict[str, Any]) -> "MinecraftVersion":
        """将 Mojang 版本清单中的条目转换为 MinecraftVersion"""
        return cls(
            id=data["id"],
            version_type=data.get("type", "release"),
            release_time=data.get("releaseTime", ""),
        )


@dataclass
class ModrinthFile:
    """Modrinth 版本中的文件"""

    url: str
    filename: str
    primary: bool = False
    size: int = 0
    hashes: Optional[Dict[str, str]] = None


@dataclass
class ModrinthVersion:
    """
    Modrinth 项目版本。
    """

    version_number: str
    date_published: str
    loaders: List[str] = field(default_factory=list)
    files: List[ModrinthFile] = field(default_factory=list)

    @property
    def published_at(self) -> Optional[datetime]:
        """发布时间，无法解析时返回 None"""
        if not self.date_published:
            return None
        try:
            return datetime.fromisoformat(self.date_published.replace("Z", "+00:00"))
        except ValueError:
            return None

    @classmethod
    def from_modrinth(cls, data: dict) -> "ModrinthVersion":
        """
        将 Modrinth API 返回的版本信息转换为 ModrinthVersion 对象。
        """
        files = [
            ModrinthFile(
                url=file.get("url", ""),
                filename=file.get("filename", ""),
                primary=bool(file.get("primary", False)),
                size=file.get("size", 0),
                hashes=file.get("hashes"),
            )
            for file in data.get("files") or []
            if isinstance(file, dict)
        ]
        loaders = data.get("loaders")
        return cls(
            version_number=data.get("version_number", ""),
            date_published=data.get("date_published", ""),
            loaders=list(loaders) if isinstance(loaders, list) else [],
            files=files,
        )
