"""
配置数据模型

定义加载器类型、上游地址以及各类静态查找表，并负责从配置字典构建配置对象。
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from echoregistry.exceptions import ConfigValidationError


class Loader(Enum):
    """模组加载器 / 工具链类型"""

    FORGE = "forge"
    NEOFORGE = "neoforge"
    FABRIC = "fabric"
    UNIVERSAL = "universal"


# 兼容性矩阵中出现的加载器列（universal 不占列）
MATRIX_LOADERS = (Loader.FORGE, Loader.NEOFORGE, Loader.FABRIC)

BUILT_IN_COMPONENTS = (
    "forge",
    "neoforge",
    "fabric-loader",
    "parchment",
    "neoform",
    "moddev-gradle",
    "forgegradle",
    "loom",
)

DEFAULT_MINIMUM_VERSIONS: Dict[str, str] = {
    "neoforge": "1.20.2",
    "fabric-loader": "1.13.0",
    "fabric-api": "1.13.0",
    "architectury-api": "1.16.5",
    "modmenu": "1.14.4",
    "rei": "1.13.0",
    "amber": "1.20.1",
    "neoform": "1.20.2",
    "moddev-gradle": "1.20.2",
    "forgegradle": "1.2.5",
    "forge": "1.2.5",
    "parchment": "1.16.0",
}

DEFAULT_LOADER_MAPPING: Dict[str, str] = {
    "forge": "forge",
    "neoforge": "neoforge",
    "fabric-loader": "fabric",
    "forgegradle": "forge",
    "loom": "fabric",
    "neoform": "universal",
    "moddev-gradle": "universal",
    "parchment": "universal",
    "fabric-api": "fabric",
    "modmenu": "fabric",
    "rei": "universal",
    "architectury-api": "universal",
    "amber": "universal",
}

# 内置组件在兼容性矩阵中落到哪一列
DEFAULT_MATRIX_LOADERS: Dict[str, str] = {
    "forge": "forge",
    "neoforge": "neoforge",
    "fabric-loader": "fabric",
    "loom": "fabric",
    "forgegradle": "forge",
    "moddev-gradle": "neoforge",
    "parchment": "universal",
    "neoform": "universal",
}

DEFAULT_SOURCE_URLS: Dict[str, str] = {
    "forge": "https://files.minecraftforge.net/net/minecraftforge/forge/",
    "neoforge": "https://maven.neoforged.net/releases/net/neoforged/neoforge/",
    "fabric-loader": "https://meta.fabricmc.net/v2/versions/loader/",
    "parchment": "https://maven.parchmentmc.org/",
    "neoform": "https://maven.neoforged.net/releases/net/neoforged/neoform/",
    "forgegradle": "https://maven.minecraftforge.net/net/minecraftforge/gradle/ForgeGradle/",
    "moddev-gradle": "https://maven.neoforged.net/releases/net/neoforged/moddev-gradle/",
    "loom": "https://maven.fabricmc.net/net/fabricmc/fabric-loom/",
}

MODRINTH_PAGE_URL = "https://modrinth.com/mod/{slug}"


@dataclass
class HttpConfig:
    """HTTP 客户端配置"""

    timeout: float = 30.0
    user_agent: str = "EchoRegistry/1.0"
    health_timeout: float = 5.0


@dataclass
class CacheConfig:
    """缓存 TTL 配置（秒）"""

    ttl_dependencies: int = 300
    ttl_minecraft: int = 3600


@dataclass
class FallbackConfig:
    """Parchment 回退链配置"""

    max_previous_minors: int = 5
    max_patch_per_minor: int = 10
    patch_floor: int = 0


@dataclass
class UpstreamUrls:
    """上游数据源地址"""

    forge_base: str = "https://files.minecraftforge.net/net/minecraftforge/forge"
    neoforge_metadata: str = (
        "https://maven.neoforged.net/releases/net/neoforged/neoforge/maven-metadata.xml"
    )
    fabric_loader: str = "https://meta.fabricmc.net/v2/versions/loader"
    modrinth_api: str = "https://api.modrinth.com/v2/project"
    parchment_template: str = (
        "https://maven.parchmentmc.org/org/parchmentmc/data/"
        "parchment-{version}/maven-metadata.xml"
    )
    neoform_metadata: str = (
        "https://maven.neoforged.net/releases/net/neoforged/neoform/maven-metadata.xml"
    )
    forgegradle_metadata: str = (
        "https://maven.minecraftforge.net/net/minecraftforge/gradle/"
        "ForgeGradle/maven-metadata.xml"
    )
    moddev_gradle_metadata: str = (
        "https://maven.neoforged.net/releases/net/neoforged/moddev-gradle/"
        "maven-metadata.xml"
    )
    loom_metadata: str = (
        "https://maven.fabricmc.net/net/fabricmc/fabric-loom/maven-metadata.xml"
    )
    minecraft_manifest: str = (
        "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
    )


@dataclass
class HealthConfig:
    """健康检查配置"""

    error_threshold: int = 1
    endpoints: Dict[str, str] = field(
        default_factory=lambda: {
            "forge": "https://files.minecraftforge.net",
            "neoforge": "https://maven.neoforged.net",
            "fabric": "https://meta.fabricmc.net",
            "minecraft": "https://piston-meta.mojang.com",
            "modrinth": "https://api.modrinth.com",
        }
    )


def _frozen(table: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(table))


def _positive_number(section: str, key: str, value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigValidationError(
            f"{section}.{key} 必须为正数",
            context={"section": section, "key": key, "value": value},
        )
    return value


def _non_negative_int(section: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigValidationError(
            f"{section}.{key} 必须为非负整数",
            context={"section": section, "key": key, "value": value},
        )
    return value


def _string_table(name: str, value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise ConfigValidationError(f"{name} 必须为表", context={"value": value})
    for k, v in value.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise ConfigValidationError(
                f"{name} 的键和值都必须为字符串", context={"key": k, "value": v}
            )
    return value


@dataclass
class RegistryConfig:
    """EchoRegistry 完整配置"""

    http: HttpConfig = field(default_factory=HttpConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    fallback: FallbackConfig = field(default_factory=FallbackConfig)
    urls: UpstreamUrls = field(default_factory=UpstreamUrls)
    health: HealthConfig = field(default_factory=HealthConfig)
    minimum_versions: Mapping[str, str] = field(
        default_factory=lambda: _frozen(DEFAULT_MINIMUM_VERSIONS)
    )
    loader_mapping: Mapping[str, str] = field(
        default_factory=lambda: _frozen(DEFAULT_LOADER_MAPPING)
    )
    matrix_loaders: Mapping[str, str] = field(
        default_factory=lambda: _frozen(DEFAULT_MATRIX_LOADERS)
    )
    source_urls: Mapping[str, str] = field(
        default_factory=lambda: _frozen(DEFAULT_SOURCE_URLS)
    )
    built_in_components: List[str] = field(
        default_factory=lambda: list(BUILT_IN_COMPONENTS)
    )
    default_projects: List[str] = field(default_factory=lambda: ["fabric-api"])

    def loader_for(self, name: str) -> Loader:
        """查询组件对应的加载器，未知组件视为 universal"""
        try:
            return Loader(self.loader_mapping.get(name, "universal"))
        except ValueError:
            return Loader.UNIVERSAL

    def source_url_for(self, name: str) -> str:
        """查询组件的来源页面，未知组件视为 Modrinth 项目"""
        return self.source_urls.get(name) or MODRINTH_PAGE_URL.format(slug=name)

    def is_built_in(self, name: str) -> bool:
        return name in self.built_in_components

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "RegistryConfig":
        """从配置字典构建配置对象，查找表与默认值合并"""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigValidationError("配置根节点必须为表")

        config = cls()

        http = data.get("http", {})
        if "timeout" in http:
            config.http.timeout = _positive_number("http", "timeout", http["timeout"])
        if "health_timeout" in http:
            config.http.health_timeout = _positive_number(
                "http", "health_timeout", http["health_timeout"]
            )
        if "user_agent" in http:
            config.http.user_agent = str(http["user_agent"])

        cache = data.get("cache", {})
        for key in ("ttl_dependencies", "ttl_minecraft"):
            if key in cache:
                setattr(config.cache, key, int(_positive_number("cache", key, cache[key])))

        fallback = data.get("fallback", {})
        for key in ("max_previous_minors", "max_patch_per_minor", "patch_floor"):
            if key in fallback:
                setattr(
                    config.fallback, key, _non_negative_int("fallback", key, fallback[key])
                )
        if config.fallback.patch_floor > config.fallback.max_patch_per_minor:
            raise ConfigValidationError("fallback.patch_floor 不能大于 max_patch_per_minor")

        urls = data.get("urls", {})
        for key, value in _string_table("urls", urls).items():
            if not hasattr(config.urls, key):
                raise ConfigValidationError(f"未知的上游地址: {key}")
            setattr(config.urls, key, value)
        if "{version}" not in config.urls.parchment_template:
            raise ConfigValidationError("urls.parchment_template 必须包含 {version}")

        health = data.get("health", {})
        if "error_threshold" in health:
            config.health.error_threshold = _non_negative_int(
                "health", "error_threshold", health["error_threshold"]
            )
        if "endpoints" in health:
            config.health.endpoints = dict(
                _string_table("health.endpoints", health["endpoints"])
            )

        valid_loaders = {loader.value for loader in Loader}
        for attr in ("loaders", "matrix_loaders"):
            table = _string_table(attr, data.get(attr, {}))
            unknown = [v for v in table.values() if v not in valid_loaders]
            if unknown:
                raise ConfigValidationError(
                    f"{attr} 包含未知的加载器: {', '.join(unknown)}"
                )

        config.minimum_versions = _frozen(
            {**DEFAULT_MINIMUM_VERSIONS, **_string_table("minimum_versions", data.get("minimum_versions", {}))}
        )
        config.loader_mapping = _frozen(
            {**DEFAULT_LOADER_MAPPING, **data.get("loaders", {})}
        )
        config.matrix_loaders = _frozen(
            {**DEFAULT_MATRIX_LOADERS, **data.get("matrix_loaders", {})}
        )
        config.source_urls = _frozen(
            {**DEFAULT_SOURCE_URLS, **_string_table("sources", data.get("sources", {}))}
        )

        if "default_projects" in data:
            projects = data["default_projects"]
            if isinstance(projects, str):
                projects = [projects]
            if not isinstance(projects, list):
                raise ConfigValidationError("default_projects 必须为列表")
            config.default_projects = [str(p) for p in projects]

        return config

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> "RegistryConfig":
        """应用环境变量覆盖"""
        environ = os.environ if environ is None else environ
        overrides = {
            "ECHOREGISTRY_CACHE_TTL_DEPENDENCIES": (self.cache, "ttl_dependencies", int),
            "ECHOREGISTRY_CACHE_TTL_MINECRAFT": (self.cache, "ttl_minecraft", int),
            "ECHOREGISTRY_HTTP_TIMEOUT": (self.http, "timeout", float),
        }
        for env_name, (target, attr, cast) in overrides.items():
            raw = environ.get(env_name)
            if raw is None:
                continue
            try:
                value = cast(raw)
            except ValueError:
                raise ConfigValidationError(
                    f"环境变量 {env_name} 无效: {raw}", context={"value": raw}
                )
            setattr(target, attr, _positive_number("env", env_name, value))
        return self
