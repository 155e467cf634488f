"""配置模型测试"""

import pytest

from echoregistry.exceptions import ConfigValidationError
from echoregistry.models import Loader, RegistryConfig


def test_defaults():
    config = RegistryConfig.from_dict({})

    assert config.cache.ttl_dependencies == 300
    assert config.cache.ttl_minecraft == 3600
    assert config.minimum_versions["neoforge"] == "1.20.2"
    assert config.default_projects == ["fabric-api"]
    assert config.loader_for("loom") is Loader.FABRIC
    assert config.loader_for("sodium") is Loader.UNIVERSAL
    assert config.source_url_for("sodium") == "https://modrinth.com/mod/sodium"


def test_tables_merge_with_defaults():
    config = RegistryConfig.from_dict(
        {
            "minimum_versions": {"sodium": "1.16.5"},
            "loaders": {"sodium": "fabric"},
            "cache": {"ttl_dependencies": 60},
        }
    )

    assert config.minimum_versions["sodium"] == "1.16.5"
    assert config.minimum_versions["neoforge"] == "1.20.2"
    assert config.loader_for("sodium") is Loader.FABRIC
    assert config.cache.ttl_dependencies == 60


def test_lookup_tables_are_read_only():
    config = RegistryConfig()

    with pytest.raises(TypeError):
        config.minimum_versions["neoforge"] = "1.0"


@pytest.mark.parametrize(
    "data",
    [
        {"loaders": {"sodium": "quilt"}},
        {"cache": {"ttl_dependencies": 0}},
        {"http": {"timeout": "fast"}},
        {"fallback": {"max_patch_per_minor": 2, "patch_floor": 3}},
        {"urls": {"parchment_template": "https://example.com/parchment.xml"}},
        {"urls": {"unknown_source": "https://example.com"}},
        {"default_projects": {"fabric-api": True}},
    ],
)
def test_invalid_config(data):
    with pytest.raises(ConfigValidationError):
        RegistryConfig.from_dict(data)


def test_environment_overrides():
    config = RegistryConfig().apply_env(
        {
            "ECHOREGISTRY_CACHE_TTL_DEPENDENCIES": "120",
            "ECHOREGISTRY_HTTP_TIMEOUT": "2.5",
        }
    )

    assert config.cache.ttl_dependencies == 120
    assert config.cache.ttl_minecraft == 3600
    assert config.http.timeout == 2.5


def test_invalid_environment_override():
    with pytest.raises(ConfigValidationError):
        RegistryConfig().apply_env({"ECHOREGISTRY_CACHE_TTL_MINECRAFT": "soon"})
