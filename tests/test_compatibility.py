"""兼容性检查测试"""

import pytest

from echoregistry.models.config import DEFAULT_MINIMUM_VERSIONS
from echoregistry.services.compatibility import (
    CompatibilityGate,
    is_release_at_least,
    parse_release,
)


@pytest.fixture
def gate():
    return CompatibilityGate(DEFAULT_MINIMUM_VERSIONS)


def test_parse_release():
    assert parse_release("1.21.1") == (1, 21, 1)
    assert parse_release("1.21") == (1, 21, 0)
    assert parse_release("1.21.1-pre1") == (1, 21, 1)


def test_parse_release_rejects_single_segment():
    with pytest.raises(ValueError):
        parse_release("24w14a")


def test_neoforge_boundary(gate):
    assert not gate.is_compatible("neoforge", "1.20.1")
    assert gate.is_compatible("neoforge", "1.20.2")
    assert gate.is_compatible("neoforge", "1.21")


def test_unknown_component_is_always_compatible(gate):
    assert gate.is_compatible("some-mod", "0.0.0")
    assert gate.minimum_for("some-mod") is None


def test_unparseable_version_fails_open(gate):
    assert gate.is_compatible("neoforge", "24w14a")
    assert is_release_at_least("garbage", "1.20.2")
