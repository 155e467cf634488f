"""版本比较与回退候选测试"""

from echoregistry.models import FallbackConfig
from echoregistry.services.version_matcher import (
    compare_versions,
    extract_minor_version,
    generate_fallback_candidates,
    latest_version,
    leading_int,
    matches_version_prefix,
    sort_versions,
)


def test_numeric_segments_compare_as_integers():
    assert compare_versions("1.21.1", "1.21.10") == -1
    assert compare_versions("1.21.10", "1.21.9") == 1
    assert sort_versions(["1.21.10", "1.21.1", "1.21.2"]) == ["1.21.1", "1.21.2", "1.21.10"]


def test_equal_numbers_fall_back_to_string_order():
    assert compare_versions("1.21", "1.21.0") == -1
    assert compare_versions("1.21", "1.21.1") == -1


def test_prerelease_sorts_before_release():
    assert sort_versions(["21.1.5", "21.1.5-beta"]) == ["21.1.5-beta", "21.1.5"]
    assert latest_version(["21.1.5-beta", "21.1.5"]) == "21.1.5"


def test_snapshot_versions_compare_numerically():
    assert latest_version(["1.6-SNAPSHOT", "1.10-SNAPSHOT", "1.9-SNAPSHOT"]) == "1.10-SNAPSHOT"


def test_sort_does_not_mutate_input():
    versions = ["2.0", "1.0"]
    assert sort_versions(versions) == ["1.0", "2.0"]
    assert versions == ["2.0", "1.0"]


def test_latest_version_of_empty_list():
    assert latest_version([]) is None


def test_leading_int():
    assert leading_int("10-SNAPSHOT") == 10
    assert leading_int("beta") == 0
    assert leading_int("beta", default=21) == 21


def test_extract_minor_version():
    assert extract_minor_version("1.21.1") == "21.1"
    assert extract_minor_version("1.21") == "21"
    assert extract_minor_version("24w14a") == "24w14a"


def test_prefix_match_respects_segment_boundary():
    assert matches_version_prefix("21.1", "21.1.77")
    assert matches_version_prefix("21.1", "21.1.0-beta")
    assert matches_version_prefix("21.1", "21.1")
    assert not matches_version_prefix("21.1", "21.10.3")
    assert not matches_version_prefix("21.1", "20.1.5")


def test_fallback_candidates_for_prerelease():
    candidates = generate_fallback_candidates("1.21.1-pre1")

    assert candidates[:4] == ["1.21.1-pre1", "1.21.1", "1.21.0", "1.16.10"]
    assert candidates[-1] == "1.20.0"
    assert len(candidates) == 3 + 5 * 11


def test_fallback_candidates_for_plain_minor():
    candidates = generate_fallback_candidates("1.21")

    assert candidates[0] == "1.21"
    assert candidates[1] == "1.16.10"
    assert "1.21.0" not in candidates


def test_fallback_candidates_respect_config():
    config = FallbackConfig(max_previous_minors=1, max_patch_per_minor=2, patch_floor=1)

    assert generate_fallback_candidates("1.20.2", config) == [
        "1.20.2",
        "1.20.1",
        "1.20.0",
        "1.19.2",
        "1.19.1",
    ]


def test_fallback_candidates_for_unparseable_version():
    assert generate_fallback_candidates("invalid") == ["invalid"]


def test_metadata_listing_sorts_prerelease_first():
    assert sort_versions(["1.21.0", "1.21.1", "1.21.0-beta"]) == [
        "1.21.0-beta",
        "1.21.0",
        "1.21.1",
    ]
