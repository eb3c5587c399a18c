from __future__ import annotations

import pytest

from j_dep_updates.exceptions import InvalidVersionSpecificationError
from j_dep_updates.models import Coordinate, Dependency
from j_dep_updates.versioning import (
    ArtifactVersion,
    ArtifactVersions,
    FixedVersion,
    UpdateScope,
    VersionRange,
    is_snapshot,
    parse_version_spec,
)


def v(text: str) -> ArtifactVersion:
    return ArtifactVersion(text)


def test_qualifier_ordering() -> None:
    ordered = ["1.0-alpha-1", "1.0-beta", "1.0-rc1", "1.0-SNAPSHOT", "1.0", "1.0-sp1"]
    assert sorted(ordered, key=ArtifactVersion) == ordered
    for lower, higher in zip(ordered, ordered[1:]):
        assert v(lower) < v(higher)


def test_numeric_segments_compare_as_numbers() -> None:
    assert v("1.10") > v("1.9")
    assert v("2.0.0") > v("1.99.99")


def test_trailing_zeros_and_release_aliases_are_equal() -> None:
    assert v("1.0") == v("1.0.0") == v("1")
    assert v("1-ga") == v("1")
    assert v("1.0-final") == v("1.0")
    assert hash(v("1.0")) == hash(v("1.0.0"))


def test_short_qualifiers_and_aliases() -> None:
    assert v("1.0a1") == v("1.0-alpha-1")
    assert v("1.0-cr1") == v("1.0-rc1")
    assert v("1.0-m2") < v("1.0-rc1")


def test_unknown_qualifier_sorts_after_service_pack() -> None:
    assert v("1.0-foo") > v("1.0-sp")
    assert v("1.0-bar") < v("1.0-foo")


def test_str_keeps_original_text() -> None:
    assert str(v("1.0.0-RC1")) == "1.0.0-RC1"


def test_segments() -> None:
    assert v("3.2.1-SNAPSHOT").segments == (3, 2, 1)
    assert v("5").segments == (5, 0, 0)
    assert v("RELEASE").segments == (0, 0, 0)


def test_snapshot_detection() -> None:
    assert is_snapshot("1.0-SNAPSHOT")
    assert is_snapshot("2.0-snapshot")
    assert is_snapshot("2.0.Snapshot")
    assert is_snapshot(v("1.0-20240101.120000-3"))
    assert not is_snapshot("1.0")


def test_plain_version_is_fixed() -> None:
    parsed = parse_version_spec("1.0")
    assert isinstance(parsed, FixedVersion)
    assert str(parsed) == "1.0"


def test_range_parsing_and_containment() -> None:
    parsed = parse_version_spec("[1.0,2.0)")
    assert isinstance(parsed, VersionRange)
    assert str(parsed) == "[1.0,2.0)"
    assert parsed.contains(v("1.0"))
    assert parsed.contains(v("1.5"))
    assert not parsed.contains(v("2.0"))
    assert not parsed.contains(v("0.9"))


def test_multiple_restrictions() -> None:
    parsed = parse_version_spec("(,1.0],[1.2,)")
    assert str(parsed) == "(,1.0],[1.2,)"
    assert parsed.contains(v("0.9"))
    assert parsed.contains(v("1.0"))
    assert not parsed.contains(v("1.1"))
    assert parsed.contains(v("3.0"))


def test_exact_version_range() -> None:
    parsed = parse_version_spec("[1.5]")
    assert isinstance(parsed, VersionRange)
    assert str(parsed) == "[1.5,1.5]"
    assert parsed.contains(v("1.5"))
    assert not parsed.contains(v("1.5.1"))


@pytest.mark.parametrize(
    "spec",
    [
        "[1.0,2.0",
        "[2.0,1.0]",
        "(1.0)",
        "[1.0,1.0]",
        "[1.0,2.0),3.0",
        "[1.0,2.0),[1.5,3.0)",
        "[]",
        "",
        None,
    ],
)
def test_invalid_specs(spec: str | None) -> None:
    with pytest.raises(InvalidVersionSpecificationError):
        parse_version_spec(spec)


def test_update_scope_pins_segments() -> None:
    current = v("1.2.3")
    assert UpdateScope.ANY.allows(current, v("3.0"))
    assert UpdateScope.MAJOR.allows(current, v("3.0"))
    assert UpdateScope.MINOR.allows(current, v("1.9"))
    assert not UpdateScope.MINOR.allows(current, v("2.0"))
    assert UpdateScope.INCREMENTAL.allows(current, v("1.2.9"))
    assert not UpdateScope.INCREMENTAL.allows(current, v("1.3.0"))
    assert UpdateScope.SUBINCREMENTAL.allows(current, v("1.2.3-1"))
    assert not UpdateScope.SUBINCREMENTAL.allows(current, v("1.2.4"))


def _versions(*available: str, current: str = "1.0") -> ArtifactVersions:
    dep = Dependency(coordinate=Coordinate(group_id="g", artifact_id="a"), version=current)
    return ArtifactVersions(dep, parse_version_spec(current), available)


def test_artifact_versions_are_sorted_and_unique() -> None:
    versions = _versions("2.0", "1.0", "1.0.0", "1.5")
    assert [str(x) for x in versions.versions] == ["1.0", "1.5", "2.0"]


def test_newest_update_respects_scope_and_snapshots() -> None:
    versions = _versions("1.0", "1.1", "1.2-SNAPSHOT", "2.0")
    assert versions.newest_update(v("1.0"), UpdateScope.ANY, False) == v("2.0")
    assert versions.newest_update(v("1.0"), UpdateScope.MINOR, False) == v("1.1")
    assert versions.newest_update(v("1.0"), UpdateScope.MINOR, True) == v("1.2-SNAPSHOT")
    assert versions.newest_update(v("2.0"), UpdateScope.ANY, True) is None


def test_newest_version_in_range() -> None:
    versions = _versions("1.0", "1.5", "1.9-SNAPSHOT", "2.1", current="[1.0,2.0)")
    in_range = parse_version_spec("[1.0,2.0)")
    assert versions.newest_version(in_range, False) == v("1.5")
    assert versions.newest_version(in_range, True) == v("1.9-SNAPSHOT")
    assert versions.newest_version(parse_version_spec("[3.0,)"), True) is None
