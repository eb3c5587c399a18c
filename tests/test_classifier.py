from __future__ import annotations

from j_dep_updates.classifier import classify, classify_all
from j_dep_updates.models import Coordinate, Dependency
from j_dep_updates.versioning import (
    ArtifactVersion,
    ArtifactVersions,
    UpdateScope,
    parse_version_spec,
)


def _dep(version: str, artifact_id: str = "lib") -> Dependency:
    return Dependency(
        coordinate=Coordinate(group_id="com.acme", artifact_id=artifact_id), version=version
    )


def _check(version: str, available: list[str], **kwargs):
    dep = _dep(version)
    current = parse_version_spec(version)
    return classify(dep, current, ArtifactVersions(dep, current, available), **kwargs)


def test_fixed_version_with_newer_release() -> None:
    result = _check("1.0", ["1.0", "1.1", "2.0"])
    assert result.current == "1.0"
    assert result.latest == "2.0"
    assert result.has_update
    assert result.coordinate.versionless_key() == "com.acme:lib"


def test_fixed_version_already_newest() -> None:
    result = _check("1.0", ["1.0"])
    assert result.latest is None
    assert not result.has_update


def test_fixed_version_honours_scope() -> None:
    assert _check("1.0", ["1.0", "1.1", "2.0"], scope=UpdateScope.MINOR).latest == "1.1"
    assert _check("1.0", ["1.0", "1.0.1", "1.1"], scope=UpdateScope.INCREMENTAL).latest == "1.0.1"


def test_snapshots_only_when_allowed() -> None:
    available = ["1.0", "1.1-SNAPSHOT"]
    assert _check("1.0", available).latest is None
    assert _check("1.0", available, allow_snapshots=True).latest == "1.1-SNAPSHOT"


def test_lower_case_snapshot_is_still_a_snapshot() -> None:
    available = ["1.0", "2.0-snapshot"]
    assert _check("1.0", available).latest is None
    assert _check("1.0", available, allow_snapshots=True).latest == "2.0-snapshot"


def test_exact_range_is_shown_with_both_bounds() -> None:
    result = _check("[1.5]", ["1.5", "2.0"])
    assert result.current == "[1.5,1.5]"
    assert result.latest == "2.0"


def test_range_with_newest_inside_range_has_no_update() -> None:
    result = _check("[1.0,2.0)", ["1.0", "1.5", "1.9"])
    assert result.current == "[1.0,2.0)"
    assert result.latest is None


def test_range_with_version_beyond_range() -> None:
    result = _check("[1.0,2.0)", ["1.0", "1.5", "2.1"])
    assert result.current == "[1.0,2.0)"
    assert result.latest == "2.1"


def test_range_without_any_matching_version() -> None:
    assert _check("[3.0,4.0)", ["1.0", "2.0", "5.0"]).latest is None


class _StubVersions(ArtifactVersions):
    """Reports 1.5 as newest in range and 1.9 as the next update."""

    def newest_version(self, version_range, allow_snapshots):
        return ArtifactVersion("1.5")

    def newest_update(self, current, scope, allow_snapshots):
        return ArtifactVersion("1.9")


def test_range_update_still_inside_range_is_not_reported() -> None:
    dep = _dep("[1.0,2.0)")
    current = parse_version_spec("[1.0,2.0)")
    result = classify(dep, current, _StubVersions(dep, current, []))
    assert result.latest is None


def test_classify_all_keeps_lookup_order() -> None:
    first, second = _dep("1.0", "b-lib"), _dep("2.0", "a-lib")
    updates = {
        first: ArtifactVersions(first, parse_version_spec("1.0"), ["1.0", "1.2"]),
        second: ArtifactVersions(second, parse_version_spec("2.0"), ["2.0"]),
    }
    results = classify_all(updates)
    assert [r.coordinate.artifact_id for r in results] == ["b-lib", "a-lib"]
    assert [r.latest for r in results] == ["1.2", None]
