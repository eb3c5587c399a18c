"""Decide whether a dependency has a newer version worth reporting."""

from __future__ import annotations

from collections.abc import Mapping

from j_dep_updates.models import ClassificationResult, Dependency
from j_dep_updates.versioning import (
    ArtifactVersions,
    CurrentVersion,
    FixedVersion,
    UpdateScope,
    VersionRange,
)


def classify(
    dependency: Dependency,
    current: CurrentVersion,
    available: ArtifactVersions,
    scope: UpdateScope = UpdateScope.ANY,
    allow_snapshots: bool = False,
) -> ClassificationResult:
    """Classify one dependency against the versions known for it.

    A fixed version is compared directly. For a range, the newest version
    inside the range is taken as the starting point, and an update that
    still falls inside the declared range is not reported.
    """
    if isinstance(current, FixedVersion):
        latest = available.newest_update(current.version, scope, allow_snapshots)
    elif isinstance(current, VersionRange):
        newest = available.newest_version(current, allow_snapshots)
        latest = None
        if newest is not None:
            latest = available.newest_update(newest, scope, allow_snapshots)
            if latest is not None and current.contains(latest):
                latest = None
    else:
        raise TypeError(f"Unsupported current version: {current!r}")

    return ClassificationResult(
        coordinate=dependency.coordinate,
        current=str(current),
        latest=str(latest) if latest is not None else None,
    )


def classify_all(
    updates: Mapping[Dependency, ArtifactVersions],
    scope: UpdateScope = UpdateScope.ANY,
    allow_snapshots: bool = False,
) -> list[ClassificationResult]:
    """Classify every looked-up dependency, keeping the mapping order."""
    return [
        classify(dep, versions.current, versions, scope, allow_snapshots)
        for dep, versions in updates.items()
    ]
