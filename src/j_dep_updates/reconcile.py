"""Merge of direct dependencies with the dependencyManagement section.

A dependency that is already governed by a dependencyManagement entry is
reported once, under "Dependency Management", and removed from the
"Dependencies" set.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from j_dep_updates.exceptions import ConfigurationError, InvalidVersionSpecificationError
from j_dep_updates.models import Dependency
from j_dep_updates.patterns import ArtifactMatcher
from j_dep_updates.versioning import parse_version_spec


logger = logging.getLogger(__name__)


class DependencySet:
    """De-duplicated dependencies, iterated in `Dependency.sort_key()` order.

    Adding an entry whose key is already present keeps the first one.
    """

    def __init__(self, dependencies: Iterable[Dependency] = ()) -> None:
        self._items: dict[tuple[str, ...], Dependency] = {}
        for dep in dependencies:
            self.add(dep)

    def add(self, dependency: Dependency) -> bool:
        key = dependency.sort_key()
        if key in self._items:
            return False
        self._items[key] = dependency
        return True

    def __iter__(self) -> Iterator[Dependency]:
        for key in sorted(self._items):
            yield self._items[key]

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, dependency: object) -> bool:
        return isinstance(dependency, Dependency) and dependency.sort_key() in self._items

    def __repr__(self) -> str:
        return f"DependencySet({[d.label() for d in self]!r})"


def check_version_spec(dependency: Dependency) -> Dependency:
    """Validate the version spec of a dependency before it is matched.

    Raises:
        InvalidVersionSpecificationError: Naming the offending dependency.
    """
    if dependency.version is not None:
        try:
            parse_version_spec(dependency.version)
        except InvalidVersionSpecificationError as exc:
            raise InvalidVersionSpecificationError(f"{dependency.label()}: {exc}") from exc
    return dependency


def _shadows(managed: Dependency, dependency: Dependency) -> bool:
    if managed.group_id != dependency.group_id or managed.artifact_id != dependency.artifact_id:
        return False
    if managed.scope is not None and managed.scope != dependency.scope:
        return False
    if managed.classifier is not None and managed.classifier != dependency.classifier:
        return False
    if managed.version is None or dependency.version is None:
        return True
    return managed.version == dependency.version


def remove_dependency_management(
    dependencies: Iterable[Dependency], dependency_management: Iterable[Dependency]
) -> DependencySet:
    """Return the dependencies not shadowed by any dependencyManagement entry.

    Scope and classifier are only compared when the managed entry sets them.
    """
    managed = list(dependency_management)
    result = DependencySet()
    for dep in dependencies:
        if not any(_shadows(m, dep) for m in managed):
            result.add(dep)
    return result


def _inherited_entry(dependency: Dependency, parent_entries: Iterable[Dependency]) -> Dependency | None:
    for parent_dep in parent_entries:
        if parent_dep.version is not None and parent_dep.coordinate.same_artifact(dependency.coordinate):
            return parent_dep
    return None


def reconcile(
    dependencies: Iterable[Dependency],
    dependency_management: Iterable[Dependency],
    parent_dependency_management: Iterable[Dependency],
    has_parent: bool,
    matcher: ArtifactMatcher | None = None,
    process_dependency_management: bool = True,
) -> tuple[DependencySet, DependencySet]:
    """Build the dependencyManagement and dependency sets to report on.

    Args:
        dependencies: Direct dependencies of the project.
        dependency_management: The project's own dependencyManagement entries.
        parent_dependency_management: Effective entries of the parent POM.
        has_parent: Whether the project declares a parent.
        matcher: Include/exclude filter; everything is included when None.
        process_dependency_management: Remove managed entries from the
            dependency set.

    Raises:
        ConfigurationError: If a managed entry has no version and there is no
            parent to inherit it from.
        InvalidVersionSpecificationError: If a version spec is malformed.

    Returns:
        `(management_set, dependency_set)`.
    """
    matcher = matcher or ArtifactMatcher()
    parent_entries = list(parent_dependency_management)

    management = DependencySet()
    for dep in dependency_management:
        if not matcher.is_included(check_version_spec(dep)):
            continue
        logger.debug("dependency from pom: %s:%s:%s", dep.group_id, dep.artifact_id, dep.version)
        if dep.version is not None:
            management.add(dep)
            continue

        if not has_parent:
            message = (
                f"Cannot determine the version of {dep.coordinate.versionless_key()}: "
                "it declares no version and the project has no parent."
            )
            logger.error(message)
            raise ConfigurationError(message)

        logger.debug("Reading parent dependencyManagement information")
        inherited = _inherited_entry(dep, parent_entries)
        if inherited is None:
            logger.debug(
                "No parent dependencyManagement entry for %s, skipping",
                dep.coordinate.versionless_key(),
            )
            continue
        management.add(dep.with_version(inherited.version))

    direct = DependencySet(d for d in dependencies if matcher.is_included(check_version_spec(d)))
    if process_dependency_management:
        direct = remove_dependency_management(direct, management)
    return management, direct
