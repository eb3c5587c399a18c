"""One dependency update check: reconcile, look up, classify and render."""

from __future__ import annotations

import logging

from j_dep_updates.classifier import classify_all
from j_dep_updates.config import DisplayConfig
from j_dep_updates.models import MavenProject
from j_dep_updates.reconcile import DependencySet, reconcile
from j_dep_updates.report import render_updates
from j_dep_updates.resolver import ArtifactResolver, LocalRepositoryResolver, RemoteRepositoryResolver


logger = logging.getLogger(__name__)

DEPENDENCY_MANAGEMENT_SECTION = "Dependency Management"
DEPENDENCIES_SECTION = "Dependencies"


def build_resolver(config: DisplayConfig) -> ArtifactResolver:
    """Create the resolver the configuration asks for."""
    if config.offline:
        return LocalRepositoryResolver(config.local_repository)
    return RemoteRepositoryResolver(config.repositories, timeout=config.timeout)


def reconcile_project(project: MavenProject, config: DisplayConfig) -> tuple[DependencySet, DependencySet]:
    """Return the (dependencyManagement, dependencies) sets to report on."""
    return reconcile(
        project.dependencies,
        project.dependency_management or [],
        project.parent_dependency_management(),
        project.has_parent,
        matcher=config.build_matcher(),
        process_dependency_management=config.process_dependency_management,
    )


def display_dependency_updates(
    project: MavenProject, config: DisplayConfig, resolver: ArtifactResolver
) -> list[str]:
    """Produce the report lines for one project.

    A resolver failure propagates and no lines are produced for the project.
    """
    management, dependencies = reconcile_project(project, config)
    logger.debug(
        "%s: %d managed, %d direct dependencies to check",
        project.project.artifact_id,
        len(management),
        len(dependencies),
    )

    lines: list[str] = []
    if config.process_dependency_management:
        updates = resolver.lookup_updates(management, False)
        lines.extend(
            render_updates(
                classify_all(updates, config.scope, config.allow_snapshots),
                DEPENDENCY_MANAGEMENT_SECTION,
                verbose=config.verbose,
                project_id=project.project.artifact_id,
            )
        )
    if config.process_dependencies:
        updates = resolver.lookup_updates(dependencies, False)
        lines.extend(
            render_updates(
                classify_all(updates, config.scope, config.allow_snapshots),
                DEPENDENCIES_SECTION,
                verbose=config.verbose,
                project_id=project.project.artifact_id,
            )
        )
    return lines
