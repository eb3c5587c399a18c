"""Rich rendering of the dependency sets an update check will look at."""

from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from j_dep_updates.models import MavenProject
from j_dep_updates.reconcile import DependencySet


def build_dependency_tree(
    model: MavenProject, management: DependencySet, dependencies: DependencySet
) -> Tree:
    """Build a Rich Tree of the reconciled dependencyManagement and dependencies.

    Args:
        model: Parsed Maven project model.
        management: dependencyManagement entries that will be checked.
        dependencies: Direct dependencies that will be checked.

    Returns:
        A Rich Tree object for rendering.
    """
    root = Tree(f"[bold]{model.project.compact()}[/bold]")
    if model.parent_gav is not None:
        state = "" if model.parent is not None else " [dim](not found on disk)[/dim]"
        root.add(f"parent {model.parent_gav.compact()}{state}")

    for title, entries in (("dependencyManagement", management), ("dependencies", dependencies)):
        branch = root.add(title)
        if not len(entries):
            branch.add("[dim]Nothing to check[/dim]")
            continue
        for dep in entries:
            branch.add(Text(dep.label()))
    return root
