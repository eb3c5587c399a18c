"""Pydantic models for Maven artifacts, dependencies and update results."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TYPE = "jar"


class GAV(BaseModel):
    """Maven coordinates (GroupId, ArtifactId, Version)."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str | None = None

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`.
        """
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class Coordinate(BaseModel):
    """Version-independent identity of an artifact."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    type: str = DEFAULT_TYPE
    classifier: str | None = None

    def versionless_key(self) -> str:
        """Return `groupId:artifactId`."""
        return f"{self.group_id}:{self.artifact_id}"

    def same_artifact(self, other: Coordinate) -> bool:
        """Return True if groupId, artifactId and type are equal."""
        return (
            self.group_id == other.group_id
            and self.artifact_id == other.artifact_id
            and self.type == other.type
        )


class Dependency(BaseModel):
    """A Maven dependency entry.

    `version` is None when the entry inherits its version, e.g. a
    dependencyManagement entry relying on the parent POM.
    """

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    version: str | None = None
    scope: str | None = None
    optional: bool | None = None

    @property
    def group_id(self) -> str:
        return self.coordinate.group_id

    @property
    def artifact_id(self) -> str:
        return self.coordinate.artifact_id

    @property
    def classifier(self) -> str | None:
        return self.coordinate.classifier

    def sort_key(self) -> tuple[str, str, str, str, str]:
        """Identity order: groupId, artifactId, type, classifier, version."""
        c = self.coordinate
        return (c.group_id, c.artifact_id, c.type, c.classifier or "", self.version or "")

    def with_version(self, version: str | None) -> Dependency:
        return self.model_copy(update={"version": version})

    def label(self) -> str:
        """Return a user-facing label for the dependency.

        Returns:
            A formatted string including coordinates and scope when present.
        """
        c = self.coordinate
        parts: list[str] = [f"{c.group_id}:{c.artifact_id}:{c.type}"]
        if c.classifier:
            parts[0] += f":{c.classifier}"
        parts[0] += f":{self.version if self.version is not None else '(inherited)'}"
        if self.scope:
            parts.append(f"(scope={self.scope})")
        if self.optional is True:
            parts.append("(optional)")
        return " ".join(parts)


class MavenProject(BaseModel):
    """A parsed Maven project model.

    `declared_dependency_management` holds the dependencyManagement entries as
    written, before `${...}` interpolation; a child POM interpolates its
    ancestors' entries with its own properties. The result is stored in
    `inherited_dependency_management`.
    """

    project: GAV
    path: Path | None = None
    parent_gav: GAV | None = None
    parent: MavenProject | None = None
    properties: dict[str, str] = Field(default_factory=dict)
    dependencies: list[Dependency] = Field(default_factory=list)
    dependency_management: list[Dependency] | None = None
    declared_dependency_management: list[Dependency] | None = None
    inherited_dependency_management: list[Dependency] = Field(default_factory=list)

    @property
    def has_parent(self) -> bool:
        return self.parent_gav is not None

    def ancestor_dependency_management(self) -> list[Dependency]:
        """Uninterpolated dependencyManagement entries of the parent chain, nearest POM first."""
        entries: list[Dependency] = []
        project = self.parent
        while project is not None:
            entries.extend(project.declared_dependency_management or [])
            project = project.parent
        return entries

    def parent_dependency_management(self) -> list[Dependency]:
        """dependencyManagement inherited from the parent chain.

        Entries are interpolated with this project's properties, and a nearer
        POM wins for the same groupId, artifactId, type and classifier.
        """
        return list(self.inherited_dependency_management)


class ClassificationResult(BaseModel):
    """Outcome of checking one dependency for updates.

    `latest` is None when no qualifying newer version exists.
    """

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    current: str
    latest: str | None = None

    @property
    def has_update(self) -> bool:
        return self.latest is not None
