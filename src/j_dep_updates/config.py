"""Configuration for a dependency update check.

Values are read from environment variables and can be overridden by CLI
options. Booleans default to the behaviour of the `display-dependency-updates`
goal: both sections processed, terse output, no snapshots.
"""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from j_dep_updates.patterns import ArtifactMatcher
from j_dep_updates.resolver import DEFAULT_LOCAL_REPOSITORY, MAVEN_CENTRAL
from j_dep_updates.versioning import UpdateScope


_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return default


def _env_list(name: str) -> list[str] | None:
    value = os.getenv(name)
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class DisplayConfig:
    """Dependency update check configuration container.

    Attributes:
        process_dependency_management: Report the dependencyManagement section
            and drop dependencies it already manages.
        process_dependencies: Report the dependencies section.
        verbose: Also list dependencies that are up to date.
        includes_list: Comma separated include patterns; wins over `includes`.
        excludes_list: Comma separated exclude patterns; wins over `excludes`.
        includes: Include patterns given one by one.
        excludes: Exclude patterns given one by one.
        allow_snapshots: Consider snapshot versions as updates.
        update_scope: How far an update may reach ("any", "major", "minor",
            "incremental", "subincremental").
        repositories: Remote repository base URLs, searched in order.
        local_repository: Local repository used when offline.
        offline: Read versions from the local repository only.
        timeout: HTTP timeout in seconds.
        output_file: File the report is appended to, besides the console.
    """

    process_dependency_management: bool = True
    process_dependencies: bool = True
    verbose: bool = False

    includes_list: str | None = None
    excludes_list: str | None = None
    includes: list[str] | None = None
    excludes: list[str] | None = None

    allow_snapshots: bool = False
    update_scope: str = UpdateScope.ANY.value

    repositories: list[str] = field(default_factory=lambda: [MAVEN_CENTRAL])
    local_repository: Path = DEFAULT_LOCAL_REPOSITORY
    offline: bool = False
    timeout: float = 30.0
    output_file: Path | None = None

    @classmethod
    def from_env(cls) -> "DisplayConfig":
        """Create configuration from environment variables.

        Environment variables:
            JDEP_PROCESS_DEPENDENCY_MANAGEMENT: "true"/"false" (default: "true")
            JDEP_PROCESS_DEPENDENCIES: "true"/"false" (default: "true")
            JDEP_VERBOSE: "true"/"false" (default: "false")
            JDEP_INCLUDES: Comma separated include patterns
            JDEP_EXCLUDES: Comma separated exclude patterns
            JDEP_ALLOW_SNAPSHOTS: "true"/"false" (default: "false")
            JDEP_UPDATE_SCOPE: Update scope (default: "any")
            JDEP_REPOSITORIES: Comma separated repository URLs (default: Maven Central)
            JDEP_LOCAL_REPOSITORY: Local repository path (default: "~/.m2/repository")
            JDEP_OFFLINE: "true"/"false" (default: "false")
            JDEP_TIMEOUT: HTTP timeout in seconds (default: 30)
            JDEP_OUTPUT_FILE: Report output file
        """
        defaults = cls()
        local_repository = os.getenv("JDEP_LOCAL_REPOSITORY")
        output_file = os.getenv("JDEP_OUTPUT_FILE")
        timeout = os.getenv("JDEP_TIMEOUT")

        return cls(
            process_dependency_management=_env_bool(
                "JDEP_PROCESS_DEPENDENCY_MANAGEMENT", defaults.process_dependency_management
            ),
            process_dependencies=_env_bool("JDEP_PROCESS_DEPENDENCIES", defaults.process_dependencies),
            verbose=_env_bool("JDEP_VERBOSE", defaults.verbose),
            includes_list=os.getenv("JDEP_INCLUDES"),
            excludes_list=os.getenv("JDEP_EXCLUDES"),
            allow_snapshots=_env_bool("JDEP_ALLOW_SNAPSHOTS", defaults.allow_snapshots),
            update_scope=os.getenv("JDEP_UPDATE_SCOPE", defaults.update_scope).strip().lower(),
            repositories=_env_list("JDEP_REPOSITORIES") or defaults.repositories,
            local_repository=Path(local_repository).expanduser()
            if local_repository
            else defaults.local_repository,
            offline=_env_bool("JDEP_OFFLINE", defaults.offline),
            timeout=float(timeout) if timeout else defaults.timeout,
            output_file=Path(output_file) if output_file else None,
        )

    def with_overrides(self, **values: Any) -> "DisplayConfig":
        """Return a copy with the given fields replaced; None values are ignored."""
        return dataclasses.replace(self, **{k: v for k, v in values.items() if v is not None})

    @property
    def scope(self) -> UpdateScope:
        return UpdateScope(self.update_scope)

    def build_matcher(self) -> ArtifactMatcher:
        """Compile the include/exclude filters once for the whole run."""
        return ArtifactMatcher.from_lists(
            includes_list=self.includes_list,
            excludes_list=self.excludes_list,
            includes=self.includes,
            excludes=self.excludes,
        )

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If required configuration is missing or invalid.
        """
        if not self.offline and not self.repositories:
            raise ValueError("At least one repository URL is required (JDEP_REPOSITORIES)")
        if self.timeout <= 0:
            raise ValueError(f"JDEP_TIMEOUT must be positive, got {self.timeout}")
        valid_scopes = {s.value for s in UpdateScope}
        if self.update_scope not in valid_scopes:
            raise ValueError(
                f"Unsupported update scope: {self.update_scope} "
                f"(expected one of {', '.join(sorted(valid_scopes))})"
            )
