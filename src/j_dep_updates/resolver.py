"""Look up the versions published for Maven artifacts.

Every Maven repository keeps a `maven-metadata.xml` per artifact listing the
versions it holds. Resolvers read that file, either over HTTP from remote
repositories or from a local repository directory, and turn the result into
`ArtifactVersions` for the update classifier.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional

import httpx
from lxml import etree

from j_dep_updates.exceptions import InvalidVersionSpecificationError, MetadataRetrievalError
from j_dep_updates.models import Coordinate, Dependency
from j_dep_updates.versioning import ArtifactVersions, parse_version_spec


logger = logging.getLogger(__name__)

MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2"
DEFAULT_LOCAL_REPOSITORY = Path.home() / ".m2" / "repository"
METADATA_FILE = "maven-metadata.xml"
USER_AGENT = "j-dep-updates/0.1.0"

_VERSIONS_XPATH = (
    "/*[local-name()='metadata']/*[local-name()='versioning']"
    "/*[local-name()='versions']/*[local-name()='version']"
)


def artifact_directory(coordinate: Coordinate) -> str:
    """Repository-relative directory of an artifact, e.g. `org/slf4j/slf4j-api`."""
    return f"{coordinate.group_id.replace('.', '/')}/{coordinate.artifact_id}"


def parse_metadata(content: bytes, source: str) -> list[str]:
    """Extract `<versioning><versions><version>` values from maven-metadata.xml.

    Raises:
        MetadataRetrievalError: If the document is not well-formed XML.
    """
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise MetadataRetrievalError(f"Malformed {METADATA_FILE} from {source}") from exc

    versions: list[str] = []
    for node in root.xpath(_VERSIONS_XPATH):
        text = (node.text or "").strip()
        if text:
            versions.append(text)
    return versions


class ArtifactResolver(ABC):
    """Turns dependencies into the versions known for them."""

    @abstractmethod
    def fetch_versions(
        self, coordinate: Coordinate, use_plugin_repositories: bool = False
    ) -> list[str]:
        """Return every version known for `coordinate`, in any order."""

    def lookup_updates(
        self, dependencies: Iterable[Dependency], use_plugin_repositories: bool = False
    ) -> dict[Dependency, ArtifactVersions]:
        """Look up the available versions of each dependency.

        Raises:
            InvalidVersionSpecificationError: If a dependency's version is
                missing or malformed.
            MetadataRetrievalError: If version metadata cannot be read.

        Returns:
            Mapping in the order of `dependencies`.
        """
        updates: dict[Dependency, ArtifactVersions] = {}
        for dep in dependencies:
            try:
                current = parse_version_spec(dep.version)
            except InvalidVersionSpecificationError as exc:
                raise InvalidVersionSpecificationError(f"{dep.label()}: {exc}") from exc
            versions = self.fetch_versions(dep.coordinate, use_plugin_repositories)
            updates[dep] = ArtifactVersions(dep, current, versions)
        return updates


class RemoteRepositoryResolver(ArtifactResolver):
    """Reads maven-metadata.xml from HTTP repositories.

    Use it as a context manager to share one HTTP client across lookups;
    `lookup_updates` opens a client of its own otherwise.
    """

    def __init__(
        self,
        repositories: Sequence[str] = (MAVEN_CENTRAL,),
        plugin_repositories: Sequence[str] | None = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.repositories = [r.rstrip("/") for r in repositories]
        self.plugin_repositories = [r.rstrip("/") for r in (plugin_repositories or self.repositories)]
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.Client] = None

    def __enter__(self) -> RemoteRepositoryResolver:
        self.client = httpx.Client(
            timeout=self.timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=self.transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None

    def lookup_updates(
        self, dependencies: Iterable[Dependency], use_plugin_repositories: bool = False
    ) -> dict[Dependency, ArtifactVersions]:
        if self.client is None:
            with self:
                return super().lookup_updates(dependencies, use_plugin_repositories)
        return super().lookup_updates(dependencies, use_plugin_repositories)

    def fetch_versions(
        self, coordinate: Coordinate, use_plugin_repositories: bool = False
    ) -> list[str]:
        if self.client is None:
            raise RuntimeError("HTTP client not initialized - use within the resolver context")

        repositories = self.plugin_repositories if use_plugin_repositories else self.repositories
        versions: list[str] = []
        for repository in repositories:
            url = f"{repository}/{artifact_directory(coordinate)}/{METADATA_FILE}"
            logger.debug("Fetching %s", url)
            try:
                response = self.client.get(url)
                if response.status_code == 404:
                    logger.info("No metadata for %s in %s", coordinate.versionless_key(), repository)
                    continue
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise MetadataRetrievalError(
                    f"Unable to retrieve metadata for {coordinate.versionless_key()} from {url}: {exc}"
                ) from exc
            versions.extend(parse_metadata(response.content, url))
        return versions


class LocalRepositoryResolver(ArtifactResolver):
    """Reads versions from a local Maven repository (`~/.m2/repository`)."""

    def __init__(self, root: Path = DEFAULT_LOCAL_REPOSITORY) -> None:
        self.root = root

    def fetch_versions(
        self, coordinate: Coordinate, use_plugin_repositories: bool = False
    ) -> list[str]:
        directory = self.root / artifact_directory(coordinate)
        if not directory.is_dir():
            logger.info("No local metadata for %s", coordinate.versionless_key())
            return []

        versions: list[str] = []
        metadata_files = sorted(directory.glob("maven-metadata*.xml"))
        for path in metadata_files:
            try:
                content = path.read_bytes()
            except OSError as exc:
                raise MetadataRetrievalError(f"Unable to read {path}") from exc
            versions.extend(parse_metadata(content, str(path)))

        if not metadata_files:
            versions = [p.name for p in sorted(directory.iterdir()) if p.is_dir()]
        return versions
