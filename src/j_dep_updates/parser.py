"""Parse Maven pom.xml files using lxml."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping

from lxml import etree

from j_dep_updates.exceptions import PomModelError, PomNotFoundError, PomParseError
from j_dep_updates.models import DEFAULT_TYPE, GAV, Coordinate, Dependency, MavenProject


logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

MAX_PARENT_DEPTH = 16

_PROJECT = "/*[local-name()='project']"
_PARENT = f"{_PROJECT}/*[local-name()='parent']"


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Get text of the first matching element using namespace-agnostic XPath.

    Args:
        node: Root element to query under.
        xpath_expr: XPath expression (should use local-name()).

    Returns:
        Text content if found and non-empty, otherwise None.
    """
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        text = (first.text or "").strip()
        return text or None
    if isinstance(first, str):
        text = first.strip()
        return text or None
    return None


def _bool_text(value: str | None) -> bool | None:
    """Convert Maven boolean-ish text to bool.

    Args:
        value: String like 'true'/'false' or None.

    Returns:
        True/False for recognized values, otherwise None.
    """
    if value is None:
        return None
    v = value.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    return None


def _parse_xml(path: Path) -> etree._Element:
    """Parse an XML file and return its root element.

    Args:
        path: Path to the pom.xml file.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If XML cannot be parsed.

    Returns:
        Root XML element.
    """
    if not path.exists():
        raise PomNotFoundError(f"pom.xml not found: {path}")
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        tree = etree.parse(str(path), parser=parser)
        return tree.getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise PomParseError(f"Failed to parse pom.xml: {path}") from exc


def _resolve_placeholders(value: str, props: Mapping[str, str]) -> str:
    """Resolve ${...} placeholders using provided properties.

    Unknown placeholders are preserved as-is.
    """
    current = value
    for _ in range(5):
        changed = False

        def _sub(m: re.Match[str]) -> str:
            nonlocal changed
            key = m.group(1)
            replacement = props.get(key)
            if replacement:
                changed = True
                return replacement
            return m.group(0)

        nxt = _PLACEHOLDER_RE.sub(_sub, current)
        current = nxt
        if not changed:
            break
    return current


def _resolve(value: str | None, props: Mapping[str, str]) -> str | None:
    if value is None:
        return None
    resolved = _resolve_placeholders(value, props).strip()
    if _PLACEHOLDER_RE.search(resolved):
        logger.warning("Unresolved property in %r", value)
    return resolved or None


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    nodes = root.xpath(f"{_PROJECT}/*[local-name()='properties']/*")
    for n in nodes:
        if not isinstance(n, etree._Element):
            continue
        key = etree.QName(n).localname
        val = (n.text or "").strip()
        if key and val:
            props[key] = val
    return props


def _parse_dependencies(root: etree._Element, xpath_expr: str) -> list[Dependency]:
    """Read dependency entries exactly as written, placeholders included."""
    deps: list[Dependency] = []
    for dep in root.xpath(xpath_expr):
        group_id = _text_first(dep, "./*[local-name()='groupId']")
        artifact_id = _text_first(dep, "./*[local-name()='artifactId']")
        if group_id is None or artifact_id is None:
            continue

        deps.append(
            Dependency(
                coordinate=Coordinate(
                    group_id=group_id,
                    artifact_id=artifact_id,
                    type=_text_first(dep, "./*[local-name()='type']") or DEFAULT_TYPE,
                    classifier=_text_first(dep, "./*[local-name()='classifier']"),
                ),
                version=_text_first(dep, "./*[local-name()='version']"),
                scope=_text_first(dep, "./*[local-name()='scope']"),
                optional=_bool_text(_text_first(dep, "./*[local-name()='optional']")),
            )
        )
    return deps


def _interpolate(dep: Dependency, props: Mapping[str, str]) -> Dependency:
    c = dep.coordinate
    return Dependency(
        coordinate=Coordinate(
            group_id=_resolve(c.group_id, props) or c.group_id,
            artifact_id=_resolve(c.artifact_id, props) or c.artifact_id,
            type=_resolve(c.type, props) or DEFAULT_TYPE,
            classifier=_resolve(c.classifier, props),
        ),
        version=_resolve(dep.version, props),
        scope=_resolve(dep.scope, props),
        optional=dep.optional,
    )


def _inherited_management(model: MavenProject, props: Mapping[str, str]) -> list[Dependency]:
    """Interpolate the ancestors' dependencyManagement with the child's properties.

    Properties are resolved after inheritance, so a property the child
    redefines also changes a version its parent manages through it.
    """
    merged: dict[tuple[str, str, str, str], Dependency] = {}
    for raw in model.ancestor_dependency_management():
        dep = _interpolate(raw, props)
        c = dep.coordinate
        merged.setdefault((c.group_id, c.artifact_id, c.type, c.classifier or ""), dep)
    return list(merged.values())


def _parent_pom_path(root: etree._Element, pom_path: Path) -> Path | None:
    """Locate the parent POM on disk from <relativePath> (default ../pom.xml)."""
    nodes = root.xpath(f"{_PARENT}/*[local-name()='relativePath']")
    if nodes:
        relative = (nodes[0].text or "").strip()
        if not relative:
            return None
    else:
        relative = "../pom.xml"

    candidate = (pom_path.parent / relative).resolve()
    if candidate.is_dir():
        candidate = candidate / "pom.xml"
    return candidate if candidate.is_file() else None


def _load_parent(
    root: etree._Element, pom_path: Path, parent_gav: GAV, seen: tuple[Path, ...]
) -> MavenProject | None:
    candidate = _parent_pom_path(root, pom_path)
    if candidate is None:
        logger.debug("Parent POM %s not found on disk", parent_gav.compact())
        return None
    if candidate in seen:
        raise PomModelError(f"Parent cycle detected at {candidate}")
    if len(seen) >= MAX_PARENT_DEPTH:
        raise PomModelError(f"Parent chain deeper than {MAX_PARENT_DEPTH}: {pom_path}")

    parent = _parse_project(candidate, seen)
    if (
        parent.project.group_id != parent_gav.group_id
        or parent.project.artifact_id != parent_gav.artifact_id
    ):
        logger.debug(
            "%s is not the declared parent %s, ignoring it", candidate, parent_gav.compact()
        )
        return None
    return parent


def _managed_version(dep: Dependency, managed: list[Dependency]) -> Dependency:
    c = dep.coordinate
    for m in managed:
        if m.version is not None and m.coordinate == c:
            update: dict[str, object] = {"version": m.version}
            if dep.scope is None and m.scope is not None:
                update["scope"] = m.scope
            return dep.model_copy(update=update)
    return dep


def _parse_project(pom_path: Path, seen: tuple[Path, ...]) -> MavenProject:
    root = _parse_xml(pom_path)

    raw_group_id = _text_first(root, f"{_PROJECT}/*[local-name()='groupId']")
    raw_artifact_id = _text_first(root, f"{_PROJECT}/*[local-name()='artifactId']")
    raw_version = _text_first(root, f"{_PROJECT}/*[local-name()='version']")

    parent_group_id = _text_first(root, f"{_PARENT}/*[local-name()='groupId']")
    parent_artifact_id = _text_first(root, f"{_PARENT}/*[local-name()='artifactId']")
    parent_version = _text_first(root, f"{_PARENT}/*[local-name()='version']")

    if raw_artifact_id is None:
        raise PomModelError(f"Missing required <artifactId> in {pom_path}")

    raw_group_id = raw_group_id or parent_group_id
    raw_version = raw_version or parent_version

    if raw_group_id is None:
        raise PomModelError(f"Missing required <groupId> (or parent <groupId>) in {pom_path}")

    parent_gav: GAV | None = None
    parent: MavenProject | None = None
    if parent_group_id is not None and parent_artifact_id is not None:
        parent_gav = GAV(
            group_id=parent_group_id, artifact_id=parent_artifact_id, version=parent_version
        )
        parent = _load_parent(root, pom_path, parent_gav, seen + (pom_path,))

    inherited_props = dict(parent.properties) if parent is not None else {}
    props = {**inherited_props, **_parse_properties(root)}
    builtins: dict[str, str] = {
        "project.groupId": raw_group_id,
        "project.artifactId": raw_artifact_id,
        "pom.groupId": raw_group_id,
        "pom.artifactId": raw_artifact_id,
        "groupId": raw_group_id,
        "artifactId": raw_artifact_id,
    }
    if raw_version is not None:
        builtins.update(
            {"project.version": raw_version, "pom.version": raw_version, "version": raw_version}
        )
    if parent_gav is not None and parent_gav.version is not None:
        builtins["project.parent.version"] = parent_gav.version
    merged_props = {**props, **builtins}

    project_gav = GAV(
        group_id=_resolve_placeholders(raw_group_id, merged_props),
        artifact_id=raw_artifact_id,
        version=_resolve(raw_version, merged_props),
    )

    management_nodes = root.xpath(f"{_PROJECT}/*[local-name()='dependencyManagement']")
    declared_management: list[Dependency] | None = None
    dependency_management: list[Dependency] | None = None
    if management_nodes:
        declared_management = _parse_dependencies(
            root,
            f"{_PROJECT}/*[local-name()='dependencyManagement']"
            "/*[local-name()='dependencies']/*[local-name()='dependency']",
        )
        dependency_management = [_interpolate(d, merged_props) for d in declared_management]

    model = MavenProject(
        project=project_gav,
        path=pom_path,
        parent_gav=parent_gav,
        parent=parent,
        properties=props,
        dependency_management=dependency_management,
        declared_dependency_management=declared_management,
    )
    inherited = _inherited_management(model, merged_props)

    managed = (dependency_management or []) + inherited
    dependencies = [
        dep if dep.version is not None else _managed_version(dep, managed)
        for dep in (
            _interpolate(raw, merged_props)
            for raw in _parse_dependencies(
                root, f"{_PROJECT}/*[local-name()='dependencies']/*[local-name()='dependency']"
            )
        )
    ]
    return model.model_copy(
        update={"dependencies": dependencies, "inherited_dependency_management": inherited}
    )


def parse_pom(path: str | Path) -> MavenProject:
    """Parse a Maven pom.xml into a project model with its parent chain.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or without XML namespaces.
        - Property placeholders like `${...}` are resolved from the project's and its
          parents' properties; unresolved placeholders are kept as written.
        - Inherited dependencyManagement entries are resolved with the child's properties,
          so a child can change a managed version by redefining its property.
        - The parent POM is read from `<relativePath>` (default `../pom.xml`) when it exists.
        - Direct dependencies without a version take it from dependencyManagement.

    Args:
        path: Path to a pom.xml.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If the XML is malformed.
        PomModelError: If required fields are missing or the parent chain is invalid.

    Returns:
        A `MavenProject`.
    """
    return _parse_project(Path(path).resolve(), ())
