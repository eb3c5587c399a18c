"""Include/exclude artifact patterns.

A pattern has the form `groupId:artifactId:type:classifier:version`. Any
segment may use `*` wildcards and the version segment may be a version range
such as `[1.0,2.2)`, which is why a comma-separated list of patterns cannot
simply be split on `,`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase

from j_dep_updates.exceptions import InvalidVersionSpecificationError
from j_dep_updates.models import Dependency
from j_dep_updates.versioning import FixedVersion, VersionRange, parse_version_spec


START_RANGE_CHARS = "[("
END_RANGE_CHARS = "])"


def _find_first(text: str, chars: str, start: int = 0) -> int:
    indexes = [i for i in (text.find(c, start) for c in chars) if i >= 0]
    return min(indexes) if indexes else -1


def _next_comma_index(text: str) -> int:
    """Index of the next comma in `text` that is not inside a version range.

    Returns -1 when there is none. A range opener without a closer makes the
    rest of the text a single pattern.
    """
    offset = 0
    while True:
        rest = text[offset:]
        comma = rest.find(",")
        range_start = _find_first(rest, START_RANGE_CHARS)
        if range_start < 0 or 0 <= comma < range_start:
            return offset + comma if comma >= 0 else -1
        range_end = _find_first(rest, END_RANGE_CHARS, range_start + 1)
        if range_end < 0:
            return -1
        offset += range_end + 1


def split_patterns(raw: str | None) -> list[str]:
    """Split a comma-separated pattern list, keeping version ranges intact.

    >>> split_patterns("g:a:jar:*:[1.0,2.0),g2:a2:jar:*:3.0")
    ['g:a:jar:*:[1.0,2.0)', 'g2:a2:jar:*:3.0']
    """
    if not raw:
        return []

    patterns: list[str] = []
    rest = raw
    index = _next_comma_index(rest)
    while index >= 0:
        patterns.append(rest[:index])
        rest = rest[index + 1 :]
        index = _next_comma_index(rest)
    patterns.append(rest)
    return patterns


def _matches_version(dependency: Dependency, segment: str) -> bool:
    if not segment.startswith(tuple(START_RANGE_CHARS)):
        return fnmatchcase(dependency.version or "", segment)

    try:
        wanted = parse_version_spec(segment)
    except InvalidVersionSpecificationError:
        return False
    if dependency.version is None:
        return False
    try:
        declared = parse_version_spec(dependency.version)
    except InvalidVersionSpecificationError:
        return False

    # A bracketed segment always parses to a range.
    if isinstance(declared, FixedVersion):
        return isinstance(wanted, VersionRange) and wanted.contains(declared.version)
    return str(declared) == str(wanted)


def matches_pattern(dependency: Dependency, pattern: str) -> bool:
    """Return True if `dependency` matches a single artifact pattern.

    Empty or missing trailing segments match anything.
    """
    c = dependency.coordinate
    values = (c.group_id, c.artifact_id, c.type, c.classifier or "")
    segments = pattern.split(":", 4)

    for index, segment in enumerate(segments):
        if not segment:
            continue
        if index == 4:
            if not _matches_version(dependency, segment):
                return False
        elif not fnmatchcase(values[index], segment):
            return False
    return True


@dataclass(frozen=True)
class ArtifactMatcher:
    """Decides whether an artifact takes part in the update report.

    `includes`/`excludes` of None mean that direction has no filter.
    """

    includes: tuple[str, ...] | None = None
    excludes: tuple[str, ...] | None = None

    @classmethod
    def from_lists(
        cls,
        includes_list: str | None = None,
        excludes_list: str | None = None,
        includes: Sequence[str] | None = None,
        excludes: Sequence[str] | None = None,
    ) -> ArtifactMatcher:
        """Build a matcher; the delimited string form wins over the list form."""
        return cls(
            includes=_compile(includes_list, includes),
            excludes=_compile(excludes_list, excludes),
        )

    def is_included(self, dependency: Dependency) -> bool:
        result = True
        if self.includes is not None:
            result = any(matches_pattern(dependency, p) for p in self.includes)
        if self.excludes is not None:
            result = result and not any(matches_pattern(dependency, p) for p in self.excludes)
        return result


def _compile(delimited: str | None, patterns: Sequence[str] | None) -> tuple[str, ...] | None:
    if delimited is not None:
        return tuple(split_patterns(delimited))
    if patterns is not None:
        return tuple(patterns)
    return None
