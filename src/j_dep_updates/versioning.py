"""Maven version ordering, version ranges and update lookups.

Ordering follows Maven's `ComparableVersion`: a version is split into a tree
of integer, qualifier and list items which are compared item by item.
Ranges follow the `VersionRange` syntax used in pom.xml (`[1.0,2.0)`,
`(,1.0],[1.2,)`, `[1.5]`).
"""

from __future__ import annotations

import enum
import functools
import itertools
import re
from collections.abc import Iterable
from dataclasses import dataclass

from j_dep_updates.exceptions import InvalidVersionSpecificationError
from j_dep_updates.models import Dependency


_QUALIFIERS = ("alpha", "beta", "milestone", "rc", "snapshot", "", "sp")
_ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
_SHORT_QUALIFIERS = {"a": "alpha", "b": "beta", "m": "milestone"}
_RELEASE_INDEX = str(_QUALIFIERS.index(""))

_SEGMENTS_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_TIMESTAMP_SNAPSHOT_RE = re.compile(r"^.*-\d{8}\.\d{6}-\d+$")

SNAPSHOT_SUFFIX = "SNAPSHOT"


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)


def _comparable_qualifier(qualifier: str) -> str:
    try:
        return str(_QUALIFIERS.index(qualifier))
    except ValueError:
        # Unknown qualifiers sort after all known ones, lexically among themselves.
        return f"{len(_QUALIFIERS)}-{qualifier}"


class _IntItem:
    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value

    def is_null(self) -> bool:
        return self.value == 0

    def compare(self, other: _Item | None) -> int:
        if other is None:
            return 0 if self.value == 0 else 1
        if isinstance(other, _IntItem):
            return _cmp(self.value, other.value)
        return 1

    def __str__(self) -> str:
        return str(self.value)


class _StringItem:
    __slots__ = ("value",)

    def __init__(self, value: str, followed_by_digit: bool) -> None:
        if followed_by_digit and len(value) == 1:
            value = _SHORT_QUALIFIERS.get(value, value)
        self.value = _ALIASES.get(value, value)

    def is_null(self) -> bool:
        return _comparable_qualifier(self.value) == _RELEASE_INDEX

    def compare(self, other: _Item | None) -> int:
        if other is None:
            return _cmp(_comparable_qualifier(self.value), _RELEASE_INDEX)
        if isinstance(other, _StringItem):
            return _cmp(_comparable_qualifier(self.value), _comparable_qualifier(other.value))
        return -1

    def __str__(self) -> str:
        return self.value


class _ListItem(list):
    def is_null(self) -> bool:
        return len(self) == 0

    def normalize(self) -> None:
        for i in range(len(self) - 1, -1, -1):
            item = self[i]
            if item.is_null():
                del self[i]
            elif not isinstance(item, _ListItem):
                break

    def compare(self, other: _Item | None) -> int:
        if other is None:
            if not self:
                return 0
            return self[0].compare(None)
        if isinstance(other, _IntItem):
            return -1
        if isinstance(other, _StringItem):
            return 1
        for left, right in itertools.zip_longest(self, other):
            if left is None:
                result = 0 if right is None else -right.compare(None)
            else:
                result = left.compare(right)
            if result:
                return result
        return 0

    def __str__(self) -> str:
        out: list[str] = []
        for item in self:
            if out:
                out.append("-" if isinstance(item, _ListItem) else ".")
            out.append(str(item))
        return "".join(out)


_Item = _IntItem | _StringItem | _ListItem


def _parse_item(is_digit: bool, text: str) -> _IntItem | _StringItem:
    if is_digit:
        return _IntItem(int(text))
    return _StringItem(text, False)


def _parse(version: str) -> _ListItem:
    version = version.lower()
    root = current = _ListItem()
    stack = [current]
    is_digit = False
    start = 0

    def _descend() -> None:
        nonlocal current
        nested = _ListItem()
        current.append(nested)
        current = nested
        stack.append(nested)

    for i, char in enumerate(version):
        if char in ".-":
            current.append(_IntItem(0) if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
            if char == "-":
                _descend()
        elif "0" <= char <= "9":
            if not is_digit and i > start:
                current.append(_StringItem(version[start:i], True))
                start = i
                _descend()
            is_digit = True
        else:
            if is_digit and i > start:
                current.append(_parse_item(True, version[start:i]))
                start = i
                _descend()
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        stack.pop().normalize()
    return root


@functools.total_ordering
class ArtifactVersion:
    """A Maven version with Maven ordering semantics.

    `str()` returns the version exactly as written; equality and hashing use
    the canonical form, so `1.0`, `1.0.0` and `1-ga` are equal.
    """

    __slots__ = ("_value", "_items", "_canonical", "segments")

    def __init__(self, version: str) -> None:
        self._value = version
        self._items = _parse(version)
        self._canonical = str(self._items)
        match = _SEGMENTS_RE.match(version)
        if match:
            self.segments = tuple(int(g or 0) for g in match.groups())
        else:
            self.segments = (0, 0, 0)

    @property
    def major(self) -> int:
        return self.segments[0]

    @property
    def minor(self) -> int:
        return self.segments[1]

    @property
    def incremental(self) -> int:
        return self.segments[2]

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"ArtifactVersion({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return self._items.compare(other._items) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return self._items.compare(other._items) < 0

    def __hash__(self) -> int:
        return hash(self._canonical)


def is_snapshot(version: str | ArtifactVersion) -> bool:
    """Return True for versions ending in SNAPSHOT (any case) and timestamped snapshots."""
    text = str(version)
    return text.upper().endswith(SNAPSHOT_SUFFIX) or bool(_TIMESTAMP_SNAPSHOT_RE.match(text))


@dataclass(frozen=True)
class Restriction:
    """One bounded interval of a version range. A `None` bound is open."""

    lower: ArtifactVersion | None
    lower_inclusive: bool
    upper: ArtifactVersion | None
    upper_inclusive: bool

    def contains(self, version: ArtifactVersion) -> bool:
        if self.lower is not None:
            if version < self.lower or (version == self.lower and not self.lower_inclusive):
                return False
        if self.upper is not None:
            if version > self.upper or (version == self.upper and not self.upper_inclusive):
                return False
        return True

    def __str__(self) -> str:
        # An exact version `[1.5]` renders with both bounds: `[1.5,1.5]`.
        return "".join(
            [
                "[" if self.lower_inclusive else "(",
                str(self.lower) if self.lower is not None else "",
                ",",
                str(self.upper) if self.upper is not None else "",
                "]" if self.upper_inclusive else ")",
            ]
        )


@dataclass(frozen=True)
class FixedVersion:
    """A dependency declared with a single (soft) version."""

    version: ArtifactVersion

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class VersionRange:
    """A dependency declared with one or more version restrictions."""

    restrictions: tuple[Restriction, ...]

    def contains(self, version: ArtifactVersion) -> bool:
        return any(r.contains(version) for r in self.restrictions)

    def __str__(self) -> str:
        return ",".join(str(r) for r in self.restrictions)


CurrentVersion = FixedVersion | VersionRange


def _first_closing(text: str) -> int:
    indexes = [i for i in (text.find("]"), text.find(")")) if i >= 0]
    return min(indexes) if indexes else -1


def _parse_restriction(text: str, spec: str) -> Restriction:
    lower_inclusive = text.startswith("[")
    upper_inclusive = text.endswith("]")
    inner = text[1:-1].strip()

    index = inner.find(",")
    if index < 0:
        if not lower_inclusive or not upper_inclusive:
            raise InvalidVersionSpecificationError(
                f"Single version must be surrounded by []: {spec}"
            )
        if not inner:
            raise InvalidVersionSpecificationError(f"Range cannot be empty: {spec}")
        version = ArtifactVersion(inner)
        return Restriction(version, True, version, True)

    lower_text = inner[:index].strip()
    upper_text = inner[index + 1 :].strip()
    if lower_text == upper_text:
        raise InvalidVersionSpecificationError(
            f"Range cannot have identical boundaries: {spec}"
        )
    lower = ArtifactVersion(lower_text) if lower_text else None
    upper = ArtifactVersion(upper_text) if upper_text else None
    if lower is not None and upper is not None and upper < lower:
        raise InvalidVersionSpecificationError(f"Range defies version ordering: {spec}")
    return Restriction(lower, lower_inclusive, upper, upper_inclusive)


def parse_version_spec(spec: str | None) -> CurrentVersion:
    """Parse a pom.xml version element into a fixed version or a range.

    Raises:
        InvalidVersionSpecificationError: If the spec is missing or malformed.
    """
    if spec is None or not spec.strip():
        raise InvalidVersionSpecificationError("Missing version specification")

    process = spec.strip()
    restrictions: list[Restriction] = []
    previous_upper: ArtifactVersion | None = None

    while process.startswith(("[", "(")):
        index = _first_closing(process)
        if index < 0:
            raise InvalidVersionSpecificationError(f"Unbounded range: {spec}")

        restriction = _parse_restriction(process[: index + 1], spec)
        if restrictions and (
            previous_upper is None
            or restriction.lower is None
            or restriction.lower < previous_upper
        ):
            raise InvalidVersionSpecificationError(f"Ranges overlap: {spec}")
        restrictions.append(restriction)
        previous_upper = restriction.upper

        process = process[index + 1 :].strip()
        if process.startswith(","):
            process = process[1:].strip()

    if process:
        if restrictions:
            raise InvalidVersionSpecificationError(
                f"Only fully-qualified sets allowed in multiple set scenario: {spec}"
            )
        return FixedVersion(ArtifactVersion(process))
    return VersionRange(tuple(restrictions))


class UpdateScope(str, enum.Enum):
    """How far an update may move away from the current version."""

    ANY = "any"
    MAJOR = "major"
    MINOR = "minor"
    INCREMENTAL = "incremental"
    SUBINCREMENTAL = "subincremental"

    def allows(self, current: ArtifactVersion, candidate: ArtifactVersion) -> bool:
        """Return True if `candidate` keeps the segments this scope pins."""
        pinned = _PINNED_SEGMENTS[self]
        return current.segments[:pinned] == candidate.segments[:pinned]


_PINNED_SEGMENTS = {
    UpdateScope.ANY: 0,
    UpdateScope.MAJOR: 0,
    UpdateScope.MINOR: 1,
    UpdateScope.INCREMENTAL: 2,
    UpdateScope.SUBINCREMENTAL: 3,
}


class ArtifactVersions:
    """The versions known for one dependency, in ascending Maven order."""

    def __init__(
        self,
        dependency: Dependency,
        current: CurrentVersion,
        versions: Iterable[str | ArtifactVersion],
    ) -> None:
        self.dependency = dependency
        self.current = current
        unique: dict[ArtifactVersion, ArtifactVersion] = {}
        for v in versions:
            parsed = v if isinstance(v, ArtifactVersion) else ArtifactVersion(v)
            unique.setdefault(parsed, parsed)
        self.versions: list[ArtifactVersion] = sorted(unique)

    def _candidates(self, allow_snapshots: bool) -> list[ArtifactVersion]:
        if allow_snapshots:
            return self.versions
        return [v for v in self.versions if not is_snapshot(v)]

    def newest_version(
        self, version_range: VersionRange, allow_snapshots: bool
    ) -> ArtifactVersion | None:
        """Return the newest known version contained in `version_range`."""
        for version in reversed(self._candidates(allow_snapshots)):
            if version_range.contains(version):
                return version
        return None

    def newest_update(
        self, current: ArtifactVersion, scope: UpdateScope, allow_snapshots: bool
    ) -> ArtifactVersion | None:
        """Return the newest known version above `current` that `scope` allows."""
        for version in reversed(self._candidates(allow_snapshots)):
            if version <= current:
                return None
            if scope.allows(current, version):
                return version
        return None

    def __repr__(self) -> str:
        return (
            f"ArtifactVersions({self.dependency.coordinate.versionless_key()!r}, "
            f"current={str(self.current)!r}, versions={[str(v) for v in self.versions]!r})"
        )
