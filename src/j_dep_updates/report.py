"""Plain-text rendering of update results.

Lines are padded to a fixed width so versions line up on the right:

    [demo]: The following dependencies in Dependencies have newer versions:
      junit:junit ................................... 4.11 -> 4.13.2
"""

from __future__ import annotations

from collections.abc import Iterable

from j_dep_updates.models import ClassificationResult


INFO_PAD_SIZE = 72


def format_line(result: ClassificationResult, width: int = INFO_PAD_SIZE) -> list[str]:
    """Format one result as one line, or two when it does not fit `width`."""
    left = f"  {result.coordinate.versionless_key()} "
    if result.latest is None:
        right = f" {result.current}"
    else:
        right = f" {result.current} -> {result.latest}"

    if len(left) + len(right) + 3 > width:
        return [left + "...", right.rjust(width)]
    return [left.ljust(width - len(right), ".") + right]


def render_updates(
    results: Iterable[ClassificationResult],
    section: str,
    verbose: bool = False,
    project_id: str = "",
) -> list[str]:
    """Render one report section ("Dependency Management" or "Dependencies")."""
    with_updates: list[str] = []
    using_current: list[str] = []
    for result in results:
        bucket = with_updates if result.has_update else using_current
        bucket.extend(format_line(result))

    lines: list[str] = []
    prefix = f"[{project_id}]: "
    if verbose and not using_current and with_updates:
        lines.append(f"{prefix}No dependencies in {section} are using the newest version.")
        lines.append("")
    elif verbose and using_current:
        lines.append(
            f"{prefix}The following dependencies in {section} are using the newest version:"
        )
        lines.extend(using_current)
        lines.append("")

    if not with_updates and using_current:
        lines.append(f"{prefix}No dependencies in {section} have newer versions.")
        lines.append("")
    elif with_updates:
        lines.append(f"{prefix}The following dependencies in {section} have newer versions:")
        lines.extend(with_updates)
        lines.append("")
    return lines
