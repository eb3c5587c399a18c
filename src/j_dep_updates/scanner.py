from __future__ import annotations

from pathlib import Path


SKIPPED_DIRS = frozenset({"target", "node_modules", "build"})


def find_pom_files(root: Path) -> list[Path]:
    """Find Maven project descriptors under root.

    Build output directories (`target/`, ...) and hidden directories are
    skipped, so copies of POMs produced by a build are not reported twice.

    Args:
        root: A directory to scan recursively, or a single pom file.

    Returns:
        Sorted unique list of POM files.
    """
    if root.is_file():
        return [root]

    poms: list[Path] = []
    for p in root.rglob("pom.xml"):
        if not p.is_file():
            continue
        parts = p.relative_to(root).parts[:-1]
        if any(part in SKIPPED_DIRS or part.startswith(".") for part in parts):
            continue
        poms.append(p)
    return sorted(set(poms))
