"""Pytest configuration and fixtures for j-dep-updates tests."""
from __future__ import annotations

import os

import pytest

from j_dep_updates.models import Coordinate
from j_dep_updates.resolver import ArtifactResolver


class StaticResolver(ArtifactResolver):
    """Resolver answering from a `groupId:artifactId -> versions` mapping."""

    def __init__(self, versions: dict[str, list[str]]) -> None:
        self.versions = versions
        self.calls: list[str] = []

    def fetch_versions(self, coordinate: Coordinate, use_plugin_repositories: bool = False) -> list[str]:
        key = coordinate.versionless_key()
        self.calls.append(key)
        return list(self.versions.get(key, []))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Keep JDEP_* variables of the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("JDEP_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def make_resolver():
    return StaticResolver
