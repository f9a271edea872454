"""Shared test fixtures for da-proj."""

from __future__ import annotations

from pathlib import Path

import pytest

from daproj.models import Config, Profile
from daproj.profiles import ProfileStore
from daproj.sync.transport import NotFound, RemoteBlobTransport, TransportError


class MemoryTransport(RemoteBlobTransport):
    """In-memory remote for engine tests. Counts every store call."""

    def __init__(self, blobs: dict | None = None, fail_with: Exception | None = None):
        self.blobs: dict[str, bytes] = dict(blobs or {})
        self.fail_with = fail_with
        self.store_calls: list[str] = []

    @property
    def name(self) -> str:
        return "memory"

    def describe(self) -> str:
        return "memory://test"

    def fetch(self, key: str) -> bytes:
        if self.fail_with is not None:
            raise self.fail_with
        if key not in self.blobs:
            raise NotFound(key)
        return self.blobs[key]

    def store(self, key: str, data: bytes) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.store_calls.append(key)
        self.blobs[key] = data

    def available(self) -> bool:
        return True


def make_profile(name: str, url: str | None = None, key: str | None = None) -> Profile:
    return Profile(
        name=name,
        portfolio_url=url or f"https://{name}.example.com",
        api_key=key or f"key-{name}-0123456789abcdef",
    )


def make_config(*names: str) -> Config:
    return Config(profiles=[make_profile(n) for n in names])


@pytest.fixture
def daproj_home(tmp_path: Path) -> Path:
    """Provide a temporary da-proj home directory."""
    home = tmp_path / ".da-proj"
    home.mkdir()
    return home


@pytest.fixture
def store(daproj_home: Path) -> ProfileStore:
    return ProfileStore(daproj_home / "config.json")


@pytest.fixture
def transport() -> MemoryTransport:
    return MemoryTransport()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A directory that looks like a git working tree."""
    repo = tmp_path / "project"
    (repo / ".git").mkdir(parents=True)
    return repo
