"""
Remote blob transports -- where the shared configuration travels.

The reconciliation engine only ever calls ``fetch`` and ``store``.

GitHub: one file in a private repository, through the REST contents API.
Local: a plain directory. For USB drives, NAS mounts, synced folders.
"""

from __future__ import annotations

import base64
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

import requests

from .models import SyncBackendType, SyncSettings

logger = logging.getLogger("daproj.sync.transport")

GITHUB_API = "https://api.github.com"
REQUEST_TIMEOUT = 30

_REPO_URL_RE = re.compile(
    r"github\.com[/:](?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$"
)


class RemoteError(Exception):
    """Base class for remote transport failures."""


class NotFound(RemoteError):
    """No blob exists under the requested key."""


class TransportError(RemoteError):
    """The remote could not be reached or refused the request."""


class RemoteBlobTransport(ABC):
    """Read and write named blobs on a remote."""

    @abstractmethod
    def fetch(self, key: str) -> bytes:
        """Return the blob stored under ``key``.

        Raises:
            NotFound: If nothing is stored under ``key``.
            TransportError: On any other failure.
        """

    @abstractmethod
    def store(self, key: str, data: bytes) -> None:
        """Create or overwrite the blob at ``key``.

        Raises:
            TransportError: On failure.
        """

    @abstractmethod
    def available(self) -> bool:
        """Check if this transport is currently usable."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable transport name."""

    def describe(self) -> str:
        return self.name


def parse_repo_url(repo_url: str) -> tuple[str, str]:
    """Split a GitHub repository URL into (owner, repo).

    Accepts https and ssh forms, with or without ``.git``.

    Raises:
        ValueError: If the URL is not a GitHub repository URL.
    """
    match = _REPO_URL_RE.search(repo_url.strip())
    if not match:
        raise ValueError(f"Not a GitHub repository URL: {repo_url}")
    return match.group("owner"), match.group("repo")


class GitHubContentsTransport(RemoteBlobTransport):
    """Stores blobs as files in a GitHub repository.

    Uses ``GET``/``PUT /repos/{owner}/{repo}/contents/{path}``. File
    content travels base64-encoded; updates must quote the current blob
    sha, so ``store`` looks it up first.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str = "main",
        token: Optional[str] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self._token = token
        self._token_provider = token_provider
        self._session = session or requests.Session()

    @classmethod
    def from_settings(
        cls,
        settings: SyncSettings,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
    ) -> "GitHubContentsTransport":
        if settings.repo_owner and settings.repo_name:
            owner, repo = settings.repo_owner, settings.repo_name
        elif settings.repo_url:
            owner, repo = parse_repo_url(settings.repo_url)
        else:
            raise ValueError("No repository configured for GitHub sync")

        token = None
        if settings.token_env_var:
            token = os.environ.get(settings.token_env_var) or None
        return cls(
            owner,
            repo,
            branch=settings.branch,
            token=token,
            token_provider=token_provider,
        )

    @property
    def name(self) -> str:
        return "github"

    def describe(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"

    def _resolve_token(self) -> Optional[str]:
        if self._token:
            return self._token
        token = os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
        if not token and self._token_provider is not None:
            token = self._token_provider()
        self._token = token or None
        return self._token

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        token = self._resolve_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, key: str) -> str:
        return (
            f"{GITHUB_API}/repos/{self.owner}/{self.repo}/contents/"
            f"{key.lstrip('/')}"
        )

    def _get(self, key: str) -> dict:
        try:
            resp = self._session.get(
                self._url(key),
                headers=self._headers(),
                params={"ref": self.branch},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise TransportError(f"GitHub request failed: {exc}") from exc

        if resp.status_code == 404:
            raise NotFound(f"{key} not found in {self.owner}/{self.repo}")
        if resp.status_code >= 400:
            raise TransportError(
                f"GitHub GET {key}: {resp.status_code} {resp.text}"
            )
        try:
            body = resp.json()
        except ValueError as exc:
            raise TransportError(f"GitHub GET {key}: response is not JSON: {exc}") from exc
        if not isinstance(body, dict) or body.get("type") != "file":
            raise TransportError(f"{key} in {self.owner}/{self.repo} is not a file")
        return body

    def fetch(self, key: str) -> bytes:
        body = self._get(key)
        try:
            data = base64.b64decode(body.get("content", ""))
        except (ValueError, TypeError) as exc:
            raise TransportError(f"Could not decode {key}: {exc}") from exc
        logger.debug("Fetched %s from %s (%d bytes)", key, self.describe(), len(data))
        return data

    def store(self, key: str, data: bytes) -> None:
        try:
            sha = self._get(key).get("sha")
        except NotFound:
            sha = None

        payload = {
            "message": f"Update {key}" if sha else f"Add {key}",
            "content": base64.b64encode(data).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            payload["sha"] = sha

        try:
            resp = self._session.put(
                self._url(key),
                headers=self._headers(),
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise TransportError(f"GitHub request failed: {exc}") from exc

        if resp.status_code >= 400:
            raise TransportError(
                f"GitHub PUT {key}: {resp.status_code} {resp.text}"
            )
        logger.info("Stored %s in %s", key, self.describe())

    def available(self) -> bool:
        return self._resolve_token() is not None


class LocalDirTransport(RemoteBlobTransport):
    """Stores blobs as files in a local directory."""

    def __init__(self, root: Path):
        self.root = Path(root).expanduser()

    @property
    def name(self) -> str:
        return "local"

    def describe(self) -> str:
        return str(self.root)

    def fetch(self, key: str) -> bytes:
        path = self.root / key
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(f"{key} not found in {self.root}") from exc
        except OSError as exc:
            raise TransportError(f"Could not read {path}: {exc}") from exc

    def store(self, key: str, data: bytes) -> None:
        path = self.root / key
        tmp_path = path.parent / f".{path.name}.tmp"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            tmp_path.replace(path)
        except OSError as exc:
            raise TransportError(f"Could not write {path}: {exc}") from exc
        logger.info("Stored %s in %s", key, self.root)

    def available(self) -> bool:
        return self.root.is_dir()


def create_transport(
    settings: SyncSettings,
    token_provider: Optional[Callable[[], Optional[str]]] = None,
) -> RemoteBlobTransport:
    """Build the transport described by the sync settings.

    Args:
        settings: Persisted sync settings.
        token_provider: Fallback GitHub token lookup (e.g. ``gh auth token``).

    Returns:
        RemoteBlobTransport: Ready to use.

    Raises:
        ValueError: If the settings are incomplete for the backend.
    """
    if settings.backend == SyncBackendType.LOCAL:
        if not settings.local_path:
            raise ValueError("No local_path configured for local sync")
        return LocalDirTransport(settings.local_path)
    if settings.backend == SyncBackendType.GITHUB:
        return GitHubContentsTransport.from_settings(settings, token_provider)
    raise ValueError(f"Unsupported backend: {settings.backend}")
