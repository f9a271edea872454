"""
GitHub CLI helpers -- secrets, repositories, and auth via ``gh``.

Everything here shells out to the GitHub CLI. Secret values are fed
through stdin so they never appear in a process listing.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger("daproj.github")

SECRET_URL = "PORTFOLIO_API_URL"
SECRET_KEY = "PORTFOLIO_API_KEY"
GH_TIMEOUT = 60

INSTALL_HINT = """\
To install GitHub CLI:

  Windows: winget install --id GitHub.cli
  macOS:   brew install gh
  Linux:   https://github.com/cli/cli#installation

After installing, authenticate:
  gh auth login"""


class GitHubCLIError(RuntimeError):
    """The GitHub CLI is missing, not logged in, or a command failed."""


class ExistingSecrets(BaseModel):
    """Which portfolio secrets the current repository already has."""

    url: bool = False
    key: bool = False

    @property
    def any(self) -> bool:
        return self.url or self.key


class RepoInfo(BaseModel):
    """A repository as listed by ``gh repo list``."""

    name: str
    url: str
    description: Optional[str] = None


def _run_gh(args: list[str], input_text: Optional[str] = None) -> str:
    """Run a ``gh`` command and return its stdout.

    Raises:
        GitHubCLIError: If gh is missing or exits non-zero.
    """
    cmd = ["gh", *args]
    try:
        result = subprocess.run(
            cmd,
            input=input_text,
            capture_output=True,
            text=True,
            check=False,
            timeout=GH_TIMEOUT,
        )
    except FileNotFoundError as exc:
        raise GitHubCLIError("GitHub CLI (gh) is not installed.") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitHubCLIError(f"gh {args[0]} timed out after {GH_TIMEOUT}s") from exc

    if result.returncode != 0:
        logger.debug("gh %s failed: %s", " ".join(args[:2]), result.stderr.strip())
        raise GitHubCLIError(result.stderr.strip() or f"gh {' '.join(args[:2])} failed")
    return result.stdout


def check_gh_cli() -> bool:
    """Return True if the ``gh`` binary is on PATH."""
    return shutil.which("gh") is not None


def is_authenticated() -> bool:
    try:
        _run_gh(["auth", "status"])
        return True
    except GitHubCLIError:
        return False


def ensure_ready() -> None:
    """Make sure gh is installed and logged in.

    Raises:
        GitHubCLIError: With a human-readable reason.
    """
    if not check_gh_cli():
        raise GitHubCLIError("GitHub CLI (gh) is not installed.")
    if not is_authenticated():
        raise GitHubCLIError("Not authenticated with GitHub CLI. Run: gh auth login")


def auth_token() -> Optional[str]:
    """Return the token gh is logged in with, or None."""
    try:
        token = _run_gh(["auth", "token"]).strip()
    except GitHubCLIError:
        return None
    return token or None


def get_username() -> str:
    return _run_gh(["api", "user", "--jq", ".login"]).strip()


def list_secret_names(repo: Optional[str] = None) -> list[str]:
    args = ["secret", "list"]
    if repo:
        args += ["--repo", repo]
    output = _run_gh(args)
    return [line.split()[0] for line in output.splitlines() if line.strip()]


def get_existing_secrets(repo: Optional[str] = None) -> ExistingSecrets:
    """Check which portfolio secrets are already set.

    A failure to list counts as "none set".
    """
    try:
        names = list_secret_names(repo)
    except GitHubCLIError as exc:
        logger.warning("Could not list secrets: %s", exc)
        return ExistingSecrets()
    return ExistingSecrets(url=SECRET_URL in names, key=SECRET_KEY in names)


def set_secret(name: str, value: str, repo: Optional[str] = None) -> None:
    """Set a repository secret; the value is passed on stdin."""
    args = ["secret", "set", name]
    if repo:
        args += ["--repo", repo]
    _run_gh(args, input_text=value)
    logger.info("Set secret %s", name)


def create_private_repo(name: str, description: str = "da-proj configuration sync") -> str:
    """Create a private repository and return its URL."""
    output = _run_gh(["repo", "create", name, "--private", "--description", description])
    for line in reversed(output.splitlines()):
        line = line.strip()
        if line.startswith("https://"):
            return line
    return f"https://github.com/{get_username()}/{name}"


def list_private_repos(limit: int = 100) -> list[RepoInfo]:
    output = _run_gh([
        "repo", "list",
        "--visibility", "private",
        "--json", "name,url,description",
        "--limit", str(limit),
    ])
    try:
        data = json.loads(output or "[]")
    except json.JSONDecodeError as exc:
        raise GitHubCLIError(f"Unexpected output from gh repo list: {exc}") from exc
    return [RepoInfo(**item) for item in data]


def secrets_repo_readme() -> str:
    """README uploaded to a freshly created sync repository."""
    return """# da-proj secrets

Private storage for [da-proj](https://pypi.org/project/da-proj/) portfolio profiles.

**Keep this repository private.** `da-proj-config.json` holds your
portfolio API keys in plain text.

## Usage

```bash
da-proj sync push     # upload this machine's profiles
da-proj sync pull     # download profiles onto another machine
da-proj sync status   # compare local and remote
```
"""
