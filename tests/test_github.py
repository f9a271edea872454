"""Tests for the GitHub CLI helpers (subprocess mocked)."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from daproj.github import (
    SECRET_KEY,
    SECRET_URL,
    GitHubCLIError,
    auth_token,
    create_private_repo,
    ensure_ready,
    get_existing_secrets,
    list_private_repos,
    set_secret,
)


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


class TestRunGh:

    @patch("daproj.github.subprocess.run", side_effect=FileNotFoundError("gh"))
    def test_missing_binary(self, mock_run):
        with pytest.raises(GitHubCLIError, match="not installed"):
            set_secret(SECRET_URL, "https://x")

    @patch("daproj.github.subprocess.run")
    def test_nonzero_exit_carries_stderr(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="HTTP 403: forbidden")
        with pytest.raises(GitHubCLIError, match="403"):
            set_secret(SECRET_URL, "https://x")

    @patch("daproj.github.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="gh", timeout=60)
        with pytest.raises(GitHubCLIError, match="timed out"):
            set_secret(SECRET_URL, "https://x")


class TestSecrets:
    """Portfolio secrets on the current repository."""

    @patch("daproj.github.subprocess.run")
    def test_set_secret_passes_value_on_stdin(self, mock_run):
        mock_run.return_value = _completed()

        set_secret(SECRET_KEY, "s3cret-value", repo="octo/app")

        cmd = mock_run.call_args.args[0]
        assert cmd == ["gh", "secret", "set", SECRET_KEY, "--repo", "octo/app"]
        assert "s3cret-value" not in cmd
        assert mock_run.call_args.kwargs["input"] == "s3cret-value"

    @patch("daproj.github.subprocess.run")
    def test_existing_secrets_detected(self, mock_run):
        mock_run.return_value = _completed(
            f"{SECRET_URL}\tUpdated 2024-01-01\nOTHER\tUpdated 2024-01-02\n"
        )
        existing = get_existing_secrets()
        assert existing.url is True
        assert existing.key is False
        assert existing.any

    @patch("daproj.github.subprocess.run")
    def test_listing_failure_means_none(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="no repo")
        existing = get_existing_secrets()
        assert not existing.any


class TestAuth:

    @patch("daproj.github.subprocess.run")
    def test_auth_token(self, mock_run):
        mock_run.return_value = _completed("gho_abc\n")
        assert auth_token() == "gho_abc"

    @patch("daproj.github.subprocess.run")
    def test_auth_token_when_logged_out(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="not logged in")
        assert auth_token() is None

    @patch("daproj.github.shutil.which", return_value=None)
    def test_ensure_ready_without_gh(self, mock_which):
        with pytest.raises(GitHubCLIError, match="not installed"):
            ensure_ready()

    @patch("daproj.github.subprocess.run")
    @patch("daproj.github.shutil.which", return_value="/usr/bin/gh")
    def test_ensure_ready_logged_out(self, mock_which, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="not logged in")
        with pytest.raises(GitHubCLIError, match="gh auth login"):
            ensure_ready()


class TestRepos:

    @patch("daproj.github.subprocess.run")
    def test_create_private_repo_reads_url(self, mock_run):
        mock_run.return_value = _completed("✓ Created repository\nhttps://github.com/octo/da-proj-secrets\n")
        url = create_private_repo("da-proj-secrets")
        assert url == "https://github.com/octo/da-proj-secrets"
        assert "--private" in mock_run.call_args.args[0]

    @patch("daproj.github.subprocess.run")
    def test_create_private_repo_falls_back_to_username(self, mock_run):
        mock_run.side_effect = [_completed("done\n"), _completed("octo\n")]
        assert create_private_repo("secrets") == "https://github.com/octo/secrets"

    @patch("daproj.github.subprocess.run")
    def test_list_private_repos(self, mock_run):
        mock_run.return_value = _completed(
            '[{"name": "da-proj-secrets", "url": "https://github.com/octo/da-proj-secrets", '
            '"description": ""}]'
        )
        repos = list_private_repos()
        assert [r.name for r in repos] == ["da-proj-secrets"]

    @patch("daproj.github.subprocess.run")
    def test_list_private_repos_bad_output(self, mock_run):
        mock_run.return_value = _completed("not json")
        with pytest.raises(GitHubCLIError):
            list_private_repos()
