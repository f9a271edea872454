"""
Sync data models -- settings, policies, and reconciliation reports.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, computed_field

DEFAULT_CONFIG_FILE = "da-proj-config.json"
DEFAULT_REPO_NAME = "da-proj-secrets"


class SyncBackendType(str, Enum):
    """Where the shared configuration lives."""

    GITHUB = "github"
    LOCAL = "local"


class SyncDirection(str, Enum):
    """Which side a reconciliation writes to."""

    PUSH = "push"
    PULL = "pull"
    IMPORT = "import"


class SyncState(str, Enum):
    """Relationship between the local and remote documents."""

    NO_LOCAL_NO_REMOTE = "no-local-no-remote"
    LOCAL_ONLY = "local-only"
    REMOTE_ONLY = "remote-only"
    BOTH_IDENTICAL = "both-identical"
    BOTH_DIVERGENT = "both-divergent"


class MergePolicy(str, Enum):
    """How to combine two divergent configurations."""

    REPLACE = "replace"
    MERGE_REMOTE_PRIORITY = "remote-priority"
    MERGE_LOCAL_PRIORITY = "local-priority"
    KEEP_EXISTING = "keep"
    CANCEL = "cancel"


class SyncAction(str, Enum):
    """What a reconciliation actually did."""

    PUSHED = "pushed"
    PULLED = "pulled"
    MERGED = "merged"
    REPLACED = "replaced"
    KEPT = "kept"
    NOOP = "noop"
    CANCELLED = "cancelled"


class SyncSettings(BaseModel):
    """Which remote holds the shared configuration."""

    backend: SyncBackendType = SyncBackendType.GITHUB

    # GitHub
    repo_url: Optional[str] = None
    repo_name: Optional[str] = None
    repo_owner: Optional[str] = None
    branch: str = "main"
    token_env_var: Optional[str] = None

    # Local filesystem
    local_path: Optional[Path] = None

    config_file: str = DEFAULT_CONFIG_FILE

    @property
    def location(self) -> str:
        if self.backend == SyncBackendType.LOCAL:
            return str(self.local_path) if self.local_path else "(unset)"
        return self.repo_url or "(unset)"


class ReconcileReport(BaseModel):
    """Outcome of one push, pull, or import."""

    direction: SyncDirection
    state: SyncState
    action: SyncAction
    policy: Optional[MergePolicy] = None
    wrote_local: bool = False
    wrote_remote: bool = False
    profile_names: list[str] = Field(default_factory=list)
    message: str = ""
    suggestion: Optional[str] = None

    @computed_field
    @property
    def profile_count(self) -> int:
        return len(self.profile_names)

    @property
    def wrote(self) -> bool:
        return self.wrote_local or self.wrote_remote


class StatusReport(BaseModel):
    """Read-only comparison of local and remote."""

    state: SyncState
    location: str
    local_names: list[str] = Field(default_factory=list)
    remote_names: list[str] = Field(default_factory=list)
