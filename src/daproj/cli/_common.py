"""Shared utilities for all CLI command modules.

Provides the Rich console instance, home-directory helpers, and the
wiring that builds a ProfileStore and SyncEngine for a command.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

from rich.console import Console
from rich.table import Table

from .. import DAPROJ_HOME, PROFILES_FILENAME, SYNC_SETTINGS_FILENAME, __version__
from ..models import Config
from ..profiles import ProfileStore
from ..sync.engine import SyncEngine
from ..sync.models import MergePolicy, SyncDirection, SyncSettings
from ..sync.settings import SettingsFile

console = Console()
logger = logging.getLogger("daproj.cli")

POLICY_CHOICES = ["replace", "merge", "keep", "remote-priority", "local-priority", "cancel"]


def home_path(home: str) -> Path:
    return Path(home).expanduser()


def profile_store(home: str) -> ProfileStore:
    return ProfileStore(home_path(home) / PROFILES_FILENAME)


def settings_file(home: str) -> SettingsFile:
    return SettingsFile(home_path(home) / SYNC_SETTINGS_FILENAME)


def fail(message: str, suggestion: Optional[str] = None) -> NoReturn:
    """Print an error with an optional next command and exit 1."""
    console.print(f"[bold red]✗[/] {message}")
    if suggestion:
        console.print(f"\n  Run: [cyan]{suggestion}[/]\n")
    raise SystemExit(1)


def require_settings(home: str) -> SyncSettings:
    """Load sync settings or exit with setup guidance."""
    settings = settings_file(home).load()
    if settings is None:
        fail("GitHub sync not configured.", "da-proj sync setup")
    return settings


def build_engine(home: str, settings: Optional[SyncSettings] = None) -> SyncEngine:
    """Wire a SyncEngine for the configured remote."""
    from ..github import auth_token
    from ..sync.transport import create_transport

    settings = settings or require_settings(home)
    try:
        transport = create_transport(settings, token_provider=auth_token)
    except ValueError as exc:
        fail(f"Sync settings are incomplete: {exc}", "da-proj sync setup --force")
    return SyncEngine(profile_store(home), transport, remote_key=settings.config_file)


def resolve_policy_option(value: Optional[str], direction: SyncDirection) -> Optional[MergePolicy]:
    """Map a --policy value to a MergePolicy.

    Plain ``merge`` means "the incoming side wins": remote on pull,
    local on push, the file on import.
    """
    if value is None:
        return None
    if value == "merge":
        if direction == SyncDirection.PULL:
            return MergePolicy.MERGE_REMOTE_PRIORITY
        return MergePolicy.MERGE_LOCAL_PRIORITY
    return MergePolicy(value)


def profiles_table(config: Config, title: Optional[str] = None) -> Table:
    """Profiles as a Rich table; API keys are always masked."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="bold cyan")
    table.add_column("Portfolio URL")
    table.add_column("API Key", style="dim")
    for idx, profile in enumerate(config.profiles, start=1):
        table.add_row(str(idx), profile.name, profile.portfolio_url, profile.masked_key)
    return table


def print_names(label: str, names: list[str]) -> None:
    console.print(f"[bold]{label}:[/] {len(names)} profile(s)")
    for name in names:
        console.print(f"  • {name}")


def version_line() -> str:
    return f"[dim]da-proj v{__version__} | Home: {home_path(DAPROJ_HOME)}[/]"
