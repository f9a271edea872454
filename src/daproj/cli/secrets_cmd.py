"""Secrets command: publish a portfolio profile as GitHub repository secrets."""

from __future__ import annotations

from typing import Optional

import click
from rich.panel import Panel

from .. import DAPROJ_HOME
from ..models import Config, Profile, generate_api_key
from ._common import console, fail, profile_store, profiles_table


def _new_profile(config: Config, portfolio: Optional[str]) -> Profile:
    from .prompts import ask

    default_name = "main" if not config.profiles else f"profile-{len(config.profiles) + 1}"
    name = ask("Profile name (e.g., 'main', 'personal', 'work')", default_name)
    url = ask("Portfolio API URL", portfolio or "https://your-portfolio.com")
    api_key = ask("Portfolio API Key (leave empty to generate one)")

    if not api_key:
        api_key = generate_api_key()
        console.print(Panel(
            f"[bold]{api_key}[/]\n\n"
            "[yellow]IMPORTANT: save this key![/]\n"
            "Add it to your portfolio as an environment variable:\n"
            f"  PORTFOLIO_API_KEY={api_key}\n\n"
            "It is also saved locally and reused for all your projects.",
            title="Generated API Key",
            border_style="yellow",
        ))
        ask("Press Enter to continue and set the secrets in GitHub...")

    return Profile(name=name, portfolio_url=url, api_key=api_key)


def _pick_profile(config: Config) -> Optional[Profile]:
    from .prompts import choose_from_menu

    console.print(profiles_table(config, title="Saved Profiles"))
    options = [f"{p.name} ({p.portfolio_url})" for p in config.profiles]
    options.append("Create new profile")
    idx = choose_from_menu("Select a profile or create new:", options)
    if idx < len(config.profiles):
        return config.profiles[idx]
    return None


def register_secrets_commands(main: click.Group) -> None:
    """Register the secrets command."""

    @main.command("secrets")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    @click.option("--profile", "-p", "profile_name", default=None, help="Use this saved profile.")
    @click.option("--portfolio", default=None, help="Default portfolio API URL for a new profile.")
    @click.option("--repo", "-R", default=None, help="Target repository (OWNER/REPO). Defaults to the current one.")
    @click.option("--yes", "-y", is_flag=True, help="Overwrite existing secrets without asking.")
    def secrets(home: str, profile_name: str, portfolio: str, repo: str, yes: bool):
        """Configure PORTFOLIO_API_URL and PORTFOLIO_API_KEY secrets.

        Pick a saved profile (or create one) and store it as secrets of
        the current GitHub repository. Requires the GitHub CLI.

        Examples:

            da-proj secrets

            da-proj secrets --profile work --yes
        """
        from ..github import (
            INSTALL_HINT,
            SECRET_KEY,
            SECRET_URL,
            GitHubCLIError,
            ensure_ready,
            get_existing_secrets,
            set_secret,
        )
        from ..profiles import ParseError
        from .prompts import confirm

        try:
            ensure_ready()
        except GitHubCLIError as exc:
            console.print(f"[bold red]✗[/] {exc}\n\n{INSTALL_HINT}")
            raise SystemExit(1)
        console.print("  [blue]ℹ[/] GitHub CLI is ready!\n")

        existing = get_existing_secrets(repo)
        if existing.any:
            console.print("  [yellow]Found existing secrets in this repository:[/]")
            if existing.url:
                console.print(f"    [yellow]✓[/] {SECRET_URL}")
            if existing.key:
                console.print(f"    [yellow]✓[/] {SECRET_KEY}")
            if not yes and not confirm("Do you want to overwrite them?", default=False):
                console.print("  Keeping existing secrets. No changes made.")
                return

        store = profile_store(home)
        try:
            config = store.load()
        except ParseError as exc:
            fail(str(exc), "da-proj sync pull")

        selected: Optional[Profile] = None
        if profile_name:
            selected = config.get(profile_name)
            if selected is None:
                fail(f"No profile named '{profile_name}'.", "da-proj profiles list")
        elif config.profiles:
            selected = _pick_profile(config)

        if selected is None:
            selected = _new_profile(config, portfolio)
            store.upsert(selected)
            console.print(f"  [green]✓[/] Profile '{selected.name}' saved in {store.path}")
        else:
            console.print(f"  [blue]ℹ[/] Using profile: [cyan]{selected.name}[/]")

        try:
            set_secret(SECRET_URL, selected.portfolio_url, repo)
            console.print(f"  [green]✓[/] {'Updated' if existing.url else 'Set'} {SECRET_URL}")
            set_secret(SECRET_KEY, selected.api_key, repo)
            console.print(f"  [green]✓[/] {'Updated' if existing.key else 'Set'} {SECRET_KEY}")
        except GitHubCLIError as exc:
            console.print(f"[bold red]✗[/] Failed to set secrets: {exc}")
            console.print(
                "\n  [yellow]You can set them manually:[/]\n"
                "  Settings > Secrets and variables > Actions > New repository secret\n"
                f"    {SECRET_URL} = {selected.portfolio_url}\n"
                f"    {SECRET_KEY} = (the key of profile '{selected.name}')\n"
            )
            raise SystemExit(1)

        console.print(Panel(
            f"[bold green]Secrets configured[/] using profile [cyan]{selected.name}[/]\n\n"
            "Next: commit and push, and the workflow will sync to your portfolio.",
            title="Done",
            border_style="green",
        ))
