"""Profile commands: list, add."""

from __future__ import annotations

import click

from .. import DAPROJ_HOME
from ..models import Profile, generate_api_key
from ..profiles import ParseError
from ._common import console, fail, profile_store, profiles_table


def register_profiles_commands(main: click.Group) -> None:
    """Register the profiles command group."""

    @main.group()
    def profiles():
        """Saved portfolio profiles (name, portfolio URL, API key)."""

    @profiles.command("list")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    def profiles_list(home: str):
        """Show saved profiles with masked API keys."""
        store = profile_store(home)
        try:
            config = store.load()
        except ParseError as exc:
            fail(str(exc))

        console.print(f"\n  [bold]Configuration Location:[/] {store.path}\n")
        if not config.profiles:
            console.print("  [yellow]No profiles configured.[/]")
            console.print("  Create one with: [cyan]da-proj profiles add[/]\n")
            return
        console.print(profiles_table(config, title=f"Profiles ({len(config.profiles)})"))

    @profiles.command("add")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    @click.option("--name", "-n", prompt="Profile name", help="Profile name.")
    @click.option("--url", "-u", prompt="Portfolio API URL", help="Portfolio API URL.")
    @click.option("--key", "-k", default="", help="API key (generated if omitted).")
    def profiles_add(home: str, name: str, url: str, key: str):
        """Save a profile, replacing any profile with the same name.

        Examples:

            da-proj profiles add --name work --url https://work.example.com
        """
        generated = not key
        api_key = key or generate_api_key()
        try:
            profile = Profile(name=name, portfolio_url=url, api_key=api_key)
        except ValueError as exc:
            fail(f"Invalid profile: {exc}")

        store = profile_store(home)
        try:
            config = store.upsert(profile)
        except ParseError as exc:
            fail(str(exc))

        console.print(f"  [green]✓[/] Profile [cyan]{name}[/] saved to {store.path}")
        if generated:
            console.print(f"  Generated API key: [bold]{api_key}[/]")
            console.print("  [yellow]Add it to your portfolio as PORTFOLIO_API_KEY.[/]")
        console.print(f"  [dim]{len(config.profiles)} profile(s) total[/]")
