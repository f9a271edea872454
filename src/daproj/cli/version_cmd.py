"""Version command: show the installed version and check for updates."""

from __future__ import annotations

import click

from ._common import console


def register_version_commands(main: click.Group) -> None:
    """Register the version command."""

    @main.command("version")
    @click.option("--no-check", is_flag=True, help="Skip the PyPI update check.")
    def version(no_check: bool):
        """Show the installed version and whether an update exists."""
        from .. import __version__
        from ..version import check_for_updates

        console.print(f"da-proj v{__version__}")
        if no_check:
            return
        info = check_for_updates()
        if info.has_update:
            console.print(
                f"[yellow]Update available![/] {info.current_version} → "
                f"[green]{info.latest_version}[/]\n"
                "Run: [cyan]pip install --upgrade da-proj[/]"
            )
