"""
da-proj CLI -- portfolio project scaffolding and profile sync.

The main Click group is defined here and every command group is
registered from its own module.

Entry point: daproj.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__


@click.group()
@click.version_option(version=__version__, prog_name="da-proj")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """da-proj: set up portfolio project metadata.

    Scaffold portfolio files into a repository, publish your portfolio
    API credentials as GitHub secrets, and keep your profiles in sync
    across machines through a private repository.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Register all command groups/commands from modular files
# ---------------------------------------------------------------------------

from .init_cmd import register_init_commands
from .secrets_cmd import register_secrets_commands
from .profiles_cmd import register_profiles_commands
from .sync_cmd import register_sync_commands
from .version_cmd import register_version_commands

register_init_commands(main)
register_secrets_commands(main)
register_profiles_commands(main)
register_sync_commands(main)
register_version_commands(main)
