"""Init command: scaffold portfolio metadata into a git repository."""

from __future__ import annotations

from pathlib import Path

import click
from rich.panel import Panel

from ._common import console, fail, version_line


def register_init_commands(main: click.Group) -> None:
    """Register the init command."""

    @main.command("init")
    @click.option("--dir", "directory", default=".", type=click.Path(file_okay=False),
                  help="Repository to scaffold (default: current directory).")
    @click.option("--repository", "-r", default=None, help="Repository URL for the metadata.")
    def init(directory: str, repository: str):
        """Initialize project metadata for the portfolio.

        Asks a few questions about the project, then writes
        .project-metadata.mdx, the sync workflow, a README (if there
        is none), the JSON schema, and a proj-images/ folder.

        Examples:

            da-proj init

            da-proj init --dir ~/code/my-app
        """
        from ..scaffold import NotAGitRepository, is_git_repository, scaffold_project
        from .prompts import collect_metadata

        root = Path(directory).expanduser()
        if not is_git_repository(root):
            fail(
                "Not a git repository. Please run this command in a git repository.",
                "git init",
            )

        console.print()
        console.print(Panel(
            "[bold cyan]Project Metadata Setup[/]\n\n"
            "Let's set up your project metadata...\n\n"
            f"{version_line()}",
            border_style="bright_blue",
        ))

        metadata = collect_metadata(repository=repository)

        console.print("\n  Creating files...")
        try:
            result = scaffold_project(root, metadata)
        except NotAGitRepository as exc:
            fail(str(exc))
        except OSError as exc:
            fail(f"Failed to create files: {exc}")

        for rel in result.created:
            console.print(f"  [green]✓[/] Created {rel}")
        for rel in result.updated:
            console.print(f"  [green]✓[/] Updated {rel}")
        for rel in result.skipped:
            console.print(f"  [yellow]⚠[/] {rel} already exists, skipping")

        gallery = "".join(f"\n     - Gallery: {img}" for img in metadata.images.gallery)
        console.print(Panel(
            "[bold]Next steps:[/]\n\n"
            f"  1. [cyan]Add images[/] to proj-images/ (cover: {metadata.images.cover}){gallery}\n"
            "  2. [cyan]Review and edit[/] .project-metadata.mdx\n"
            "  3. [cyan]Set up secrets[/]: [yellow]da-proj secrets[/]\n"
            "  4. [cyan]Commit and push[/]: git add . && git commit -m \"Add portfolio metadata\" && git push\n\n"
            "[bold]Portfolio will auto-sync on push![/]",
            title="Setup Complete",
            border_style="green",
        ))
