"""Sync commands: setup, push, pull, status, export, import, show."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel

from .. import DAPROJ_HOME
from ..sync.models import (
    DEFAULT_REPO_NAME,
    ReconcileReport,
    SyncAction,
    SyncBackendType,
    SyncDirection,
    SyncSettings,
    SyncState,
)
from ._common import (
    POLICY_CHOICES,
    build_engine,
    console,
    fail,
    logger,
    print_names,
    profile_store,
    profiles_table,
    resolve_policy_option,
    settings_file,
)

DEFAULT_BACKUP_FILE = "./da-proj-config-backup.json"

_policy_option = click.option(
    "--policy",
    type=click.Choice(POLICY_CHOICES),
    default=None,
    help="How to combine divergent configurations (asked interactively if omitted).",
)


def _render_report(report: ReconcileReport) -> None:
    if report.action == SyncAction.CANCELLED:
        console.print(f"  [blue]ℹ[/] {report.message}")
        return
    if report.action == SyncAction.NOOP:
        console.print(f"  [green]✓[/] {report.message}")
    else:
        console.print(f"  [bold green]✓[/] {report.message}")
    if report.profile_names:
        print_names("Profiles", report.profile_names)
    console.print()


def _run(operation, *args, **kwargs) -> ReconcileReport:
    """Run an engine operation, turning its errors into CLI failures."""
    from ..sync.engine import PolicyRequired, ValidationError
    from ..sync.transport import TransportError

    try:
        return operation(*args, **kwargs)
    except ValidationError as exc:
        hint = {
            "local": "da-proj sync pull --policy replace",
            "remote": "da-proj sync push --policy replace",
        }.get(exc.side)
        fail(f"{exc}. Nothing was changed.", hint)
    except TransportError as exc:
        fail(f"Sync failed: {exc}", "da-proj sync status")
    except PolicyRequired as exc:
        fail(str(exc), "rerun with --policy")


def register_sync_commands(main: click.Group) -> None:
    """Register the sync command group."""

    @main.group()
    def sync():
        """Sync profiles across machines through a private repository.

        Your profiles live in one JSON file in a private GitHub repo.
        Push from one machine, pull on the next.
        """

    @sync.command("setup")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    @click.option("--repo", "repo_name", default=None, help="Create a new private repo with this name.")
    @click.option("--existing", "existing_url", default=None, help="Use an existing repo URL.")
    @click.option("--local", "local_path", default=None, type=click.Path(file_okay=False),
                  help="Sync through a local directory instead of GitHub.")
    @click.option("--branch", default="main", help="Branch holding the configuration.")
    @click.option("--force", is_flag=True, help="Reconfigure without asking.")
    @click.option("--push/--no-push", "push_now", default=None,
                  help="Upload the local configuration right away.")
    def sync_setup(home, repo_name, existing_url, local_path, branch, force, push_now):
        """Choose where your profiles are synced.

        Examples:

            da-proj sync setup

            da-proj sync setup --repo da-proj-secrets

            da-proj sync setup --local /mnt/usb/da-proj
        """
        from ..github import (
            INSTALL_HINT,
            GitHubCLIError,
            create_private_repo,
            ensure_ready,
            get_username,
            list_private_repos,
            secrets_repo_readme,
        )
        from ..sync.transport import TransportError, create_transport, parse_repo_url
        from .prompts import ask, choose_from_menu, confirm

        sfile = settings_file(home)
        current = sfile.load()
        if current is not None and not force:
            console.print(f"  [yellow]Sync is already configured:[/] {current.location}")
            if not confirm("Do you want to reconfigure?", default=False):
                console.print("  Keeping existing configuration.")
                return

        created = False
        if local_path:
            target = Path(local_path).expanduser()
            target.mkdir(parents=True, exist_ok=True)
            settings = SyncSettings(backend=SyncBackendType.LOCAL, local_path=target)
        else:
            try:
                ensure_ready()
            except GitHubCLIError as exc:
                console.print(f"[bold red]✗[/] {exc}\n\n{INSTALL_HINT}")
                raise SystemExit(1)

            try:
                if existing_url is None and repo_name is None:
                    idx = choose_from_menu(
                        "How do you want to store your configuration?",
                        ["Create new private repo (Recommended)", "Use existing repo"],
                    )
                    if idx == 0:
                        repo_name = ask("Repository name", DEFAULT_REPO_NAME)
                    else:
                        repos = list_private_repos()
                        if not repos:
                            fail("No private repositories found.", "da-proj sync setup --repo da-proj-secrets")
                        pick = choose_from_menu(
                            "Select repository",
                            [f"{r.name} - {r.description}" if r.description else r.name for r in repos],
                        )
                        existing_url = repos[pick].url

                if existing_url:
                    owner, name = parse_repo_url(existing_url)
                    url = existing_url
                else:
                    console.print("  Creating private repository...")
                    url = create_private_repo(repo_name)
                    owner, name = get_username(), repo_name
                    created = True
            except GitHubCLIError as exc:
                fail(f"Failed to set up repository: {exc}")
            except ValueError as exc:
                fail(str(exc))

            settings = SyncSettings(
                backend=SyncBackendType.GITHUB,
                repo_url=url,
                repo_name=name,
                repo_owner=owner,
                branch=branch,
            )

        if created:
            from ..github import auth_token

            try:
                transport = create_transport(settings, token_provider=auth_token)
                transport.store("README.md", secrets_repo_readme().encode("utf-8"))
            except TransportError as exc:
                logger.warning("Could not upload README: %s", exc)
                console.print(f"  [yellow]⚠[/] Could not add README: {exc}")

        sfile.save(settings)
        console.print(f"\n  [bold green]✓[/] Sync configured: [cyan]{settings.location}[/]\n")

        store = profile_store(home)
        if not store.exists():
            console.print(
                "  [bold]Next steps:[/]\n"
                "    1. Create profiles with [cyan]da-proj profiles add[/] or [cyan]da-proj secrets[/]\n"
                "    2. Upload with [cyan]da-proj sync push[/]\n"
                "    3. On other devices run [cyan]da-proj sync pull[/]\n"
            )
            return

        if push_now is None:
            push_now = confirm("Upload existing configuration now?", default=True)
        if push_now:
            from .prompts import choose_policy

            engine = build_engine(home, settings)
            _render_report(_run(engine.push, choose=choose_policy))
        else:
            console.print(
                "  Later: [cyan]da-proj sync push[/] here, "
                "[cyan]da-proj sync pull[/] on other devices.\n"
            )

    @sync.command("push")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    @_policy_option
    def sync_push(home: str, policy: Optional[str]):
        """Upload local profiles to the sync repository."""
        from .prompts import choose_policy

        engine = build_engine(home)
        console.print(f"\n  Pushing to [cyan]{engine.transport.describe()}[/]...")
        report = _run(
            engine.push,
            policy=resolve_policy_option(policy, SyncDirection.PUSH),
            choose=choose_policy,
        )
        if report.state in (SyncState.NO_LOCAL_NO_REMOTE, SyncState.REMOTE_ONLY):
            fail(report.message, report.suggestion)
        _render_report(report)

    @sync.command("pull")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    @_policy_option
    def sync_pull(home: str, policy: Optional[str]):
        """Download profiles from the sync repository."""
        from .prompts import choose_policy

        engine = build_engine(home)
        console.print(f"\n  Pulling from [cyan]{engine.transport.describe()}[/]...")
        report = _run(
            engine.pull,
            policy=resolve_policy_option(policy, SyncDirection.PULL),
            choose=choose_policy,
        )
        if report.state in (SyncState.NO_LOCAL_NO_REMOTE, SyncState.LOCAL_ONLY):
            fail(report.message, report.suggestion)
        _render_report(report)

    @sync.command("status")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    def sync_status(home: str):
        """Compare local profiles with the sync repository."""
        settings = settings_file(home).load()
        if settings is None:
            console.print("  [yellow]GitHub sync not configured.[/]")
            console.print("  Run: [cyan]da-proj sync setup[/] to enable sync\n")
            return

        engine = build_engine(home, settings)
        status = _run(engine.status)

        labels = {
            SyncState.BOTH_IDENTICAL: "[bold green]SYNCHRONIZED[/]",
            SyncState.BOTH_DIVERGENT: "[bold yellow]OUT OF SYNC[/]",
            SyncState.LOCAL_ONLY: "[bold yellow]NOT ON REMOTE[/]",
            SyncState.REMOTE_ONLY: "[bold yellow]NOT LOCAL[/]",
            SyncState.NO_LOCAL_NO_REMOTE: "[dim]EMPTY[/]",
        }
        console.print()
        console.print(Panel(
            f"Repository: [cyan]{status.location}[/]\n"
            f"Status: {labels[status.state]}\n"
            f"Local: [bold]{len(status.local_names)}[/] profile(s)\n"
            f"Remote: [bold]{len(status.remote_names)}[/] profile(s)",
            title="Sync Status",
            border_style="magenta",
        ))

        if status.state == SyncState.BOTH_IDENTICAL:
            print_names("Profiles", status.local_names)
        elif status.state == SyncState.BOTH_DIVERGENT:
            print_names("Local", status.local_names)
            print_names("Remote", status.remote_names)
            console.print(
                "\n  [yellow]Suggestions:[/]\n"
                "    • [cyan]da-proj sync push[/]  - Upload local to the remote\n"
                "    • [cyan]da-proj sync pull[/]  - Download from the remote (with merge option)"
            )
        elif status.state == SyncState.LOCAL_ONLY:
            console.print("\n  [yellow]Suggestion:[/] [cyan]da-proj sync push[/] - Upload your local configuration")
        elif status.state == SyncState.REMOTE_ONLY:
            console.print(
                "\n  [yellow]Suggestions:[/]\n"
                "    • [cyan]da-proj sync pull[/]     - Download configuration\n"
                "    • [cyan]da-proj profiles add[/]  - Create a new profile"
            )
        console.print()

    @sync.command("export")
    @click.argument("path", default=DEFAULT_BACKUP_FILE, type=click.Path(dir_okay=False))
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    def sync_export(path: str, home: str):
        """Export profiles to a file you can copy to another computer."""
        from ..sync.engine import SyncEngine, ValidationError

        engine = SyncEngine(profile_store(home))
        try:
            config = engine.export_file(Path(path))
        except ValidationError as exc:
            fail(str(exc))
        except ValueError as exc:
            fail(str(exc), "da-proj profiles add")
        except OSError as exc:
            fail(f"Failed to export: {exc}")

        console.print(f"  [green]✓[/] Exported {len(config.profiles)} profile(s) to: {path}")
        console.print("  [bold]You can now copy this file to another computer![/]\n")

    @sync.command("import")
    @click.argument("path", default=DEFAULT_BACKUP_FILE, type=click.Path(dir_okay=False))
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    @_policy_option
    def sync_import(path: str, home: str, policy: Optional[str]):
        """Import profiles from an exported file."""
        from ..sync.engine import SyncEngine
        from .prompts import choose_policy

        engine = SyncEngine(profile_store(home))
        try:
            report = _run(
                engine.import_file,
                Path(path),
                policy=resolve_policy_option(policy, SyncDirection.IMPORT),
                choose=choose_policy,
            )
        except FileNotFoundError:
            fail(f"File not found: {path}", "da-proj sync export")
        _render_report(report)

    @sync.command("show")
    @click.option("--home", default=DAPROJ_HOME, type=click.Path(), help="da-proj home directory.")
    def sync_show(home: str):
        """Show the local configuration and where it syncs to."""
        from ..profiles import ParseError

        store = profile_store(home)
        settings = settings_file(home).load()
        console.print(f"\n  [bold]Configuration Location:[/] {store.path}")
        console.print(f"  [bold]Sync Target:[/] {settings.location if settings else '[dim]not configured[/]'}\n")
        try:
            config = store.load()
        except ParseError as exc:
            fail(str(exc))
        if not config.profiles:
            console.print("  [yellow]No profiles configured.[/]\n")
            return
        console.print(profiles_table(config, title=f"Profiles ({len(config.profiles)})"))
