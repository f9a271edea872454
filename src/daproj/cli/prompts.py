"""
Interactive prompts.

Each function asks its questions and hands back a plain value. Nothing
in here reads or writes configuration; commands do that with the
answers.
"""

from __future__ import annotations

from typing import Optional

from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..models import (
    ProjectImages,
    ProjectMetadata,
    ProjectStatus,
    ProjectType,
    split_csv,
)
from ..sync.models import MergePolicy, SyncDirection
from ._common import console, fail

_POLICY_MENUS: dict[SyncDirection, list[tuple[MergePolicy, str]]] = {
    SyncDirection.PULL: [
        (MergePolicy.REPLACE, "Replace local with the remote version"),
        (MergePolicy.MERGE_REMOTE_PRIORITY, "Merge (combine profiles, remote wins)"),
        (MergePolicy.KEEP_EXISTING, "Keep local (only add new profiles)"),
        (MergePolicy.CANCEL, "Cancel"),
    ],
    SyncDirection.PUSH: [
        (MergePolicy.REPLACE, "Replace remote with the local version"),
        (MergePolicy.MERGE_LOCAL_PRIORITY, "Merge (combine profiles, local wins)"),
        (MergePolicy.KEEP_EXISTING, "Keep remote (only add new profiles)"),
        (MergePolicy.CANCEL, "Cancel"),
    ],
    SyncDirection.IMPORT: [
        (MergePolicy.REPLACE, "Replace all (overwrite current)"),
        (MergePolicy.MERGE_LOCAL_PRIORITY, "Merge (keep both, imported takes priority)"),
        (MergePolicy.KEEP_EXISTING, "Keep current (only add new profiles)"),
        (MergePolicy.CANCEL, "Cancel"),
    ],
}


def choose_from_menu(title: str, options: list[str], default: int = 1) -> int:
    """Show a numbered menu and return the chosen index (0-based)."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    for idx, label in enumerate(options, start=1):
        table.add_row(f"[cyan]{idx}[/]", label)
    console.print(f"\n  [bold]{title}[/]")
    console.print(table)
    choice = Prompt.ask(
        "  Enter your choice",
        choices=[str(i) for i in range(1, len(options) + 1)],
        default=str(default),
    )
    return int(choice) - 1


def choose_policy(direction: SyncDirection) -> MergePolicy:
    """Ask how to combine divergent configurations."""
    menu = _POLICY_MENUS[direction]
    titles = {
        SyncDirection.PULL: "Local configuration exists. What do you want to do?",
        SyncDirection.PUSH: "Remote configuration differs. What do you want to do?",
        SyncDirection.IMPORT: "How to merge configurations?",
    }
    try:
        idx = choose_from_menu(titles[direction], [label for _, label in menu])
    except EOFError:
        fail(
            "No answer to the merge question (input closed).",
            f"da-proj sync {direction.value} --policy merge",
        )
    return menu[idx][0]


def confirm(question: str, default: bool = True) -> bool:
    return Confirm.ask(f"  {question}", default=default)


def ask(question: str, default: str = "") -> str:
    return Prompt.ask(f"  {question}", default=default, show_default=bool(default))


def collect_metadata(repository: Optional[str] = None) -> ProjectMetadata:
    """Walk through the project metadata questions."""
    title = ask("Project title", "My Awesome Project")
    category = ask("Category", "Web Development")

    type_idx = choose_from_menu("Project type", ["Small project", "Featured project"])
    project_type = (ProjectType.SMALL, ProjectType.FEATURED)[type_idx]

    status_idx = choose_from_menu("Project status", ["In Progress", "Active", "Archived"])
    status = (ProjectStatus.IN_PROGRESS, ProjectStatus.ACTIVE, ProjectStatus.ARCHIVED)[status_idx]

    age = ask("Project age (optional)", "+2 months")
    demo = ask("Demo URL (optional)")
    technologies = split_csv(ask("Technologies (comma separated)", "React, TypeScript, Node.js"))
    cover = ask("Cover image path", "/proj-images/cover.png")
    gallery = split_csv(ask("Gallery images (comma separated, optional)"))

    metadata = ProjectMetadata(
        title=title,
        category=category,
        type=project_type,
        status=status,
        age=age or None,
        repository=repository or None,
        demo=demo or None,
        technologies=technologies,
        images=ProjectImages(cover=cover, gallery=gallery),
    )

    if metadata.is_featured:
        metadata.industry = ask("Industry", "Technology")
        metadata.timeline = ask("Timeline", "Still Working")
        metadata.details = split_csv(ask(
            "Project details (comma separated)",
            "Built with modern stack, Scalable architecture, Production ready",
        ))

    return metadata
