"""
Project scaffolding -- writes the portfolio metadata files into a repo.

    .project-metadata.mdx
    .github/workflows/sync-portfolio.yml
    README.md                (only if missing)
    .project-schema.json
    proj-images/README.md, proj-images/.gitkeep
    .gitignore               (appended to, never rewritten)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .generators import (
    generate_images_readme,
    generate_mdx,
    generate_readme,
    generate_schema,
    generate_workflow,
)
from .generators.workflow import WORKFLOW_PATH
from .models import ProjectMetadata

logger = logging.getLogger("daproj.scaffold")

METADATA_FILE = ".project-metadata.mdx"
SCHEMA_FILE = ".project-schema.json"
IMAGES_DIR = "proj-images"
GITIGNORE_BLOCK = "\n# Dependencies\nnode_modules/\n"


class NotAGitRepository(RuntimeError):
    """The target directory has no ``.git``."""


class ScaffoldResult(BaseModel):
    """Paths written and skipped, relative to the project root."""

    root: Path
    created: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)


def is_git_repository(path: Path) -> bool:
    return (path / ".git").exists()


def _write(root: Path, rel: str, content: str, result: ScaffoldResult) -> None:
    target = root / rel
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    result.created.append(rel)
    logger.debug("Wrote %s", target)


def scaffold_project(
    root: Path,
    metadata: ProjectMetadata,
    body: Optional[str] = None,
) -> ScaffoldResult:
    """Write every portfolio file for ``metadata`` into ``root``.

    Args:
        root: Repository working tree.
        metadata: Answers collected from the init wizard.
        body: MDX body; defaults to the standard section outline.

    Returns:
        ScaffoldResult: What was created, updated, or left alone.

    Raises:
        NotAGitRepository: If ``root`` is not a git working tree.
    """
    root = Path(root).expanduser().resolve()
    if not is_git_repository(root):
        raise NotAGitRepository(
            f"{root} is not a git repository. Run this command in a git repository."
        )

    result = ScaffoldResult(root=root)

    _write(root, METADATA_FILE, generate_mdx(metadata, body), result)
    _write(root, WORKFLOW_PATH, generate_workflow(), result)

    if (root / "README.md").exists():
        result.skipped.append("README.md")
        logger.info("README.md already exists, skipping")
    else:
        _write(root, "README.md", generate_readme(metadata), result)

    _write(root, SCHEMA_FILE, generate_schema(), result)
    _write(root, f"{IMAGES_DIR}/README.md", generate_images_readme(metadata), result)
    _write(root, f"{IMAGES_DIR}/.gitkeep", "", result)

    gitignore = root / ".gitignore"
    existing = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
    if "node_modules" not in existing:
        gitignore.write_text(existing + GITIGNORE_BLOCK, encoding="utf-8")
        result.updated.append(".gitignore")

    logger.info(
        "Scaffolded %s: %d created, %d skipped",
        root, len(result.created), len(result.skipped),
    )
    return result
