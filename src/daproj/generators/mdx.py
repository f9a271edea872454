"""Front-matter MDX document for ``.project-metadata.mdx``."""

from __future__ import annotations

from datetime import date
from typing import Optional

import yaml

from ..models import ProjectMetadata


def build_frontmatter(metadata: ProjectMetadata, today: Optional[date] = None) -> dict:
    """Ordered front-matter mapping; empty optional fields are left out.

    Featured-only fields appear only for featured projects.
    """
    today = today or date.today()
    front: dict = {
        "title": metadata.title,
        "category": metadata.category,
        "type": metadata.type.value,
        "status": metadata.status.value,
    }
    for key in ("age", "repository", "demo"):
        value = getattr(metadata, key)
        if value:
            front[key] = value
    front["lastUpdated"] = today.isoformat()
    front["technologies"] = list(metadata.technologies)
    front["images"] = {
        "cover": metadata.images.cover,
        "gallery": list(metadata.images.gallery),
    }
    if metadata.is_featured:
        front["industry"] = metadata.industry
        front["timeline"] = metadata.timeline
        front["details"] = list(metadata.details)
    return front


def default_body(title: str) -> str:
    return f"""# {title}

## Description

[Add your project description here]

## Key Features

- Feature 1
- Feature 2
- Feature 3

## Challenges

[Describe the technical challenges you faced]

## Outcomes

[What did you learn and achieve?]

## Future Improvements

- [ ] Improvement 1
- [ ] Improvement 2
"""


def generate_mdx(
    metadata: ProjectMetadata,
    body: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """Render the metadata as YAML front matter followed by the MDX body."""
    front = yaml.safe_dump(
        build_frontmatter(metadata, today),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    content = body if body is not None else default_body(metadata.title)
    return f"---\n{front}---\n\n{content}"
