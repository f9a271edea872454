"""
Pydantic models for da-proj's persisted data.

Profiles and the Config that holds them travel between machines as JSON,
so the field aliases here (``portfolioUrl``, ``apiKey``) are the wire
format and must not change.
"""

from __future__ import annotations

import secrets
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Profile(BaseModel):
    """One stored credential set: a portfolio endpoint and its API key."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    portfolio_url: str = Field(alias="portfolioUrl", min_length=1)
    api_key: str = Field(alias="apiKey")

    @property
    def masked_key(self) -> str:
        return mask_api_key(self.api_key)


class Config(BaseModel):
    """The full set of profiles, as stored locally or in the sync repo.

    Profile names are unique. A document that repeats a name keeps the
    last definition at the position of the first one.
    """

    profiles: list[Profile] = Field(default_factory=list)

    @model_validator(mode="after")
    def _collapse_duplicate_names(self) -> "Config":
        seen: dict[str, int] = {}
        collapsed: list[Profile] = []
        for profile in self.profiles:
            if profile.name in seen:
                collapsed[seen[profile.name]] = profile
            else:
                seen[profile.name] = len(collapsed)
                collapsed.append(profile)
        if len(collapsed) != len(self.profiles):
            self.profiles = collapsed
        return self

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.profiles]

    def get(self, name: str) -> Optional[Profile]:
        """Return the profile called ``name`` (exact match), or None."""
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return None


class ProjectType(str, Enum):
    """How the portfolio displays the project."""

    SMALL = "small"
    FEATURED = "featured"


class ProjectStatus(str, Enum):
    """Lifecycle state shown on the portfolio card."""

    IN_PROGRESS = "in-progress"
    ACTIVE = "active"
    ARCHIVED = "archived"


class ProjectImages(BaseModel):
    """Cover and gallery image paths, relative to the repository root."""

    cover: str = "/proj-images/cover.png"
    gallery: list[str] = Field(default_factory=list)


class ProjectMetadata(BaseModel):
    """Front matter for ``.project-metadata.mdx``."""

    title: str
    category: str
    type: ProjectType = ProjectType.SMALL
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    age: Optional[str] = None
    repository: Optional[str] = None
    demo: Optional[str] = None
    technologies: list[str] = Field(default_factory=list)
    images: ProjectImages = Field(default_factory=ProjectImages)

    # Featured projects only
    industry: Optional[str] = None
    timeline: Optional[str] = None
    details: list[str] = Field(default_factory=list)

    @property
    def is_featured(self) -> bool:
        return self.type == ProjectType.FEATURED


def mask_api_key(api_key: str) -> str:
    """Return a display-safe preview of an API key.

    Long keys show the first 16 and last 4 characters. Keys of up to 20
    characters reveal only their first 4, and keys of 8 or fewer reveal
    nothing.

    Args:
        api_key: The secret to mask.

    Returns:
        str: Masked preview, never the full key.
    """
    if not api_key:
        return "(empty)"
    if len(api_key) <= 8:
        return "********"
    if len(api_key) <= 20:
        return f"{api_key[:4]}..."
    return f"{api_key[:16]}...{api_key[-4:]}"


def generate_api_key() -> str:
    """Generate a random 32-byte API key as 64 hex characters."""
    return secrets.token_hex(32)


def split_csv(raw: str) -> list[str]:
    """Split a comma separated prompt answer into trimmed, non-empty items."""
    return [item.strip() for item in raw.split(",") if item.strip()]
