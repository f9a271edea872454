"""Tests for the files ``da-proj init`` generates."""

from __future__ import annotations

import json
from datetime import date

import yaml

from daproj.generators import (
    generate_images_readme,
    generate_mdx,
    generate_readme,
    generate_schema,
    generate_workflow,
)
from daproj.models import ProjectImages, ProjectMetadata, ProjectType

TODAY = date(2024, 5, 1)


def _split_front(text: str) -> tuple[dict, str]:
    assert text.startswith("---\n")
    _, front, body = text.split("---\n", 2)
    return yaml.safe_load(front), body


def _small() -> ProjectMetadata:
    return ProjectMetadata(
        title="My App",
        category="Web Development",
        repository="https://github.com/octo/my-app",
        technologies=["Python", "Click"],
    )


class TestMdx:
    """Front matter + body."""

    def test_small_project_front_matter(self):
        front, body = _split_front(generate_mdx(_small(), today=TODAY))
        assert front["title"] == "My App"
        assert front["type"] == "small"
        assert front["status"] == "in-progress"
        assert front["lastUpdated"] == "2024-05-01"
        assert front["technologies"] == ["Python", "Click"]
        assert front["images"] == {"cover": "/proj-images/cover.png", "gallery": []}
        assert "industry" not in front
        assert "demo" not in front
        assert body.lstrip().startswith("# My App")

    def test_featured_fields(self):
        metadata = _small().model_copy(update={
            "type": ProjectType.FEATURED,
            "industry": "Fintech",
            "timeline": "6 months",
            "details": ["Led the team"],
        })
        front, _ = _split_front(generate_mdx(metadata, today=TODAY))
        assert front["industry"] == "Fintech"
        assert front["details"] == ["Led the team"]

    def test_title_needing_quotes_survives(self):
        metadata = _small().model_copy(update={"title": "App: the sequel #2"})
        front, _ = _split_front(generate_mdx(metadata, today=TODAY))
        assert front["title"] == "App: the sequel #2"

    def test_custom_body(self):
        _, body = _split_front(generate_mdx(_small(), body="Hello", today=TODAY))
        assert body == "\nHello"

    def test_field_order(self):
        front, _ = _split_front(generate_mdx(_small(), today=TODAY))
        assert list(front)[:4] == ["title", "category", "type", "status"]


class TestTemplates:

    def test_schema_is_valid_json(self):
        schema = json.loads(generate_schema())
        assert schema["required"] == ["title", "category", "type", "status", "technologies"]
        assert set(schema["properties"]["type"]["enum"]) == {"featured", "small"}

    def test_workflow_uses_portfolio_secrets(self):
        workflow = yaml.safe_load(generate_workflow())
        assert workflow["name"] == "Sync to Portfolio"
        text = generate_workflow()
        assert "secrets.PORTFOLIO_API_URL" in text
        assert "secrets.PORTFOLIO_API_KEY" in text
        assert "/api/update-project" in text

    def test_readme_mentions_metadata(self):
        readme = generate_readme(_small())
        assert readme.startswith("# My App")
        assert "Python, Click" in readme
        assert "(https://github.com/octo/my-app)" in readme

    def test_images_readme_lists_gallery(self):
        metadata = _small().model_copy(update={
            "images": ProjectImages(gallery=["/proj-images/s1.png"]),
        })
        text = generate_images_readme(metadata)
        assert "- [ ] /proj-images/cover.png" in text
        assert "- [ ] /proj-images/s1.png" in text
