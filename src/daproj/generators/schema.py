"""JSON schema describing ``.project-metadata.mdx`` front matter."""

from __future__ import annotations

import json

from ..models import ProjectStatus, ProjectType

REQUIRED_FIELDS = ["title", "category", "type", "status", "technologies"]


def _string_list(description: str) -> dict:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def build_schema() -> dict:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "Project Metadata",
        "type": "object",
        "required": list(REQUIRED_FIELDS),
        "properties": {
            "title": {"type": "string", "description": "Project title"},
            "category": {
                "type": "string",
                "description": "Main category (e.g., Web Development, AI/ML)",
            },
            "type": {
                "enum": [t.value for t in (ProjectType.FEATURED, ProjectType.SMALL)],
                "description": "Project type for portfolio display",
            },
            "status": {
                "enum": [
                    s.value
                    for s in (ProjectStatus.ACTIVE, ProjectStatus.ARCHIVED, ProjectStatus.IN_PROGRESS)
                ],
                "description": "Current project status",
            },
            "age": {"type": "string", "description": "How old is the project (e.g., +2 months)"},
            "repository": {"type": "string", "format": "uri", "description": "GitHub repository URL"},
            "demo": {"type": "string", "format": "uri", "description": "Live demo URL"},
            "lastUpdated": {"type": "string", "format": "date", "description": "Last metadata update"},
            "technologies": _string_list("List of technologies used"),
            "images": {
                "type": "object",
                "properties": {
                    "cover": {"type": "string"},
                    "gallery": {"type": "array", "items": {"type": "string"}},
                },
            },
            "industry": {"type": "string", "description": "Industry (for featured projects)"},
            "timeline": {"type": "string", "description": "Project timeline"},
            "details": _string_list("Additional details (for featured projects)"),
        },
    }


def generate_schema() -> str:
    return json.dumps(build_schema(), indent=2, ensure_ascii=False)
