"""Template generators for the files ``da-proj init`` writes."""

from .mdx import default_body, generate_mdx
from .readme import generate_images_readme, generate_readme
from .schema import generate_schema
from .workflow import generate_workflow

__all__ = [
    "default_body",
    "generate_images_readme",
    "generate_mdx",
    "generate_readme",
    "generate_schema",
    "generate_workflow",
]
