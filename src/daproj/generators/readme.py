"""README templates for the project and its images folder."""

from __future__ import annotations

from ..models import ProjectMetadata


def generate_readme(metadata: ProjectMetadata) -> str:
    heading = "## Featured Project 🌟" if metadata.is_featured else "## Project"
    link = metadata.demo or metadata.repository or "#"
    return f"""# {metadata.title}

![Portfolio Status](https://img.shields.io/badge/portfolio-synced-success)
![Type](https://img.shields.io/badge/type-{metadata.type.value}-blue)
![Status](https://img.shields.io/badge/status-{metadata.status.value}-yellow)

{heading}

**Category:** {metadata.category}  
**Technologies:** {", ".join(metadata.technologies)}

## Description

[Project description here]

## Portfolio Integration

This project is automatically synced to my portfolio. Any changes to `.project-metadata.mdx` will trigger an update.

### Project Metadata

The metadata for this project is defined in [`.project-metadata.mdx`](./.project-metadata.mdx).

To update the portfolio:
1. Edit `.project-metadata.mdx`
2. Commit and push changes
3. GitHub Actions will automatically sync to the portfolio

## Setup

[Installation and setup instructions]

## Usage

[Usage instructions]

---

💼 [View this project in my portfolio]({link})
"""


def generate_images_readme(metadata: ProjectMetadata) -> str:
    """Checklist README for ``proj-images/``."""
    needed = []
    if metadata.images.cover:
        needed.append(f"- [ ] {metadata.images.cover}")
    needed.extend(f"- [ ] {img}" for img in metadata.images.gallery)

    return """# Project Images Folder

Place your project images here:

- **cover.png/jpg**: Main cover image for your project
- **screenshot1.png/jpg**: Gallery image 1
- **screenshot2.png/jpg**: Gallery image 2
- **screenshot3.png/jpg**: Gallery image 3

## Recommended sizes:

- Cover image: 1200x630px (or 16:9 ratio)
- Screenshots: 1920x1080px or similar

## Tips:

- Use descriptive filenames
- Optimize images before uploading (use tools like TinyPNG)
- Supported formats: PNG, JPG, WebP
- Keep file sizes under 500KB for better performance

## Current images needed:

""" + "\n".join(needed) + "\n"
