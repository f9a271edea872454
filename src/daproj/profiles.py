"""
Profile store -- the local JSON document of named portfolio profiles.

One store per process, built with an explicit path and handed to
whoever needs it. Writes go to a sibling temp file first and are then
renamed over the target, so a reader sees either the old document or
the new one, never half of each.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .models import Config, Profile

logger = logging.getLogger("daproj.profiles")


class ParseError(ValueError):
    """A configuration document exists but is not a valid Config."""


def serialize_config(config: Config) -> str:
    """Render a Config as the canonical JSON text (2-space indent)."""
    return json.dumps(
        config.model_dump(mode="json", by_alias=True),
        indent=2,
        ensure_ascii=False,
    )


def parse_config(text: str, source: str = "configuration") -> Config:
    """Parse JSON text into a Config.

    A blank document and ``{}`` both parse as a Config with no profiles.

    Args:
        text: Raw document text.
        source: Label used in error messages.

    Returns:
        Config: The parsed configuration.

    Raises:
        ParseError: If the text is not JSON or does not match the shape.
    """
    if not text.strip():
        return Config()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"{source} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ParseError(f"{source} must be a JSON object with a 'profiles' list")
    if data.get("profiles") is None:
        data = {**data, "profiles": []}
    if not isinstance(data["profiles"], list):
        raise ParseError(f"{source}: 'profiles' must be a list")

    try:
        return Config.model_validate(data)
    except PydanticValidationError as exc:
        raise ParseError(f"{source} has invalid profiles: {exc}") from exc


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a temp file and a rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.parent / f".{path.name}.tmp"
    try:
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class ProfileStore:
    """Reads and writes the local profiles document."""

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Location of the JSON document, e.g. ~/.da-proj/config.json.
        """
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def read_text(self) -> Optional[str]:
        """Return the raw document text, or None if there is no document."""
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def load_optional(self) -> Optional[Config]:
        """Load the Config, or None when no document exists.

        Raises:
            ParseError: If the document is malformed.
        """
        try:
            text = self.read_text()
        except UnicodeDecodeError as exc:
            raise ParseError(f"{self.path} is not UTF-8 text: {exc}") from exc
        if text is None:
            return None
        return parse_config(text, source=str(self.path))

    def load(self) -> Config:
        """Load the Config; a missing document is an empty Config.

        Raises:
            ParseError: If the document is malformed.
        """
        config = self.load_optional()
        return config if config is not None else Config()

    def save(self, config: Config) -> None:
        """Persist a Config verbatim."""
        atomic_write_text(self.path, serialize_config(config))
        logger.info("Saved %d profile(s) to %s", len(config.profiles), self.path)

    def write_text(self, text: str) -> None:
        """Persist raw document text as-is (used when pulling verbatim)."""
        atomic_write_text(self.path, text)
        logger.info("Wrote configuration document to %s", self.path)

    def upsert(self, profile: Profile) -> Config:
        """Insert or replace a profile by name and persist.

        Args:
            profile: The profile to store.

        Returns:
            Config: The configuration as written.
        """
        config = self.load()
        profiles = list(config.profiles)
        for idx, existing in enumerate(profiles):
            if existing.name == profile.name:
                profiles[idx] = profile
                logger.debug("Replacing profile %s", profile.name)
                break
        else:
            profiles.append(profile)
            logger.debug("Adding profile %s", profile.name)

        updated = Config(profiles=profiles)
        self.save(updated)
        return updated
