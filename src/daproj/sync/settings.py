"""
Sync settings persistence -- which remote this machine syncs with.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml

from .models import SyncSettings

logger = logging.getLogger("daproj.sync.settings")


class SettingsFile:
    """YAML file holding the SyncSettings for this machine."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[SyncSettings]:
        """Load settings, or None when sync has not been set up.

        An unreadable file is logged and treated as not configured.
        """
        if not self.path.exists():
            return None
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
            return SyncSettings(**data)
        except (yaml.YAMLError, ValueError, TypeError) as exc:
            logger.warning("Failed to load sync settings from %s: %s", self.path, exc)
            return None

    def save(self, settings: SyncSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = settings.model_dump(mode="json", exclude_none=True)
        self.path.write_text(
            yaml.dump(data, default_flow_style=False), encoding="utf-8"
        )
        logger.info("Sync settings saved: %s -> %s", settings.backend.value, settings.location)
