"""Version reporting and the best-effort "update available" check."""

from __future__ import annotations

import logging

import requests
from pydantic import BaseModel

from . import __version__

logger = logging.getLogger("daproj.version")

PACKAGE_NAME = "da-proj"
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"


class UpdateInfo(BaseModel):
    current_version: str
    latest_version: str

    @property
    def has_update(self) -> bool:
        return _version_tuple(self.latest_version) > _version_tuple(self.current_version)


def _version_tuple(version: str) -> tuple[int, ...]:
    parts = []
    for piece in version.split("."):
        digits = "".join(ch for ch in piece if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


def check_for_updates(timeout: float = 3.0) -> UpdateInfo:
    """Ask PyPI for the latest release.

    Network trouble is not an error here: the current version is
    reported as the latest.
    """
    latest = __version__
    try:
        resp = requests.get(PYPI_URL, timeout=timeout)
        if resp.status_code == 200:
            latest = resp.json()["info"]["version"]
    except (requests.RequestException, ValueError, KeyError) as exc:
        logger.debug("Update check failed: %s", exc)
    return UpdateInfo(current_version=__version__, latest_version=latest)
