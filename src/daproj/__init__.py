"""
da-proj -- portfolio project scaffolding.

Drops portfolio metadata into any git repository and keeps your
portfolio API profiles in step across every machine you work on,
using a private GitHub repository as the meeting point.
"""

import os

__version__ = "0.3.0"
__author__ = "da-proj contributors"

DAPROJ_HOME = os.environ.get("DAPROJ_HOME", "~/.da-proj")
PROFILES_FILENAME = "config.json"
SYNC_SETTINGS_FILENAME = "sync.yaml"
