"""
Profile sync -- keep portfolio profiles in step across machines.

The shared copy is a single JSON file in a private GitHub repository
(or a plain directory). Push, pull, and import all go through the same
reconciliation rules; the engine never prompts, callers hand it a
merge policy.
"""

from .engine import SyncEngine, ValidationError
from .models import MergePolicy, SyncSettings
from .transport import NotFound, RemoteBlobTransport, TransportError

__all__ = [
    "MergePolicy",
    "NotFound",
    "RemoteBlobTransport",
    "SyncEngine",
    "SyncSettings",
    "TransportError",
    "ValidationError",
]
