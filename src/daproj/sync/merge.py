"""
Profile merge policies.

Pure functions over profile lists. Names are compared exactly; "Main"
and "main " are different profiles.
"""

from __future__ import annotations

from ..models import Config, Profile
from .models import MergePolicy


def merge_remote_priority(
    remote: list[Profile], local: list[Profile]
) -> list[Profile]:
    """Remote profiles first, then local profiles whose name remote lacks."""
    remote_names = {p.name for p in remote}
    return list(remote) + [p for p in local if p.name not in remote_names]


def merge_local_priority(
    current: list[Profile], incoming: list[Profile]
) -> list[Profile]:
    """Incoming overwrites same-name profiles in place; new names append."""
    merged = list(current)
    index = {p.name: i for i, p in enumerate(merged)}
    for profile in incoming:
        if profile.name in index:
            merged[index[profile.name]] = profile
        else:
            index[profile.name] = len(merged)
            merged.append(profile)
    return merged


def keep_existing(
    current: list[Profile], incoming: list[Profile]
) -> list[Profile]:
    """Current profiles untouched; only names current lacks are added."""
    kept = list(current)
    names = {p.name for p in kept}
    for profile in incoming:
        if profile.name not in names:
            names.add(profile.name)
            kept.append(profile)
    return kept


def apply_policy(
    policy: MergePolicy,
    current: Config,
    incoming: Config,
    incoming_is_remote: bool = True,
) -> Config:
    """Combine ``incoming`` into ``current`` under ``policy``.

    ``current`` is the side being written; ``incoming`` is the side being
    read. On pull that is (local, remote), on push (remote, local). An
    imported file plays the remote role.

    Args:
        policy: Merge rule to apply. CANCEL is not a merge.
        current: Configuration on the target side.
        incoming: Configuration arriving from the other side.
        incoming_is_remote: False when pushing, so remote-priority still
            puts the remote profiles first.

    Returns:
        Config: The combined configuration.

    Raises:
        ValueError: If ``policy`` is CANCEL.
    """
    if policy == MergePolicy.REPLACE:
        profiles = list(incoming.profiles)
    elif policy == MergePolicy.MERGE_REMOTE_PRIORITY:
        remote, local = (incoming, current) if incoming_is_remote else (current, incoming)
        profiles = merge_remote_priority(remote.profiles, local.profiles)
    elif policy == MergePolicy.MERGE_LOCAL_PRIORITY:
        profiles = merge_local_priority(current.profiles, incoming.profiles)
    elif policy == MergePolicy.KEEP_EXISTING:
        profiles = keep_existing(current.profiles, incoming.profiles)
    else:
        raise ValueError(f"{policy.value} is not a merge policy")
    return Config(profiles=profiles)
