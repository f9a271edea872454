"""
Sync Engine -- reconciles the local profiles with the shared copy.

Every operation reads and validates both sides before it writes
anything. A corrupt document on either side aborts the run with both
sides untouched.

    da-proj sync push    ->  local  -> remote (merge if both changed)
    da-proj sync pull    ->  remote -> local  (merge if both changed)
    da-proj sync import  ->  file   -> local
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from ..models import Config
from ..profiles import ParseError, ProfileStore, atomic_write_text, parse_config, serialize_config
from .merge import apply_policy
from .models import (
    DEFAULT_CONFIG_FILE,
    MergePolicy,
    ReconcileReport,
    StatusReport,
    SyncAction,
    SyncDirection,
    SyncState,
)
from .transport import NotFound, RemoteBlobTransport

logger = logging.getLogger("daproj.sync.engine")

PolicyChooser = Callable[[SyncDirection], MergePolicy]


class ValidationError(ParseError):
    """A configuration document failed to parse during reconciliation."""

    def __init__(self, side: str, message: str):
        super().__init__(message)
        self.side = side


class PolicyRequired(ValueError):
    """Both sides changed and no merge policy was supplied."""


def classify(local: Optional[Config], remote: Optional[Config]) -> SyncState:
    """Work out how the local and remote configurations relate.

    Two configurations are identical when their serialized forms match.
    """
    if local is None and remote is None:
        return SyncState.NO_LOCAL_NO_REMOTE
    if remote is None:
        return SyncState.LOCAL_ONLY
    if local is None:
        return SyncState.REMOTE_ONLY
    if serialize_config(local) == serialize_config(remote):
        return SyncState.BOTH_IDENTICAL
    return SyncState.BOTH_DIVERGENT


def _merge_action(policy: MergePolicy, direction: SyncDirection) -> SyncAction:
    if policy == MergePolicy.REPLACE:
        return SyncAction.PUSHED if direction == SyncDirection.PUSH else SyncAction.REPLACED
    if policy == MergePolicy.KEEP_EXISTING:
        return SyncAction.KEPT
    return SyncAction.MERGED


class SyncEngine:
    """Push, pull, and import profile configurations.

    Holds no configuration between calls; each operation loads what it
    needs, decides, writes at most once per side, and reports.
    """

    def __init__(
        self,
        store: ProfileStore,
        transport: Optional[RemoteBlobTransport] = None,
        remote_key: str = DEFAULT_CONFIG_FILE,
    ):
        """Initialize the sync engine.

        Args:
            store: Local profile store.
            transport: Remote blob transport. Only import/export work without one.
            remote_key: File name of the shared configuration on the remote.
        """
        self.store = store
        self.transport = transport
        self.remote_key = remote_key

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read_local(self) -> tuple[Optional[str], Optional[Config]]:
        try:
            text = self.store.read_text()
        except UnicodeDecodeError as exc:
            raise ValidationError("local", f"Local configuration is not UTF-8: {exc}") from exc
        if text is None:
            return None, None
        try:
            return text, parse_config(text, source="Local configuration")
        except ParseError as exc:
            raise ValidationError("local", str(exc)) from exc

    def _read_remote(self) -> tuple[Optional[str], Optional[Config]]:
        if self.transport is None:
            raise RuntimeError("No remote transport configured")
        try:
            data = self.transport.fetch(self.remote_key)
        except NotFound:
            logger.info("No %s on %s", self.remote_key, self.transport.describe())
            return None, None
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError("remote", f"Remote configuration is not UTF-8: {exc}") from exc
        try:
            return text, parse_config(text, source="Remote configuration")
        except ParseError as exc:
            raise ValidationError("remote", str(exc)) from exc

    def _resolve_policy(
        self,
        direction: SyncDirection,
        policy: Optional[MergePolicy],
        choose: Optional[PolicyChooser],
    ) -> MergePolicy:
        if policy is not None:
            return policy
        if choose is not None:
            return choose(direction)
        raise PolicyRequired(
            f"Local and remote configurations differ; a merge policy is required to {direction.value}"
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def status(self) -> StatusReport:
        """Compare local and remote without writing anything."""
        _, local = self._read_local()
        _, remote = self._read_remote()
        return StatusReport(
            state=classify(local, remote),
            location=self.transport.describe(),
            local_names=local.names if local else [],
            remote_names=remote.names if remote else [],
        )

    def push(
        self,
        policy: Optional[MergePolicy] = None,
        choose: Optional[PolicyChooser] = None,
    ) -> ReconcileReport:
        """Send the local configuration to the remote.

        Args:
            policy: Merge policy used if both sides changed.
            choose: Called once to pick a policy when ``policy`` is None
                and one is needed.

        Returns:
            ReconcileReport: What happened.

        Raises:
            ValidationError: If either document is malformed.
            TransportError: If the remote fails.
            PolicyRequired: If both sides changed and no policy is available.
        """
        direction = SyncDirection.PUSH
        _, local = self._read_local()
        _, remote = self._read_remote()
        state = classify(local, remote)

        if state == SyncState.NO_LOCAL_NO_REMOTE:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                message="Nothing to sync: no local or remote configuration.",
                suggestion="da-proj profiles add",
            )
        if state == SyncState.REMOTE_ONLY:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                profile_names=remote.names,
                message="No local configuration found.",
                suggestion="da-proj sync pull",
            )
        if state == SyncState.BOTH_IDENTICAL:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                profile_names=local.names,
                message="Already in sync.",
            )
        if state == SyncState.LOCAL_ONLY:
            self._store_remote(local)
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.PUSHED,
                wrote_remote=True, profile_names=local.names,
                message=f"Pushed {len(local.profiles)} profile(s).",
            )

        chosen = self._resolve_policy(direction, policy, choose)
        if chosen == MergePolicy.CANCEL:
            return self._cancelled(direction, state)

        result = apply_policy(chosen, current=remote, incoming=local, incoming_is_remote=False)
        if result == remote:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                policy=chosen, profile_names=result.names,
                message="Remote already contains every profile; nothing pushed.",
            )
        self._store_remote(result)
        return ReconcileReport(
            direction=direction, state=state, action=_merge_action(chosen, direction),
            policy=chosen, wrote_remote=True, profile_names=result.names,
            message=f"Remote now holds {len(result.profiles)} profile(s).",
        )

    def pull(
        self,
        policy: Optional[MergePolicy] = None,
        choose: Optional[PolicyChooser] = None,
    ) -> ReconcileReport:
        """Bring the remote configuration down to this machine.

        Args:
            policy: Merge policy used if both sides changed.
            choose: Called once to pick a policy when ``policy`` is None
                and one is needed.

        Returns:
            ReconcileReport: What happened.

        Raises:
            ValidationError: If either document is malformed.
            TransportError: If the remote fails.
            PolicyRequired: If both sides changed and no policy is available.
        """
        direction = SyncDirection.PULL
        _, local = self._read_local()
        remote_text, remote = self._read_remote()
        state = classify(local, remote)

        if state == SyncState.NO_LOCAL_NO_REMOTE:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                message="Nothing to sync: no local or remote configuration.",
                suggestion="da-proj profiles add",
            )
        if state == SyncState.LOCAL_ONLY:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                profile_names=local.names,
                message="No configuration found on the remote.",
                suggestion="da-proj sync push",
            )
        if state == SyncState.BOTH_IDENTICAL:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                profile_names=local.names,
                message="Already in sync.",
            )
        if state == SyncState.REMOTE_ONLY:
            self.store.write_text(remote_text)
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.PULLED,
                wrote_local=True, profile_names=remote.names,
                message=f"Pulled {len(remote.profiles)} profile(s).",
            )

        chosen = self._resolve_policy(direction, policy, choose)
        if chosen == MergePolicy.CANCEL:
            return self._cancelled(direction, state)

        if chosen == MergePolicy.REPLACE:
            self.store.write_text(remote_text)
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.REPLACED,
                policy=chosen, wrote_local=True, profile_names=remote.names,
                message=f"Local configuration replaced: {len(remote.profiles)} profile(s).",
            )

        result = apply_policy(chosen, current=local, incoming=remote)
        return self._write_local_result(direction, state, chosen, local, result)

    def import_file(
        self,
        path: Path,
        policy: Optional[MergePolicy] = None,
        choose: Optional[PolicyChooser] = None,
    ) -> ReconcileReport:
        """Merge profiles from an exported file into the local store.

        Args:
            path: File written by ``export_file`` on another machine.
            policy: Merge policy used if local profiles already exist.
            choose: Called once to pick a policy when needed.

        Returns:
            ReconcileReport: What happened.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            ValidationError: If the file or the local document is malformed.
        """
        direction = SyncDirection.IMPORT
        path = Path(path).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError("import", f"{path} is not UTF-8 text: {exc}") from exc
        try:
            incoming = parse_config(text, source=str(path))
        except ParseError as exc:
            raise ValidationError("import", str(exc)) from exc
        if not incoming.profiles:
            raise ValidationError("import", f"{path} contains no profiles")

        _, local = self._read_local()
        if local is None or not local.profiles:
            state = SyncState.REMOTE_ONLY
            self.store.save(incoming)
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.PULLED,
                wrote_local=True, profile_names=incoming.names,
                message=f"Imported {len(incoming.profiles)} profile(s).",
            )

        state = classify(local, incoming)
        if state == SyncState.BOTH_IDENTICAL:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                profile_names=local.names,
                message="Local configuration already matches the file.",
            )

        chosen = self._resolve_policy(direction, policy, choose)
        if chosen == MergePolicy.CANCEL:
            return self._cancelled(direction, state)

        result = apply_policy(chosen, current=local, incoming=incoming)
        return self._write_local_result(direction, state, chosen, local, result)

    def export_file(self, path: Path) -> Config:
        """Write the local configuration to ``path`` for copying elsewhere.

        Raises:
            ValidationError: If the local document is malformed.
            ValueError: If there are no profiles to export.
        """
        _, local = self._read_local()
        if local is None or not local.profiles:
            raise ValueError("No profiles found to export")
        path = Path(path).expanduser()
        atomic_write_text(path, serialize_config(local))
        logger.info("Exported %d profile(s) to %s", len(local.profiles), path)
        return local

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _store_remote(self, config: Config) -> None:
        data = serialize_config(config).encode("utf-8")
        self.transport.store(self.remote_key, data)
        logger.info(
            "Stored %d profile(s) at %s/%s",
            len(config.profiles), self.transport.describe(), self.remote_key,
        )

    def _write_local_result(
        self,
        direction: SyncDirection,
        state: SyncState,
        policy: MergePolicy,
        local: Config,
        result: Config,
    ) -> ReconcileReport:
        if result == local:
            return ReconcileReport(
                direction=direction, state=state, action=SyncAction.NOOP,
                policy=policy, profile_names=result.names,
                message="Local configuration already contains every profile.",
            )
        self.store.save(result)
        return ReconcileReport(
            direction=direction, state=state, action=_merge_action(policy, direction),
            policy=policy, wrote_local=True, profile_names=result.names,
            message=f"Local configuration now holds {len(result.profiles)} profile(s).",
        )

    def _cancelled(self, direction: SyncDirection, state: SyncState) -> ReconcileReport:
        logger.info("%s cancelled", direction.value)
        return ReconcileReport(
            direction=direction, state=state, action=SyncAction.CANCELLED,
            policy=MergePolicy.CANCEL, message=f"{direction.value.capitalize()} cancelled.",
        )
