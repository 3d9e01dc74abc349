"""
Rotation cycle

One cycle recovers the payload, re-encodes it under a fresh fragment,
verifies the round trip and only then commits, in an order that lets the
next run recover wherever this one stops:

    pending fragment -> dated snapshot -> alias -> previous fragment
    -> current fragment -> clear pending

A crash before the alias write leaves the alias readable with the current
fragment; a crash after it leaves the alias readable with the pending
fragment; after the current fragment is written the cycle is complete.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from keyrotor.config.settings import RotationSettings
from keyrotor.crypto.key_material import KeyMaterial, generate_fragment
from keyrotor.crypto.obfuscator import encode, decode, DecodeError
from keyrotor.rotation.errors import VerificationFailure
from keyrotor.rotation.resolver import RecoveryResolver, Resolution
from keyrotor.storage.backend import ArtifactBackend, FileSystemBackend
from keyrotor.storage.fragments import FragmentStore
from keyrotor.storage.snapshots import SnapshotStore, PruneResult

logger = logging.getLogger(__name__)


class RotationState(Enum):
    """Where a rotation cycle currently is."""
    IDLE = "idle"
    RESOLVING = "resolving"
    GENERATING = "generating"
    ENCODING = "encoding"
    VERIFYING = "verifying"
    COMMITTING = "committing"
    PRUNING = "pruning"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RotationResult:
    """Outcome of one rotation cycle"""
    resolution: Resolution
    new_fragment: str
    artifact: str
    snapshot_name: Optional[str] = None
    committed: bool = False
    pruned: PruneResult = field(default_factory=PruneResult)

    @property
    def deleted_snapshots(self) -> List[str]:
        return self.pruned.deleted


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RotationEngine:
    """
    Runs rotation cycles against one artifact namespace.

    Example:
        settings = RotationSettings.from_config(config)
        result = RotationEngine(settings).run()
        print(result.snapshot_name)
    """

    def __init__(
        self,
        settings: RotationSettings,
        backend: Optional[ArtifactBackend] = None,
        clock: Callable[[], datetime] = utc_now,
        fragment_factory: Callable[[int], str] = generate_fragment
    ):
        """
        Args:
            settings: Runtime settings
            backend: Storage for artifacts and fragments (default: files
                under settings.root)
            clock: Returns the current instant
            fragment_factory: Produces a new fragment of the given length
        """
        self.settings = settings
        self.backend = backend or FileSystemBackend(settings.root)
        self.clock = clock
        self.fragment_factory = fragment_factory
        self.fragments = FragmentStore(
            self.backend,
            current_name=settings.current_fragment_name,
            previous_name=settings.previous_fragment_name,
            pending_name=settings.pending_fragment_name,
        )
        self.snapshots = SnapshotStore(
            self.backend,
            prefix=settings.prefix,
            alias_name=settings.alias_name,
            fallback_name=settings.fallback_name,
        )
        self.state = RotationState.IDLE

    def load_key_material(self) -> KeyMaterial:
        return self.fragments.load(self.settings.secret)

    def resolve(self, key_material: Optional[KeyMaterial] = None) -> Resolution:
        """
        Recover the current payload without changing anything.

        Raises:
            RecoveryExhausted: If no artifact/fragment pair decodes
        """
        if key_material is None:
            key_material = self.load_key_material()
        sources = [
            (self.settings.alias_name, self.snapshots.read_alias()),
            (self.settings.fallback_name, self.snapshots.read_fallback()),
        ]
        return RecoveryResolver(key_material).resolve(sources)

    def run(self, dry_run: bool = False, prune: bool = True) -> RotationResult:
        """
        Run one rotation cycle.

        Args:
            dry_run: Stop after verification without writing anything
            prune: Run the retention sweep after committing

        Returns:
            RotationResult

        Raises:
            ConfigError: If the secret fragment is missing
            RecoveryExhausted: If the payload cannot be recovered
            VerificationFailure: If the re-encoded artifact does not round trip
            OSError: If a commit write fails
        """
        try:
            return self._run(dry_run, prune)
        except Exception:
            logger.error(f"Rotation failed while {self.state.value}")
            self.state = RotationState.FAILED
            raise

    def _run(self, dry_run: bool, prune: bool) -> RotationResult:
        self.state = RotationState.RESOLVING
        key_material = self.load_key_material()
        resolution = self.resolve(key_material)

        self.state = RotationState.GENERATING
        new_fragment = self.fragment_factory(self.settings.fragment_length)
        new_key = key_material.key_for(new_fragment)

        self.state = RotationState.ENCODING
        artifact = encode(resolution.payload, new_key)

        self.state = RotationState.VERIFYING
        self._verify(artifact, new_key, resolution.payload)

        result = RotationResult(
            resolution=resolution,
            new_fragment=new_fragment,
            artifact=artifact,
        )

        if dry_run:
            logger.info("Dry run: verified new artifact, nothing written")
            self.state = RotationState.DONE
            return result

        self.state = RotationState.COMMITTING
        now = self.clock()
        outgoing = key_material.current or resolution.fragment

        self.fragments.write_pending(new_fragment)
        result.snapshot_name = self.snapshots.write_snapshot(artifact, now)
        self.snapshots.write_alias(artifact)
        self.fragments.write_previous(outgoing)
        self.fragments.write_current(new_fragment)
        self.fragments.clear_pending()
        result.committed = True

        logger.info(
            f"Wrote {result.snapshot_name}, updated {self.settings.alias_name}, "
            f"rotated {self.settings.current_fragment_name}, "
            f"stored {self.settings.previous_fragment_name}"
        )

        if prune:
            self.state = RotationState.PRUNING
            result.pruned = self.snapshots.prune(now)

        self.state = RotationState.DONE
        return result

    @staticmethod
    def _verify(artifact: str, key: str, payload: str) -> None:
        """Raise VerificationFailure unless artifact decodes back to payload."""
        try:
            check = decode(artifact, key)
        except DecodeError as e:
            raise VerificationFailure(f"Sanity decode failed after re-encode: {e}")
        if check != payload:
            raise VerificationFailure(
                "Sanity decode after re-encode did not reproduce the payload"
            )
