"""Artifact, snapshot and key fragment storage."""

from .backend import ArtifactBackend, FileSystemBackend
from .fragments import FragmentStore
from .snapshots import SnapshotStore, PruneResult, RETENTION

__all__ = [
    "ArtifactBackend",
    "FileSystemBackend",
    "FragmentStore",
    "SnapshotStore",
    "PruneResult",
    "RETENTION",
]
