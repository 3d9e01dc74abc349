"""
Snapshot and alias artifacts

Each successful rotation publishes a snapshot named after the UTC date
(``<prefix>YYYYMMDD.json``) and a copy of it under a fixed alias name.
Snapshots are pruned once their date is more than ten days old.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from keyrotor.rotation.errors import RetentionDeleteError
from keyrotor.storage.backend import ArtifactBackend

logger = logging.getLogger(__name__)

RETENTION = timedelta(days=10)


@dataclass
class PruneResult:
    """Outcome of one retention sweep"""
    deleted: List[str] = field(default_factory=list)
    failed: List[RetentionDeleteError] = field(default_factory=list)


class SnapshotStore:
    """Handles dated snapshots, the alias and the fallback artifact"""

    def __init__(
        self,
        backend: ArtifactBackend,
        prefix: str = 'paidappsecure_',
        alias_name: str = 'latest.json',
        fallback_name: str = 'paidappsecure_encoded_base64.json',
        retention: timedelta = RETENTION
    ):
        self.backend = backend
        self.prefix = prefix
        self.alias_name = alias_name
        self.fallback_name = fallback_name
        self.retention = retention
        self._pattern = re.compile(rf'^{re.escape(prefix)}(\d{{8}})\.json$')

    def snapshot_name(self, day: date) -> str:
        """Snapshot name for a UTC calendar date."""
        return f"{self.prefix}{day.strftime('%Y%m%d')}.json"

    def write_snapshot(self, artifact: str, now: datetime) -> str:
        """
        Write today's snapshot.

        Args:
            artifact: Encoded artifact text
            now: Current instant (converted to UTC for the date)

        Returns:
            Name the snapshot was written under
        """
        name = self.snapshot_name(_to_utc(now).date())
        self.backend.write_text(name, artifact)
        logger.info(f"Wrote snapshot {name}")
        return name

    def read_alias(self) -> Optional[str]:
        return self.backend.read_text(self.alias_name)

    def write_alias(self, artifact: str) -> None:
        self.backend.write_text(self.alias_name, artifact)
        logger.info(f"Updated alias {self.alias_name}")

    def read_fallback(self) -> Optional[str]:
        return self.backend.read_text(self.fallback_name)

    def write_fallback(self, artifact: str) -> None:
        self.backend.write_text(self.fallback_name, artifact)
        logger.info(f"Wrote fallback {self.fallback_name}")

    def list_snapshots(self) -> List[Tuple[str, date]]:
        """
        List dated snapshots

        Returns:
            (name, date) pairs sorted oldest first. The alias, the fallback
            and names whose digits are not a real date are excluded.
        """
        snapshots = []
        for name in self.backend.list_names():
            if name in (self.alias_name, self.fallback_name):
                continue
            match = self._pattern.match(name)
            if not match:
                continue
            try:
                day = datetime.strptime(match.group(1), '%Y%m%d').date()
            except ValueError:
                logger.warning(f"Ignoring snapshot with invalid date: {name}")
                continue
            snapshots.append((name, day))

        snapshots.sort(key=lambda item: item[1])
        return snapshots

    def is_expired(self, day: date, now: datetime) -> bool:
        """True if the snapshot's UTC midnight is more than the retention window ago."""
        midnight = datetime.combine(day, time.min, tzinfo=timezone.utc)
        return _to_utc(now) - midnight > self.retention

    def prune(self, now: datetime) -> PruneResult:
        """
        Delete snapshots older than the retention window

        Deletion failures are logged and collected, never raised: by the time
        the sweep runs the rotation has already committed.

        Args:
            now: Current instant

        Returns:
            PruneResult with deleted names and per-file failures
        """
        result = PruneResult()

        for name, day in self.list_snapshots():
            if not self.is_expired(day, now):
                continue
            try:
                self.backend.delete(name)
            except FileNotFoundError:
                logger.debug(f"Expired snapshot already gone: {name}")
                continue
            except OSError as e:
                error = RetentionDeleteError(name, e)
                logger.warning(str(error))
                result.failed.append(error)
                continue
            logger.info(f"Deleted old snapshot: {name}")
            result.deleted.append(name)

        if result.deleted:
            logger.info(f"Cleaned up {len(result.deleted)} expired snapshot(s)")

        return result


def _to_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
