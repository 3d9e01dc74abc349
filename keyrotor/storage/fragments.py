"""Rotating key fragment files (current, previous and pending)."""

import logging
from typing import Optional

from keyrotor.crypto.key_material import KeyMaterial
from keyrotor.storage.backend import ArtifactBackend

logger = logging.getLogger(__name__)


class FragmentStore:
    """
    Reads and writes the rotating fragment files.

    Fragment values are never logged, only which file changed.
    """

    def __init__(
        self,
        backend: ArtifactBackend,
        current_name: str = 'key_b.txt',
        previous_name: str = 'prev_key_b.txt',
        pending_name: str = 'next_key_b.txt'
    ):
        self.backend = backend
        self.current_name = current_name
        self.previous_name = previous_name
        self.pending_name = pending_name

    def _read(self, name: str) -> Optional[str]:
        text = self.backend.read_text(name)
        if text is None:
            return None
        return text.strip() or None

    def load(self, secret: str) -> KeyMaterial:
        """
        Load every stored fragment into KeyMaterial.

        Raises:
            ConfigError: If secret is empty
        """
        material = KeyMaterial(
            secret=secret,
            current=self._read(self.current_name),
            previous=self._read(self.previous_name),
            pending=self._read(self.pending_name),
        )
        if material.current is None:
            logger.warning(f"No current key fragment found in {self.current_name}")
        return material

    def write_current(self, fragment: str) -> None:
        self.backend.write_text(self.current_name, fragment)
        logger.debug(f"Updated {self.current_name}")

    def write_previous(self, fragment: str) -> None:
        self.backend.write_text(self.previous_name, fragment)
        logger.debug(f"Updated {self.previous_name}")

    def write_pending(self, fragment: str) -> None:
        self.backend.write_text(self.pending_name, fragment)
        logger.debug(f"Staged new fragment in {self.pending_name}")

    def clear_pending(self) -> bool:
        """
        Remove the staged fragment.

        Returns:
            True if it was removed or already absent, False if removal failed
        """
        try:
            self.backend.delete(self.pending_name)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove {self.pending_name}: {e}")
            return False
        return True
