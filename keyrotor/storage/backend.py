"""
Artifact storage backends

Artifacts and key fragment files are addressed by plain names. Any store
that can read, write, list and delete by name can hold them; the default
keeps them as files in a single directory.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class ArtifactBackend(ABC):
    """Name-addressed text storage"""

    @abstractmethod
    def read_text(self, name: str) -> Optional[str]:
        """Return the stored text, or None if nothing is stored under name."""

    @abstractmethod
    def write_text(self, name: str, text: str) -> None:
        """Store text under name, replacing any previous content."""

    @abstractmethod
    def list_names(self) -> List[str]:
        """Names of everything currently stored."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """
        Remove name.

        Raises:
            FileNotFoundError: If nothing is stored under name
            OSError: If removal fails
        """


class FileSystemBackend(ArtifactBackend):
    """
    Stores each artifact as a file directly under a root directory.

    Writes go to a temporary sibling first and are renamed into place, so a
    reader never sees a half-written artifact.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        return self.root / name

    def read_text(self, name: str) -> Optional[str]:
        path = self._path(name)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.debug(f"Not found: {path}")
            return None

    def write_text(self, name: str, text: str) -> None:
        path = self._path(name)
        temp_file = path.with_name(f".{path.name}.tmp")

        self.root.mkdir(parents=True, exist_ok=True)
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            temp_file.replace(path)
        except OSError:
            if temp_file.exists():
                temp_file.unlink()
            raise

        logger.debug(f"Wrote {path}")

    def list_names(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def delete(self, name: str) -> None:
        self._path(name).unlink()
        logger.debug(f"Deleted {self._path(name)}")
