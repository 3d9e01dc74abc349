"""
Shared pytest fixtures and utilities for the keyrotor test suite.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Callable, Optional

import pytest
import yaml

from keyrotor.config.settings import RotationSettings
from keyrotor.crypto.obfuscator import encode
from keyrotor.storage.backend import FileSystemBackend

SECRET = "abc"
PAYLOAD = "eyJhIjoxfQ=="  # base64 of {"a":1}


@pytest.fixture
def artifact_root(tmp_path: Path) -> Path:
    """Directory holding artifacts and fragment files."""
    root = tmp_path / "published"
    root.mkdir()
    return root


@pytest.fixture
def settings(artifact_root: Path) -> RotationSettings:
    """Settings with the default names, rooted in the temp workspace."""
    return RotationSettings(secret=SECRET, root=artifact_root)


@pytest.fixture
def backend(artifact_root: Path) -> FileSystemBackend:
    return FileSystemBackend(artifact_root)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to 2025-03-15 12:00 UTC."""
    moment = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def seed_workspace(artifact_root: Path) -> Callable[..., None]:
    """
    Write artifacts and fragment files into the temp workspace.

    Usage:
        seed_workspace(alias_fragment="XYZ1", current="XYZ1")
    """

    def _builder(
        alias_fragment: Optional[str] = None,
        fallback_fragment: Optional[str] = None,
        current: Optional[str] = None,
        previous: Optional[str] = None,
        pending: Optional[str] = None,
        payload: str = PAYLOAD,
        secret: str = SECRET,
    ) -> None:
        if alias_fragment is not None:
            (artifact_root / "latest.json").write_text(encode(payload, secret + alias_fragment))
        if fallback_fragment is not None:
            (artifact_root / "paidappsecure_encoded_base64.json").write_text(
                encode(payload, secret + fallback_fragment)
            )
        for name, value in (
            ("key_b.txt", current),
            ("prev_key_b.txt", previous),
            ("next_key_b.txt", pending),
        ):
            if value is not None:
                (artifact_root / name).write_text(value)

    return _builder


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a keyrotor.yaml in a temp directory.

    Usage:
        path = make_config({"keys": {"fragment_length": 24}})
    """

    def _builder(overrides: Optional[Dict[str, Any]] = None) -> Path:
        base = {
            "artifacts": {"root": str(tmp_path / "published")},
            "logging": {"console": False},
        }
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "keyrotor.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
