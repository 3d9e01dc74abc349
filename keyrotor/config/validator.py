"""Configuration validation."""

import logging
from typing import Dict, Any, List

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    errors.extend(_validate_keys(config.get('keys', {})))
    errors.extend(_validate_artifacts(config.get('artifacts', {})))
    errors.extend(_validate_logging(config.get('logging', {})))

    # File names must not collide, or one write would clobber another
    names = [
        config.get('keys', {}).get('current_file'),
        config.get('keys', {}).get('previous_file'),
        config.get('keys', {}).get('pending_file'),
        config.get('artifacts', {}).get('alias'),
        config.get('artifacts', {}).get('fallback'),
    ]
    present = [n for n in names if isinstance(n, str) and n]
    if len(set(present)) != len(present):
        errors.append("key files, alias and fallback must all use distinct names")

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_name(section: str, key: str, value: Any) -> List[str]:
    """Validate a plain artifact/file name (no directory components)."""
    if not isinstance(value, str) or not value.strip():
        return [f"{section}.{key} must be a non-empty string"]
    if '/' in value or '\\' in value:
        return [f"{section}.{key} must be a bare file name: {value}"]
    return []


def _validate_keys(section: Dict[str, Any]) -> List[str]:
    """Validate key material section."""
    errors = []

    secret = section.get('secret')
    if not secret:
        errors.append("keys.secret is required (set PART_A in the environment)")
    elif not isinstance(secret, str):
        errors.append("keys.secret must be a string")

    length = section.get('fragment_length', 16)
    if not isinstance(length, int) or isinstance(length, bool):
        errors.append("keys.fragment_length must be an integer")
    elif length < 1 or length > 256:
        errors.append("keys.fragment_length must be between 1 and 256")

    for key in ('current_file', 'previous_file', 'pending_file'):
        errors.extend(_validate_name('keys', key, section.get(key)))

    return errors


def _validate_artifacts(section: Dict[str, Any]) -> List[str]:
    """Validate artifact naming section."""
    errors = []

    root = section.get('root', '.')
    if not isinstance(root, str) or not root:
        errors.append("artifacts.root must be a directory path")

    prefix = section.get('prefix')
    if not isinstance(prefix, str) or not prefix:
        errors.append("artifacts.prefix must be a non-empty string")
    elif '/' in prefix or '\\' in prefix:
        errors.append(f"artifacts.prefix must not contain path separators: {prefix}")

    for key in ('alias', 'fallback'):
        errors.extend(_validate_name('artifacts', key, section.get(key)))

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging options section."""
    errors = []

    level = section.get('level', 'INFO')
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
    if not isinstance(level, str) or level.upper() not in valid_levels:
        errors.append(f"logging.level must be one of: {', '.join(valid_levels)}")

    console = section.get('console', True)
    if not isinstance(console, bool):
        errors.append("logging.console must be a boolean")

    if 'file' in section and section['file'] is not None:
        if not isinstance(section['file'], str):
            errors.append("logging.file must be a string path or null")

    return errors
