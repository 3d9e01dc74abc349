"""Configuration loading and parsing."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Mapping


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


DEFAULT_CONFIG_NAME = "keyrotor.yaml"

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    'PART_A': ('keys', 'secret', str),
    'PART_B_LENGTH': ('keys', 'fragment_length', int),
    'KEYB_PATH': ('keys', 'current_file', str),
    'PREV_KEYB': ('keys', 'previous_file', str),
    'PENDING_KEYB': ('keys', 'pending_file', str),
    'ARTIFACT_ROOT': ('artifacts', 'root', str),
    'FILE_PREFIX': ('artifacts', 'prefix', str),
    'OUTER_ALIAS': ('artifacts', 'alias', str),
    'FALLBACK_OUTER': ('artifacts', 'fallback', str),
    'LOG_LEVEL': ('logging', 'level', str),
}

DEFAULTS = {
    'keys': {
        'fragment_length': 16,
        'current_file': 'key_b.txt',
        'previous_file': 'prev_key_b.txt',
        'pending_file': 'next_key_b.txt',
    },
    'artifacts': {
        'root': '.',
        'prefix': 'paidappsecure_',
        'alias': 'latest.json',
        'fallback': 'paidappsecure_encoded_base64.json',
    },
    'logging': {
        'level': 'INFO',
        'console': True,
        'file': None,
    },
}


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """
    Load configuration from an optional YAML file and the environment.

    Environment variables take precedence over file values, and file values
    over built-in defaults. The secret fragment is normally provided only
    through ``PART_A``.

    Args:
        config_path: Path to a YAML file. If None, ./keyrotor.yaml is used
            when present, otherwise only environment and defaults apply.
        environ: Environment mapping (default: os.environ)

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigError: If the config file cannot be loaded or parsed, or an
            environment value has the wrong type
    """
    if environ is None:
        environ = os.environ

    config = _load_file(config_path)

    for section, values in DEFAULTS.items():
        if config.get(section) is None:
            config[section] = {}
        if not isinstance(config[section], dict):
            raise ConfigError(f"Configuration section '{section}' must be a dictionary")
        for key, value in values.items():
            config[section].setdefault(key, value)

    for env_name, (section, key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == '':
            continue
        try:
            config[section][key] = convert(raw)
        except ValueError:
            raise ConfigError(f"Environment variable {env_name} has an invalid value: {raw!r}")

    return config


def _load_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Read the YAML file, or return an empty dict if none is configured."""
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return {}
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}")

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ConfigError("Configuration file must contain a YAML dictionary")

    return config


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., 'artifacts.alias')
        default: Default value if path not found

    Returns:
        Configuration value or default

    Example:
        >>> get_config_value(config, 'keys.fragment_length')
        16
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
