"""Immutable runtime settings built once from the validated configuration."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any

from keyrotor.config.loader import ConfigError, get_config_value


@dataclass(frozen=True)
class RotationSettings:
    """Everything one rotation cycle needs to know about its environment."""
    secret: str
    fragment_length: int = 16
    root: Path = Path('.')
    prefix: str = 'paidappsecure_'
    alias_name: str = 'latest.json'
    fallback_name: str = 'paidappsecure_encoded_base64.json'
    current_fragment_name: str = 'key_b.txt'
    previous_fragment_name: str = 'prev_key_b.txt'
    pending_fragment_name: str = 'next_key_b.txt'

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'RotationSettings':
        """
        Build settings from a loaded (and validated) configuration dict.

        Raises:
            ConfigError: If the secret fragment is missing
        """
        secret = get_config_value(config, 'keys.secret')
        if not secret:
            raise ConfigError("Missing secret key fragment (set PART_A)")

        return cls(
            secret=secret,
            fragment_length=get_config_value(config, 'keys.fragment_length', 16),
            root=Path(get_config_value(config, 'artifacts.root', '.')).expanduser(),
            prefix=get_config_value(config, 'artifacts.prefix', 'paidappsecure_'),
            alias_name=get_config_value(config, 'artifacts.alias', 'latest.json'),
            fallback_name=get_config_value(config, 'artifacts.fallback', 'paidappsecure_encoded_base64.json'),
            current_fragment_name=get_config_value(config, 'keys.current_file', 'key_b.txt'),
            previous_fragment_name=get_config_value(config, 'keys.previous_file', 'prev_key_b.txt'),
            pending_fragment_name=get_config_value(config, 'keys.pending_file', 'next_key_b.txt'),
        )
