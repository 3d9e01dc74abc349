"""Two-part key material: fixed secret fragment plus rotating fragments."""

import secrets
from dataclasses import dataclass
from typing import List, Optional, Tuple

from keyrotor.config.loader import ConfigError

# Base58: no 0/O or I/l, so a fragment survives being read aloud or retyped
FRAGMENT_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
DEFAULT_FRAGMENT_LENGTH = 16

CURRENT = 'current'
PREVIOUS = 'previous'
PENDING = 'pending'


def generate_fragment(length: int = DEFAULT_FRAGMENT_LENGTH) -> str:
    """
    Generate a new rotating fragment.

    Args:
        length: Number of characters (default: 16)

    Returns:
        Random fragment drawn from FRAGMENT_ALPHABET

    Raises:
        ValueError: If length is less than 1
    """
    if length < 1:
        raise ValueError(f"Fragment length must be positive, got {length}")
    return ''.join(secrets.choice(FRAGMENT_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class KeyMaterial:
    """
    Secret fragment plus the rotating fragments available for recovery.

    ``current`` is the public-facing fragment, ``previous`` the one it
    replaced, and ``pending`` a fragment staged by a rotation that has not
    finished committing.
    """
    secret: str
    current: Optional[str] = None
    previous: Optional[str] = None
    pending: Optional[str] = None

    def __post_init__(self):
        if not self.secret:
            raise ConfigError("Missing secret key fragment (set PART_A)")

    def key_for(self, fragment: str) -> str:
        """Full XOR key for a rotating fragment."""
        return self.secret + fragment

    def candidates(self) -> List[Tuple[str, str]]:
        """
        Rotating fragments to try, in priority order.

        Returns:
            List of (label, fragment); absent fragments are skipped and a
            fragment equal to an earlier one keeps the earlier label
        """
        ordered = [
            (CURRENT, self.current),
            (PREVIOUS, self.previous),
            (PENDING, self.pending),
        ]
        result = []
        seen = set()
        for label, fragment in ordered:
            if not fragment or fragment in seen:
                continue
            seen.add(fragment)
            result.append((label, fragment))
        return result
