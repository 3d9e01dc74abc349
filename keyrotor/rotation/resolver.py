"""Recover the payload from whichever artifact and fragment still fit together."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from keyrotor.crypto.key_material import KeyMaterial
from keyrotor.crypto.obfuscator import try_decode
from keyrotor.rotation.errors import RecoveryExhausted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """A successfully recovered payload and where it came from."""
    payload: str
    source: str
    fragment_label: str
    fragment: str


class RecoveryResolver:
    """
    Tries every (artifact source x key fragment) pair in priority order.

    Sources are tried in the order given (normally alias, then fallback) and,
    within a source, every fragment from KeyMaterial.candidates() before
    moving to the next source. The first pair that decodes wins.
    """

    def __init__(self, key_material: KeyMaterial):
        self.key_material = key_material

    def resolve(self, sources: Sequence[Tuple[str, Optional[str]]]) -> Resolution:
        """
        Recover the payload.

        Args:
            sources: (name, artifact text or None if missing) in priority order

        Returns:
            Resolution for the first pair that decoded

        Raises:
            RecoveryExhausted: If no source exists or no pair decodes
        """
        available = [(name, text) for name, text in sources if text]
        if not available:
            names = ' and '.join(name for name, _ in sources) or 'artifacts'
            raise RecoveryExhausted(
                f"Missing both {names}. Seed the store with a working artifact."
            )

        candidates = self.key_material.candidates()
        tried: List[str] = []

        for source_name, artifact in available:
            for label, fragment in candidates:
                payload = try_decode(artifact, self.key_material.key_for(fragment))
                if payload is not None:
                    logger.info(f"Decoded OK from {source_name} using {label} fragment")
                    return Resolution(
                        payload=payload,
                        source=source_name,
                        fragment_label=label,
                        fragment=fragment,
                    )
                tried.append(f"{source_name}+{label}")
                logger.debug(f"Could not decode {source_name} with {label} fragment")

        raise RecoveryExhausted(
            "Could not decode any artifact with the available key fragments "
            f"(tried: {', '.join(tried) or 'none'}). "
            "Reseed the key fragment file and the fallback artifact."
        )
