#!/usr/bin/env python3
"""
Artifact Seed Utility

Seeds an artifact namespace with its first fallback artifact, alias and
current key fragment, or verifies that the existing ones still decode.
Rotation can only start from a seeded namespace, and a namespace whose
alias and fallback no longer decode must be reseeded by hand.

Usage:
    # Seed from a JSON document (PART_A must be set)
    python -m keyrotor.tools.seed_artifact payload.json

    # Verify the published artifacts decode with the stored fragments
    python -m keyrotor.tools.seed_artifact --verify

The payload is stored as padded base64 of the JSON text. Artifacts seeded
by hand must use the same form: unpadded base64 (e.g. "eyJhIjoxfQ" instead
of "eyJhIjoxfQ==") or a document that is not UTF-8 text will not decode.

SECURITY NOTE: The printed verification output contains the decoded
payload. Run this only where the payload may be displayed.
"""

import argparse
import base64
import json
import sys
from pathlib import Path
from typing import Optional

from keyrotor.config.loader import load_config, ConfigError
from keyrotor.config.settings import RotationSettings
from keyrotor.config.validator import validate_config, ValidationError
from keyrotor.crypto.key_material import generate_fragment
from keyrotor.crypto.obfuscator import encode
from keyrotor.rotation.engine import RotationEngine
from keyrotor.rotation.errors import RotationError
from keyrotor.storage.backend import ArtifactBackend, FileSystemBackend
from keyrotor.storage.fragments import FragmentStore
from keyrotor.storage.snapshots import SnapshotStore


def seed(
    settings: RotationSettings,
    document: str,
    backend: Optional[ArtifactBackend] = None,
    fragment: Optional[str] = None
) -> str:
    """
    Write fallback, alias and current fragment for a JSON document.

    Args:
        settings: Runtime settings
        document: JSON text of the payload
        backend: Storage (default: files under settings.root)
        fragment: Rotating fragment to use (default: freshly generated)

    Returns:
        The fragment the artifacts were encoded with

    Raises:
        ValueError: If document is not valid JSON
    """
    json.loads(document)

    if backend is None:
        backend = FileSystemBackend(settings.root)
    if fragment is None:
        fragment = generate_fragment(settings.fragment_length)

    payload = base64.b64encode(document.encode('utf-8')).decode('ascii')
    artifact = encode(payload, settings.secret + fragment)

    snapshots = SnapshotStore(
        backend,
        prefix=settings.prefix,
        alias_name=settings.alias_name,
        fallback_name=settings.fallback_name,
    )
    fragments = FragmentStore(
        backend,
        current_name=settings.current_fragment_name,
        previous_name=settings.previous_fragment_name,
        pending_name=settings.pending_fragment_name,
    )

    snapshots.write_fallback(artifact)
    snapshots.write_alias(artifact)
    fragments.write_current(fragment)
    return fragment


def verify(settings: RotationSettings, backend: Optional[ArtifactBackend] = None) -> str:
    """
    Decode the published payload back to its JSON text.

    Raises:
        RecoveryExhausted: If nothing decodes
    """
    resolution = RotationEngine(settings, backend=backend).resolve()
    return base64.b64decode(resolution.payload).decode('utf-8')


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Seed or verify rotating artifacts"
    )
    parser.add_argument(
        "payload",
        nargs="?",
        type=Path,
        help="JSON document to seed the namespace with",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Path to keyrotor.yaml (default: ./keyrotor.yaml if present)",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Verify existing artifacts instead of seeding new ones",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        validate_config(config)
        settings = RotationSettings.from_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.verify:
        try:
            document = verify(settings)
        except RotationError as e:
            print(f"✗ Error: {e}", file=sys.stderr)
            return 1
        print("✓ Published artifact decodes:")
        print(document)
        return 0

    if args.payload is None:
        parser.error("a payload file is required unless --verify is given")

    try:
        fragment = seed(settings, args.payload.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Seeded {settings.fallback_name} and {settings.alias_name}")
    print(f"  {settings.current_fragment_name}: {'*' * len(fragment)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
