"""Command-line interface for keyrotor."""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)

from keyrotor import __version__
from keyrotor.config.loader import load_config, ConfigError
from keyrotor.config.validator import validate_config, ValidationError
from keyrotor.config.settings import RotationSettings
from keyrotor.rotation.engine import RotationEngine, RotationResult
from keyrotor.rotation.errors import RotationError


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='keyrotor',
        description='Rotate the key fragment of an obfuscated payload and publish it',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rotate using PART_A from the environment, artifacts in the current directory
  PART_A=... keyrotor

  # Artifacts live elsewhere
  keyrotor --root /srv/published

  # Recover and re-encode in memory only
  keyrotor --dry-run

  # Only check that the published artifact still decodes
  keyrotor --check

  # Use custom config file
  keyrotor --config /path/to/keyrotor.yaml
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to keyrotor.yaml (default: ./keyrotor.yaml if present)'
    )

    parser.add_argument(
        '--root',
        type=Path,
        metavar='DIR',
        help='Directory holding artifacts and key fragment files. Overrides config.'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Recover, re-encode and verify without writing anything.'
    )

    parser.add_argument(
        '--check',
        action='store_true',
        help='Only verify that the published artifact decodes.'
    )

    parser.add_argument(
        '--no-prune',
        action='store_true',
        help='Skip the retention sweep of old snapshots.'
    )

    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Do not print the summary table.'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    level_str = (logging_config.get('level') or 'INFO').upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def print_summary(result: RotationResult, settings: RotationSettings,
                  console: Optional[Console] = None) -> None:
    """Print a summary table of a rotation cycle."""
    console = console or Console()

    table = Table(title="Rotation Summary", box=box.SIMPLE, show_header=False)
    table.add_column("Item", style="bold")
    table.add_column("Value")

    resolution = result.resolution
    table.add_row("Recovered from", f"{resolution.source} ({resolution.fragment_label} fragment)")
    if result.committed:
        table.add_row("Snapshot", result.snapshot_name or "-")
        table.add_row("Alias", settings.alias_name)
        table.add_row("Fragment", f"{settings.current_fragment_name} rotated")
        deleted = ', '.join(result.pruned.deleted) or 'none'
        table.add_row("Pruned", deleted)
        if result.pruned.failed:
            table.add_row(
                "Prune failures",
                ', '.join(err.name for err in result.pruned.failed),
                style="yellow"
            )
    else:
        table.add_row("Mode", "dry run (nothing written)")

    console.print(table)


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for keyrotor CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.root is not None:
            config['artifacts']['root'] = str(args.root)
        validate_config(config)
        settings = RotationSettings.from_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error loading config: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    engine = RotationEngine(settings)

    try:
        if args.check:
            resolution = engine.resolve()
            print(
                f"{resolution.source} decodes with the {resolution.fragment_label} fragment"
            )
            return 0

        result = engine.run(dry_run=args.dry_run, prune=not args.no_prune)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except RotationError as e:
        print(f"Rotation failed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nRotation interrupted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"\nFatal error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print_summary(result, settings)

    return 0


if __name__ == '__main__':
    sys.exit(main())
