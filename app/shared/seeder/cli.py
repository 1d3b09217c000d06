"""Demo-data seeder CLI.

Seed the ClaimCheck demo dataset into the Supabase store, or clear it again.

Usage:
    # Seed all collections (no flags needed)
    uv run python scripts/seed_demo_data.py

    # Remove only records tagged as demo data
    uv run python scripts/seed_demo_data.py --clear

    # Preview what --clear would remove
    uv run python scripts/seed_demo_data.py --clear --dry-run

    # Show how many records the dataset holds per collection
    uv run python scripts/seed_demo_data.py --stats

Credentials are read from the environment (or .env):
    SUPABASE_URL (or VITE_SUPABASE_URL), SUPABASE_SERVICE_ROLE_KEY
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.core.exceptions import ConfigurationError, DatasetError
from app.core.logging import configure_logging
from app.shared.seeder.config import SeederConfig
from app.shared.seeder.core import dataset_stats, open_seeder
from app.shared.seeder.dataset import get_dataset
from app.shared.seeder.report import SeederResult


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="ClaimCheck demo-data seeder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed demo users, validation/sentiment history and settings
  seed_demo_data.py

  # Preview the records --clear would delete
  seed_demo_data.py --clear --dry-run

  # Seed from a custom dataset document
  seed_demo_data.py --dataset path/to/demo_data.json
        """,
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--clear",
        action="store_true",
        help="Delete records tagged as demo data (real user data is never touched)",
    )
    mode_group.add_argument(
        "--stats",
        action="store_true",
        help="Show dataset record counts per collection",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="With --clear: list what would be deleted without deleting",
    )
    parser.add_argument(
        "--dataset",
        type=Path,
        help="Load the demo dataset from this JSON file instead of the bundled one",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed logging",
    )

    return parser


def print_banner() -> None:
    """Print the seeder banner."""
    print()
    print("=" * 60)
    print("  ClaimCheck - Demo Data Seeder")
    print("=" * 60)
    print()


def print_counts(counts: dict[str, int], title: str) -> None:
    """Print per-collection counts in a formatted way."""
    print(f"\n{title}:")
    print("-" * 40)
    for name, count in counts.items():
        print(f"  {name:<30} {count:>8,}")
    print("-" * 40)
    print(f"  {'Total':<30} {sum(counts.values()):>8,}")
    print()


def print_result(result: SeederResult, title: str) -> None:
    """Print per-collection success counts, failures and itemized errors."""
    print_counts(result.counts, title)

    if result.total_failed:
        print(f"  Total failed: {result.total_failed:,}")
        print()

    if result.errors:
        print("Errors encountered:")
        for error in result.errors:
            print(f"  - {error}")
        print()

    print(result.message)


def _production_blocked(settings: Settings) -> bool:
    if settings.is_production and not settings.seeder_allow_production:
        print("ERROR: Cannot run seeder in production environment.")
        print("Set SEEDER_ALLOW_PRODUCTION=true to override (not recommended).")
        return True
    return False


def run_stats(settings: Settings) -> int:
    """Show dataset record counts."""
    config = SeederConfig.from_settings(settings)
    dataset = get_dataset(config.dataset_path)
    print_counts(dataset_stats(dataset, config.collections), title="Demo Dataset")
    return 0


async def run_seed(settings: Settings) -> int:
    """Seed every collection."""
    if _production_blocked(settings):
        return 1

    async with open_seeder(settings) as seeder:
        print(f"Seeding {sum(seeder.stats().values()):,} records...")
        result = await seeder.seed()

    print_result(result, title="Seeding Summary")
    return result.exit_code


async def run_clear(settings: Settings, dry_run: bool) -> int:
    """Clear demo-tagged records."""
    if _production_blocked(settings):
        return 1

    if dry_run:
        print("DRY RUN - No data will be deleted")

    async with open_seeder(settings) as seeder:
        result = await seeder.clear(dry_run=dry_run)

    print_result(result, title="Would delete" if dry_run else "Deleted")
    return result.exit_code


async def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 when every record succeeded, 1 on any record error or fatal error.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.dry_run and not args.clear:
        parser.error("--dry-run can only be used with --clear")

    configure_logging(
        "DEBUG" if args.verbose else "ERROR",
        log_format="console",
        stream=sys.stderr,
    )
    print_banner()

    try:
        settings = get_settings()
        if args.dataset:
            settings = settings.model_copy(update={"seeder_dataset_path": str(args.dataset)})

        if args.stats:
            return run_stats(settings)
        if args.clear:
            return await run_clear(settings, dry_run=args.dry_run)
        return await run_seed(settings)
    except ValidationError as e:
        print("ERROR: Invalid configuration:")
        for error in e.errors():
            field_name = ".".join(str(part) for part in error["loc"])
            print(f"  - {field_name}: {error['msg']}")
        return 1
    except ConfigurationError as e:
        print(f"ERROR: {e.message}")
        if "missing" in e.details:
            print("Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in the environment or .env.")
        return 1
    except DatasetError as e:
        print(f"ERROR: {e.message}")
        return 1
    except Exception as e:
        print(f"\nFatal error: {e}")
        return 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
