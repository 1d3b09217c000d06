#!/usr/bin/env python
"""Seed or clear ClaimCheck demo data.

Usage:
    uv run python scripts/seed_demo_data.py
    uv run python scripts/seed_demo_data.py --clear [--dry-run]
    uv run python scripts/seed_demo_data.py --stats
"""

import asyncio
import sys

from app.shared.seeder.cli import main

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
