"""Service layer for seeder operations."""

from __future__ import annotations

import time

from app.core.config import get_settings
from app.core.exceptions import ForbiddenError
from app.core.logging import get_logger
from app.features.seeder import schemas
from app.shared.seeder import SeederConfig, SeederResult, dataset_stats, get_dataset, open_seeder

logger = get_logger(__name__)


def _check_seeder_enabled() -> None:
    """Check if seeder operations are allowed in current environment.

    Raises:
        ForbiddenError: If the seeder is disabled in production.
    """
    settings = get_settings()
    if settings.is_production and not settings.seeder_allow_production:
        raise ForbiddenError(
            "Seeder operations are not allowed in production environment. "
            "Set SEEDER_ALLOW_PRODUCTION=true to enable (not recommended).",
            details={"app_env": settings.app_env},
        )


def _to_schema(result: SeederResult, started: float, dry_run: bool = False) -> schemas.SeedRunResult:
    return schemas.SeedRunResult(
        success=result.success,
        message=result.message,
        errors=result.errors,
        counts=result.counts,
        failed=result.total_failed,
        dry_run=dry_run,
        duration_seconds=round(time.perf_counter() - started, 3),
    )


def get_stats() -> schemas.SeederStats:
    """Dataset record counts per collection. Does not contact the store."""
    config = SeederConfig.from_settings()
    counts = dataset_stats(get_dataset(config.dataset_path), config.collections)
    return schemas.SeederStats(counts=counts, total=sum(counts.values()))


async def seed_demo_data() -> schemas.SeedRunResult:
    """Seed the demo dataset into the store.

    Returns:
        SeedRunResult with per-collection counts and the error log.

    Raises:
        ForbiddenError: If blocked in production.
        ConfigurationError: If store credentials are missing.
    """
    _check_seeder_enabled()
    started = time.perf_counter()

    logger.info("seeder.api.seed_started")
    async with open_seeder() as seeder:
        result = await seeder.seed()

    response = _to_schema(result, started)
    logger.info(
        "seeder.api.seed_completed",
        success=response.success,
        failed=response.failed,
        duration_seconds=response.duration_seconds,
    )
    return response


async def clear_demo_data(params: schemas.ClearParams) -> schemas.SeedRunResult:
    """Delete demo-tagged records.

    Args:
        params: Clear parameters.

    Returns:
        SeedRunResult with deleted (or deletable, on dry run) counts.

    Raises:
        ForbiddenError: If blocked in production.
        ConfigurationError: If store credentials are missing.
    """
    _check_seeder_enabled()
    started = time.perf_counter()

    logger.info("seeder.api.clear_started", dry_run=params.dry_run)
    async with open_seeder() as seeder:
        result = await seeder.clear(dry_run=params.dry_run)

    response = _to_schema(result, started, dry_run=params.dry_run)
    logger.info(
        "seeder.api.clear_completed",
        success=response.success,
        dry_run=params.dry_run,
        failed=response.failed,
        duration_seconds=response.duration_seconds,
    )
    return response
