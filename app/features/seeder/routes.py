"""FastAPI routes for seeder operations.

Admin endpoints to seed and clear the demo dataset. Errors surface as
RFC 7807 problem details through the registered exception handlers.
"""

from fastapi import APIRouter, status

from app.features.seeder import schemas, service

router = APIRouter(prefix="/seeder", tags=["seeder"])


@router.get(
    "/stats",
    response_model=schemas.SeederStats,
    summary="Get demo dataset stats",
    description="Returns the number of demo records per collection. Does not contact the store.",
)
async def get_stats() -> schemas.SeederStats:
    """Get demo dataset record counts."""
    return service.get_stats()


@router.post(
    "/seed",
    response_model=schemas.SeedRunResult,
    status_code=status.HTTP_200_OK,
    summary="Seed demo data",
    description="Write every demo record to its collection. Per-record failures are reported, not raised.",
)
async def seed_demo_data() -> schemas.SeedRunResult:
    """Seed the demo dataset.

    Returns:
        SeedRunResult with per-collection counts and the error log.
    """
    return await service.seed_demo_data()


@router.post(
    "/clear",
    response_model=schemas.SeedRunResult,
    summary="Clear demo data",
    description="Delete only records tagged as demo data. Use dry_run to preview.",
)
async def clear_demo_data(
    params: schemas.ClearParams | None = None,
) -> schemas.SeedRunResult:
    """Clear demo-tagged records.

    Args:
        params: Clear parameters; an empty body clears for real.

    Returns:
        SeedRunResult with deleted counts.
    """
    return await service.clear_demo_data(params or schemas.ClearParams())
