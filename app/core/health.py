"""Liveness and readiness probes."""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.exceptions import DatasetError
from app.core.logging import get_logger
from app.shared.seeder.dataset import get_dataset

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Probe result. Readiness adds the state of each seeder prerequisite."""

    status: Literal["ok", "degraded"]
    store: Literal["configured", "unconfigured"] | None = None
    dataset: Literal["ok", "invalid"] | None = None


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check() -> HealthResponse:
    """The process is up."""
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=HealthResponse, response_model_exclude_none=True)
async def readiness_check() -> HealthResponse:
    """Whether a seed run could start: store credentials set and dataset loadable.

    The store itself is not contacted.
    """
    settings = get_settings()
    store = "configured" if settings.has_store_credentials else "unconfigured"

    try:
        get_dataset(settings.seeder_dataset_path)
        dataset = "ok"
    except DatasetError as e:
        logger.warning("health.dataset_invalid", error=e.message)
        dataset = "invalid"

    ready = store == "configured" and dataset == "ok"
    if not ready:
        logger.warning("health.not_ready", store=store, dataset=dataset)

    return HealthResponse(status="ok" if ready else "degraded", store=store, dataset=dataset)
