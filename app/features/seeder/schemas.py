"""Pydantic schemas for the seeder feature."""

from pydantic import BaseModel, Field


class SeederStats(BaseModel):
    """Demo dataset size per collection."""

    counts: dict[str, int] = Field(description="Number of dataset records per collection")
    total: int = Field(description="Total number of dataset records")


class ClearParams(BaseModel):
    """Parameters for clearing demo data."""

    dry_run: bool = Field(
        default=False,
        description="Preview what would be deleted without executing",
    )


class SeedRunResult(BaseModel):
    """Result of a seed or clear run."""

    success: bool = Field(description="Whether every record succeeded")
    message: str = Field(description="Human-readable result message")
    errors: list[str] = Field(
        default_factory=list,
        description="Ordered per-record error log",
    )
    counts: dict[str, int] = Field(
        description="Succeeded records per collection",
    )
    failed: int = Field(default=0, description="Total failed records")
    dry_run: bool = Field(default=False, description="Whether this was a preview only")
    duration_seconds: float = Field(description="Time taken in seconds")
