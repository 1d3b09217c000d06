"""Seeder feature module: admin REST endpoints for the demo-data seeder."""

from app.features.seeder.routes import router

__all__ = ["router"]
