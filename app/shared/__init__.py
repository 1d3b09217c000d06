"""Shared building blocks: remote store access and the demo-data seeder."""
