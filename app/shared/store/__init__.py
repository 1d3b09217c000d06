"""Remote collection store access (Supabase REST)."""

from app.shared.store.client import (
    CollectionClient,
    Filter,
    Record,
    StoreError,
    StoreResult,
    SupabaseRestClient,
)
from app.shared.store.config import StoreConfig

__all__ = [
    "CollectionClient",
    "Filter",
    "Record",
    "StoreConfig",
    "StoreError",
    "StoreResult",
    "SupabaseRestClient",
]
