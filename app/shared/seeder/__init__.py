"""Demo-data seeder.

Populates the remote store with the synthetic ClaimCheck dataset and removes
only the records it tagged as demo data.

Provides:
- Table-driven collection declarations with insert or upsert-on-key policies
- Per-record failure isolation with an aggregated, ordered error log
- Marker-scoped clearing (with dry-run preview) that never touches real data
- Dataset statistics
"""

from app.shared.seeder.config import (
    DEFAULT_COLLECTIONS,
    CollectionSpec,
    DemoMarker,
    SeederConfig,
    WriteMode,
    WritePolicy,
)
from app.shared.seeder.core import DemoDataSeeder, dataset_stats, open_seeder
from app.shared.seeder.dataset import DemoDataset, get_dataset, load_dataset
from app.shared.seeder.report import (
    CollectionOutcome,
    ErrorKind,
    RecordOutcome,
    SeederResult,
    exit_code,
    summarize,
)
from app.shared.seeder.writer import CollectionWriter

__all__ = [
    "DEFAULT_COLLECTIONS",
    "CollectionOutcome",
    "CollectionSpec",
    "CollectionWriter",
    "DemoDataSeeder",
    "DemoDataset",
    "DemoMarker",
    "ErrorKind",
    "RecordOutcome",
    "SeederConfig",
    "SeederResult",
    "WriteMode",
    "WritePolicy",
    "dataset_stats",
    "exit_code",
    "get_dataset",
    "load_dataset",
    "open_seeder",
    "summarize",
]
