"""Demo dataset source.

The dataset is a static JSON document with four record arrays. It is loaded
and validated once; callers only ever see read-only views of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from app.core.exceptions import DatasetError
from app.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DATASET_PATH = Path(__file__).parent / "data" / "demo_data.json"


class DemoDataDocument(BaseModel):
    """Shape of the demo dataset document."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    users: list[dict[str, Any]]
    validation_history: list[dict[str, Any]]
    sentiment_history: list[dict[str, Any]]
    system_settings: list[dict[str, Any]]


class DemoDataset:
    """Immutable, ordered record arrays keyed by dataset section."""

    def __init__(self, sections: Mapping[str, list[dict[str, Any]]]) -> None:
        self._sections: Mapping[str, tuple[Mapping[str, Any], ...]] = MappingProxyType(
            {
                name: tuple(MappingProxyType(dict(record)) for record in records)
                for name, records in sections.items()
            }
        )

    @classmethod
    def from_document(cls, document: DemoDataDocument) -> DemoDataset:
        return cls(document.model_dump())

    @property
    def sections(self) -> tuple[str, ...]:
        return tuple(self._sections)

    def records(self, section: str) -> tuple[Mapping[str, Any], ...]:
        """Records of one section, in source order.

        Raises:
            DatasetError: If the section does not exist.
        """
        try:
            return self._sections[section]
        except KeyError as e:
            raise DatasetError(
                f"Demo dataset has no section '{section}'",
                details={"section": section, "available": list(self._sections)},
            ) from e

    def counts(self) -> dict[str, int]:
        return {name: len(records) for name, records in self._sections.items()}


def load_dataset(path: str | Path | None = None) -> DemoDataset:
    """Load and validate a demo dataset document.

    Args:
        path: JSON document to read; defaults to the bundled dataset.

    Returns:
        Validated DemoDataset.

    Raises:
        DatasetError: If the file is missing or does not match the expected shape.
    """
    dataset_path = Path(path) if path else DEFAULT_DATASET_PATH

    if not dataset_path.exists():
        raise DatasetError(
            f"Demo dataset not found: {dataset_path}",
            details={"path": str(dataset_path)},
        )

    try:
        document = DemoDataDocument.model_validate_json(dataset_path.read_bytes())
    except ValidationError as e:
        raise DatasetError(
            f"Invalid demo dataset {dataset_path}: {e.error_count()} validation error(s)",
            details={"path": str(dataset_path), "errors": e.errors(include_url=False)},
        ) from e

    dataset = DemoDataset.from_document(document)
    logger.info("seeder.dataset.loaded", path=str(dataset_path), **dataset.counts())
    return dataset


@lru_cache
def get_default_dataset() -> DemoDataset:
    """Bundled dataset, loaded once per process."""
    return load_dataset()


def get_dataset(path: str | Path | None = None) -> DemoDataset:
    """Dataset at ``path``, or the cached bundled dataset when no path is given."""
    return load_dataset(path) if path else get_default_dataset()
