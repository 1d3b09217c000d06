"""Core seeder orchestration module."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import httpx

from app.core.config import get_settings
from app.core.logging import get_logger, run_context
from app.shared.seeder.config import CollectionSpec, DemoMarker, SeederConfig
from app.shared.seeder.dataset import DemoDataset, get_dataset
from app.shared.seeder.report import (
    CollectionOutcome,
    ErrorKind,
    RecordOutcome,
    SeederResult,
    summarize,
)
from app.shared.seeder.writer import CollectionWriter
from app.shared.store import CollectionClient, Filter, StoreConfig, SupabaseRestClient

if TYPE_CHECKING:
    from app.core.config import Settings

logger = get_logger(__name__)


def dataset_stats(
    dataset: DemoDataset,
    collections: Sequence[CollectionSpec],
) -> dict[str, int]:
    """Records the dataset holds for each collection.

    Args:
        dataset: Demo dataset.
        collections: Collections to count, in order.

    Returns:
        Mapping of collection name to record count.
    """
    return {c.name: len(dataset.records(c.source)) for c in collections}


class DemoDataSeeder:
    """Seeds, clears and describes the demo dataset in the remote store.

    All remote calls are awaited one after another: collections in declared
    order, records in source order. A failing record or collection never stops
    the run; failures are tallied and reported in the returned result.
    """

    def __init__(
        self,
        client: CollectionClient,
        config: SeederConfig | None = None,
        dataset: DemoDataset | None = None,
    ) -> None:
        """Initialize the seeder.

        Args:
            client: Store client.
            config: Collection table and marker; defaults to SeederConfig().
            dataset: Records to seed; defaults to the configured or bundled dataset.

        Raises:
            DatasetError: If the dataset cannot be loaded.
        """
        self.client = client
        self.config = config or SeederConfig()
        self.dataset = dataset if dataset is not None else get_dataset(self.config.dataset_path)

    def stats(self) -> dict[str, int]:
        """Number of dataset records per collection, without touching the store."""
        return dataset_stats(self.dataset, self.config.collections)

    async def seed(self, collections: Sequence[CollectionSpec] | None = None) -> SeederResult:
        """Write every dataset record into its collection.

        Args:
            collections: Collections to process; defaults to the configured table.

        Returns:
            SeederResult with per-collection counts and the ordered error log.
        """
        targets = tuple(collections) if collections is not None else self.config.collections
        writer = CollectionWriter(self.client, self.config.marker)

        with run_context("seed"):
            return await self._seed(targets, writer)

    async def _seed(
        self,
        targets: tuple[CollectionSpec, ...],
        writer: CollectionWriter,
    ) -> SeederResult:
        logger.info(
            "seeder.seed.started",
            collections=[c.name for c in targets],
            records=sum(len(self.dataset.records(c.source)) for c in targets),
        )

        outcomes: dict[str, CollectionOutcome] = {}
        for collection in targets:
            outcome = CollectionOutcome()
            for record in self.dataset.records(collection.source):
                outcome.add(await writer.write(collection, record))
            outcomes[collection.name] = outcome

            logger.info(
                "seeder.collection.seeded",
                collection=collection.name,
                table=collection.table,
                policy=collection.write_policy.mode.value,
                succeeded=outcome.succeeded,
                failed=outcome.failed,
            )

        result = summarize(outcomes, "seed")
        logger.info(
            "seeder.seed.completed",
            success=result.success,
            succeeded=result.total_succeeded,
            failed=result.total_failed,
        )
        return result

    async def clear(
        self,
        marker: DemoMarker | None = None,
        collections: Sequence[CollectionSpec] | None = None,
        dry_run: bool = False,
    ) -> SeederResult:
        """Delete records carrying the demo marker, one by one.

        Only collections declared ``marked`` are touched. Collections that are
        not clearable are reported with zero counts. In dry-run mode the
        marked rows are only counted.

        Args:
            marker: Marker identifying demo rows; defaults to the configured one.
            collections: Collections to consider; defaults to the configured table.
            dry_run: If True, select but do not delete.

        Returns:
            SeederResult with deleted (or deletable) counts per collection.
        """
        marker = marker or self.config.marker
        targets = tuple(collections) if collections is not None else self.config.collections

        with run_context("preview" if dry_run else "clear"):
            return await self._clear(targets, marker, dry_run)

    async def _clear(
        self,
        targets: tuple[CollectionSpec, ...],
        marker: DemoMarker,
        dry_run: bool,
    ) -> SeederResult:
        logger.info(
            "seeder.clear.started",
            marker=marker.path,
            collections=[c.name for c in targets if c.clearable],
            dry_run=dry_run,
        )

        outcomes: dict[str, CollectionOutcome] = {}
        for collection in targets:
            if not collection.clearable:
                outcomes[collection.name] = CollectionOutcome()
                continue
            outcomes[collection.name] = await self._clear_collection(collection, marker, dry_run)

        result = summarize(outcomes, "preview" if dry_run else "clear")
        logger.info(
            "seeder.clear.completed",
            success=result.success,
            dry_run=dry_run,
            counts=result.counts,
            failed=result.total_failed,
        )
        return result

    async def _select_marked_keys(
        self,
        collection: CollectionSpec,
        marker: DemoMarker,
    ) -> list[str] | None:
        """Primary keys of marked rows, or None when they cannot be enumerated."""
        try:
            selected = await self.client.select(
                collection.table,
                [marker.filter()],
                columns=(collection.primary_key,),
            )
        except Exception as e:
            logger.warning(
                "seeder.clear.select_failed",
                collection=collection.name,
                kind=ErrorKind.UNEXPECTED.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if selected.error is not None:
            logger.warning(
                "seeder.clear.select_failed",
                collection=collection.name,
                kind=ErrorKind.SELECT.value,
                error=selected.error.message,
            )
            return None

        keys: list[str] = []
        for row in selected.data or []:
            key = row.get(collection.primary_key)
            if key in (None, ""):
                logger.warning(
                    "seeder.clear.row_without_key",
                    collection=collection.name,
                    primary_key=collection.primary_key,
                )
                continue
            keys.append(str(key))
        return keys

    async def _clear_collection(
        self,
        collection: CollectionSpec,
        marker: DemoMarker,
        dry_run: bool,
    ) -> CollectionOutcome:
        outcome = CollectionOutcome()

        keys = await self._select_marked_keys(collection, marker)
        if keys is None:
            return outcome

        if dry_run:
            for key in keys:
                outcome.add(RecordOutcome.success(collection.name, key))
            logger.info("seeder.clear.dry_run", collection=collection.name, matched=len(keys))
            return outcome

        for key in keys:
            outcome.add(await self._delete_one(collection, marker, key))

        logger.info(
            "seeder.collection.cleared",
            collection=collection.name,
            table=collection.table,
            deleted=outcome.succeeded,
            failed=outcome.failed,
        )
        return outcome

    async def _delete_one(
        self,
        collection: CollectionSpec,
        marker: DemoMarker,
        key: str,
    ) -> RecordOutcome:
        # The marker filter is repeated so an unmarked row can never match.
        filters = [Filter(collection.primary_key, key), marker.filter()]
        prefix = f"Delete {collection.label.lower()} {key}"

        try:
            deleted = await self.client.delete(collection.table, filters)
        except Exception as e:
            logger.error(
                "seeder.delete.exception",
                collection=collection.name,
                key=key,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return RecordOutcome.failure(
                collection.name, key, f"{prefix}: {str(e) or type(e).__name__}", ErrorKind.UNEXPECTED
            )

        if deleted.error is not None:
            logger.warning(
                "seeder.delete.failed",
                collection=collection.name,
                key=key,
                error=deleted.error.message,
            )
            return RecordOutcome.failure(
                collection.name, key, f"{prefix}: {deleted.error.message}", ErrorKind.DELETE
            )

        return RecordOutcome.success(collection.name, key)


@asynccontextmanager
async def open_seeder(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[DemoDataSeeder]:
    """Open a store client from settings and yield a seeder bound to it.

    Credentials are validated before any connection is made, so a missing
    credential fails fast with zero requests sent.

    Args:
        settings: Settings to read; defaults to the cached singleton.
        transport: Optional HTTP transport override.

    Yields:
        DemoDataSeeder using a SupabaseRestClient.

    Raises:
        ConfigurationError: If store credentials are missing or invalid.
        DatasetError: If the demo dataset cannot be loaded.
    """
    settings = settings or get_settings()
    store_config = StoreConfig.from_settings(settings)
    seeder_config = SeederConfig.from_settings(settings)

    async with SupabaseRestClient(store_config, transport=transport) as client:
        yield DemoDataSeeder(client, seeder_config)
