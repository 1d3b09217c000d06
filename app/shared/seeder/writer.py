"""Applies single records to a collection under its write policy."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.core.logging import get_logger
from app.shared.seeder.config import CollectionSpec, DemoMarker
from app.shared.seeder.report import ErrorKind, RecordOutcome
from app.shared.store import CollectionClient, StoreResult

logger = get_logger(__name__)


class CollectionWriter:
    """Writes one record at a time and never lets a failure escape the record.

    Store-reported errors and exceptions raised by the client (network
    errors, timeouts) both become a failed ``RecordOutcome``. There are no
    retries.
    """

    def __init__(self, client: CollectionClient, marker: DemoMarker) -> None:
        """Initialize the writer.

        Args:
            client: Store client used for inserts and upserts.
            marker: Demo marker attached to records of marked collections.
        """
        self.client = client
        self.marker = marker

    def build_payload(self, collection: CollectionSpec, record: Mapping[str, Any]) -> dict[str, Any]:
        payload = collection.project(record)
        if collection.marked:
            payload = self.marker.apply(payload)
        return payload

    async def write(self, collection: CollectionSpec, record: Mapping[str, Any]) -> RecordOutcome:
        """Write one record.

        Args:
            collection: Target collection and its write policy.
            record: Source record from the demo dataset.

        Returns:
            RecordOutcome; failed outcomes carry a ``"<Label> <identity>: <error>"`` line.
        """
        identity = collection.identify(record)
        policy = collection.write_policy

        if policy.is_upsert:
            key = policy.conflict_key or ""
            if record.get(key) in (None, ""):
                return self._failed(
                    collection,
                    identity,
                    f"missing conflict key '{key}'",
                    ErrorKind.RECORD_WRITE,
                )

        payload = self.build_payload(collection, record)

        # A marked row without its primary key could never be cleared.
        if collection.marked and payload.get(collection.primary_key) in (None, ""):
            return self._failed(
                collection,
                identity,
                f"missing primary key '{collection.primary_key}'",
                ErrorKind.RECORD_WRITE,
            )

        try:
            result: StoreResult[None]
            if policy.is_upsert:
                result = await self.client.upsert(collection.table, payload, policy.conflict_key or "")
            else:
                result = await self.client.insert(collection.table, payload)
        except Exception as e:
            logger.error(
                "seeder.record.exception",
                collection=collection.name,
                identity=identity,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return self._failed(collection, identity, _describe_exception(e), ErrorKind.UNEXPECTED)

        if result.error is not None:
            return self._failed(
                collection,
                identity,
                result.error.message,
                ErrorKind.RECORD_WRITE,
            )

        logger.debug("seeder.record.written", collection=collection.name, identity=identity)
        return RecordOutcome.success(collection.name, identity)

    def _failed(
        self,
        collection: CollectionSpec,
        identity: str,
        message: str,
        kind: ErrorKind,
    ) -> RecordOutcome:
        logger.warning(
            "seeder.record.failed",
            collection=collection.name,
            identity=identity,
            kind=kind.value,
            error=message,
        )
        return RecordOutcome.failure(
            collection.name,
            identity,
            f"{collection.label} {identity}: {message}",
            kind,
        )


def _describe_exception(exc: BaseException) -> str:
    text = str(exc)
    return text if text else type(exc).__name__

