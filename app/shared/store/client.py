"""Remote collection client for the Supabase REST (PostgREST) API.

Every operation returns a ``StoreResult``: expected failures reported by the
store come back as a structured ``StoreError`` instead of raising. Transport
failures (``httpx.RequestError``, timeouts) still raise and are the caller's
to contain.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Protocol

import httpx

from app.core.logging import get_logger
from app.shared.store.config import StoreConfig

logger = get_logger(__name__)

Record = dict[str, Any]


@dataclass(frozen=True)
class StoreError:
    """Error reported by the store for a single request.

    Attributes:
        message: Human-readable error text.
        code: Store error code (PostgREST / Postgres SQLSTATE), if any.
        status_code: HTTP status of the response, if any.
        details: Additional detail text from the store.
        hint: Store-provided hint.
    """

    message: str
    code: str | None = None
    status_code: int | None = None
    details: str | None = None
    hint: str | None = None


@dataclass(frozen=True)
class StoreResult[T]:
    """Either a success value or a structured error."""

    data: T | None = None
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        """True when the store reported no error."""
        return self.error is None


@dataclass(frozen=True)
class Filter:
    """Equality filter on a column or a nested JSON attribute path.

    ``column`` accepts PostgREST JSON paths, e.g. ``metadata->demo_data``.
    """

    column: str
    value: Any

    def to_query_param(self) -> tuple[str, str]:
        """Render as a PostgREST query parameter."""
        if self.value is None:
            return self.column, "is.null"
        return self.column, f"eq.{_format_value(self.value)}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CollectionClient(Protocol):
    """Operations the seeder needs from a collection store."""

    async def upsert(self, table: str, record: Record, conflict_key: str) -> StoreResult[None]:
        """Create the record or replace the one whose ``conflict_key`` matches."""
        ...

    async def insert(self, table: str, record: Record) -> StoreResult[None]:
        """Append the record unconditionally."""
        ...

    async def select(
        self,
        table: str,
        filters: Sequence[Filter],
        columns: Sequence[str] = ("*",),
    ) -> StoreResult[list[Record]]:
        """Return rows matching every filter."""
        ...

    async def delete(self, table: str, filters: Sequence[Filter]) -> StoreResult[None]:
        """Delete rows matching every filter."""
        ...


def _error_from_response(response: httpx.Response) -> StoreError:
    """Map a PostgREST error body (``code``, ``message``, ``details``, ``hint``)."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        return StoreError(
            message=str(body.get("message") or response.reason_phrase or "Request failed"),
            code=body.get("code"),
            status_code=response.status_code,
            details=body.get("details"),
            hint=body.get("hint"),
        )

    return StoreError(
        message=response.text.strip() or response.reason_phrase or "Request failed",
        status_code=response.status_code,
    )


class SupabaseRestClient:
    """``CollectionClient`` backed by ``httpx.AsyncClient``.

    Use as an async context manager so the connection pool is closed::

        async with SupabaseRestClient(StoreConfig.from_settings()) as client:
            await client.insert("validation_history", {...})
    """

    def __init__(
        self,
        config: StoreConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Validated store credentials.
            transport: Optional transport override (tests use ``httpx.MockTransport``).
        """
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.rest_url,
            headers={
                "apikey": config.service_key,
                "Authorization": f"Bearer {config.service_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=config.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> SupabaseRestClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        payload: Record | None = None,
        prefer: str | None = None,
    ) -> tuple[httpx.Response, StoreError | None]:
        headers = {"Prefer": prefer} if prefer else None
        response = await self._client.request(
            method,
            f"/{table}",
            params=params,
            json=payload,
            headers=headers,
        )
        if response.is_success:
            return response, None

        error = _error_from_response(response)
        logger.warning(
            "store.request.failed",
            method=method,
            table=table,
            status_code=response.status_code,
            error_code=error.code,
            error=error.message,
        )
        return response, error

    async def upsert(self, table: str, record: Record, conflict_key: str) -> StoreResult[None]:
        _, error = await self._send(
            "POST",
            table,
            params=[("on_conflict", conflict_key)],
            payload=record,
            prefer="resolution=merge-duplicates,return=minimal",
        )
        return StoreResult(error=error)

    async def insert(self, table: str, record: Record) -> StoreResult[None]:
        _, error = await self._send("POST", table, payload=record, prefer="return=minimal")
        return StoreResult(error=error)

    async def select(
        self,
        table: str,
        filters: Sequence[Filter],
        columns: Sequence[str] = ("*",),
    ) -> StoreResult[list[Record]]:
        params = [("select", ",".join(columns))]
        params.extend(f.to_query_param() for f in filters)

        response, error = await self._send("GET", table, params=params)
        if error is not None:
            return StoreResult(error=error)

        rows = response.json()
        if not isinstance(rows, list):
            return StoreResult(
                error=StoreError(
                    message=f"Unexpected select response for {table}: expected a list",
                    status_code=response.status_code,
                )
            )
        return StoreResult(data=rows)

    async def delete(self, table: str, filters: Sequence[Filter]) -> StoreResult[None]:
        """Delete rows matching every filter.

        Raises:
            ValueError: If no filter is given; there is no delete-all path.
        """
        if not filters:
            raise ValueError(f"Refusing to delete from {table} without a filter")

        _, error = await self._send(
            "DELETE",
            table,
            params=[f.to_query_param() for f in filters],
            prefer="return=minimal",
        )
        return StoreResult(error=error)
