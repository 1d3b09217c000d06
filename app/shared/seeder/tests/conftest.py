"""Pytest fixtures for seeder tests."""

import copy
import uuid
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from app.shared.seeder.config import SeederConfig
from app.shared.seeder.core import DemoDataSeeder
from app.shared.seeder.dataset import DemoDataset
from app.shared.store import Filter, Record, StoreError, StoreResult


def _resolve(row: Record, path: str) -> Any:
    node: Any = row
    for part in path.split("->"):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def _matches(row: Record, filters: Sequence[Filter]) -> bool:
    return all(_resolve(row, f.column) == f.value for f in filters)


class InMemoryCollectionClient:
    """Collection store kept in dicts, with failure injection.

    Inserts get a generated ``id`` when none is supplied. Upserts replace the
    supplied columns of the row whose conflict key matches.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[Record]] = {}
        self.calls: list[tuple[str, str]] = []
        self._rules: list[tuple[str, str, Callable[[Record], bool], str, BaseException | None]] = []

    def rows(self, table: str) -> list[Record]:
        return self.tables.setdefault(table, [])

    def fail_when(
        self,
        operation: str,
        table: str,
        predicate: Callable[[Record], bool] | None = None,
        message: str = "injected failure",
        raises: BaseException | None = None,
    ) -> None:
        """Make matching calls fail with a store error, or raise ``raises``."""
        self._rules.append((operation, table, predicate or (lambda _record: True), message, raises))

    def _injected(self, operation: str, table: str, record: Record) -> StoreError | None:
        for op, tbl, predicate, message, raises in self._rules:
            if op == operation and tbl == table and predicate(record):
                if raises is not None:
                    raise raises
                return StoreError(message=message, code="P0001", status_code=400)
        return None

    async def upsert(self, table: str, record: Record, conflict_key: str) -> StoreResult[None]:
        self.calls.append(("upsert", table))
        error = self._injected("upsert", table, record)
        if error:
            return StoreResult(error=error)

        for row in self.rows(table):
            if row.get(conflict_key) == record.get(conflict_key):
                row.update(copy.deepcopy(record))
                return StoreResult()
        self.rows(table).append(copy.deepcopy(record))
        return StoreResult()

    async def insert(self, table: str, record: Record) -> StoreResult[None]:
        self.calls.append(("insert", table))
        error = self._injected("insert", table, record)
        if error:
            return StoreResult(error=error)

        row = copy.deepcopy(record)
        row.setdefault("id", str(uuid.uuid4()))
        self.rows(table).append(row)
        return StoreResult()

    async def select(
        self,
        table: str,
        filters: Sequence[Filter],
        columns: Sequence[str] = ("*",),
    ) -> StoreResult[list[Record]]:
        self.calls.append(("select", table))
        error = self._injected("select", table, {})
        if error:
            return StoreResult(error=error)

        matched = [row for row in self.rows(table) if _matches(row, filters)]
        if "*" in columns:
            return StoreResult(data=copy.deepcopy(matched))
        return StoreResult(data=[{c: row.get(c) for c in columns} for row in matched])

    async def delete(self, table: str, filters: Sequence[Filter]) -> StoreResult[None]:
        self.calls.append(("delete", table))
        if not filters:
            raise ValueError(f"Refusing to delete from {table} without a filter")

        target = {f.column: f.value for f in filters}
        error = self._injected("delete", table, target)
        if error:
            return StoreResult(error=error)

        self.tables[table] = [row for row in self.rows(table) if not _matches(row, filters)]
        return StoreResult()


@pytest.fixture
def store():
    """Empty in-memory collection store."""
    return InMemoryCollectionClient()


@pytest.fixture
def small_dataset():
    """Small dataset covering all four collections."""
    return DemoDataset(
        {
            "users": [
                {"id": "u1", "email": "a@x.com", "display_name": "A", "role": "user"},
                {"id": "u2", "email": "b@x.com", "display_name": "B", "role": "admin"},
            ],
            "validation_history": [
                {"id": "v1", "user_id": "u1", "claim": "Claim one", "score": 70},
                {"id": "v2", "user_id": "u1", "claim": "Claim two", "score": 20},
                {"id": "v3", "user_id": "u2", "claim": "Claim three", "score": 55},
            ],
            "sentiment_history": [
                {"id": "s1", "user_id": "u2", "topic": "Topic", "positive": 40},
            ],
            "system_settings": [
                {"key": "max_tokens", "value": "300", "description": "Token cap"},
                {"key": "maintenance_mode", "value": "false"},
            ],
        }
    )


@pytest.fixture
def seeder(store, small_dataset):
    """Seeder bound to the in-memory store and the small dataset."""
    return DemoDataSeeder(store, SeederConfig(), small_dataset)
