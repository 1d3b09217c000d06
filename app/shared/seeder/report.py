"""Per-record and per-collection outcomes, and the run summary built from them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

Operation = Literal["seed", "clear", "preview"]

_MESSAGES: dict[str, tuple[str, str]] = {
    "seed": ("Demo data seeded successfully", "Seeding completed with {n} errors"),
    "clear": ("Demo data cleared successfully", "Clearing completed with {n} errors"),
    "preview": ("Clear preview completed", "Clear preview completed with {n} errors"),
}


class ErrorKind(str, Enum):
    """Recoverable failure categories of a single unit of work."""

    RECORD_WRITE = "record_write"
    SELECT = "select"
    DELETE = "delete"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class RecordOutcome:
    """Result of writing or deleting one record.

    Attributes:
        collection: Logical collection name.
        identity: Record-identifying token (id, email or key).
        error: Error line for the run log; None on success.
        kind: Failure category; None on success.
    """

    collection: str
    identity: str
    error: str | None = None
    kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, collection: str, identity: str) -> RecordOutcome:
        return cls(collection, identity)

    @classmethod
    def failure(
        cls,
        collection: str,
        identity: str,
        error: str,
        kind: ErrorKind,
    ) -> RecordOutcome:
        return cls(collection, identity, error, kind)


@dataclass
class CollectionOutcome:
    """Running tally for one collection; ``succeeded + failed == attempted`` always."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def add(self, outcome: RecordOutcome) -> None:
        self.attempted += 1
        if outcome.ok:
            self.succeeded += 1
        else:
            self.failed += 1
            self.errors.append(outcome.error or f"{outcome.collection} {outcome.identity}")


@dataclass
class SeederResult:
    """Summary of a seed or clear run.

    Attributes:
        success: True iff ``errors`` is empty.
        message: Human-readable summary line.
        errors: Ordered error log across all collections.
        counts: Succeeded count per collection.
        outcomes: Full per-collection tallies.
    """

    success: bool
    message: str
    errors: list[str] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    outcomes: dict[str, CollectionOutcome] = field(default_factory=dict)

    @property
    def total_succeeded(self) -> int:
        return sum(o.succeeded for o in self.outcomes.values())

    @property
    def total_failed(self) -> int:
        return sum(o.failed for o in self.outcomes.values())

    @property
    def exit_code(self) -> int:
        return exit_code(self)


def summarize(
    outcomes: Mapping[str, CollectionOutcome],
    operation: Operation = "seed",
) -> SeederResult:
    """Merge per-collection outcomes into one result. Pure, no I/O.

    Args:
        outcomes: Tallies keyed by collection name, in processing order.
        operation: Selects the message wording.

    Returns:
        SeederResult whose error log preserves collection then record order.
    """
    errors = [error for outcome in outcomes.values() for error in outcome.errors]
    ok_message, error_message = _MESSAGES[operation]

    return SeederResult(
        success=not errors,
        message=ok_message if not errors else error_message.format(n=len(errors)),
        errors=errors,
        counts={name: outcome.succeeded for name, outcome in outcomes.items()},
        outcomes=dict(outcomes),
    )


def exit_code(result: SeederResult) -> int:
    """Process exit status for a CLI consuming ``result``."""
    return 0 if result.success else 1
