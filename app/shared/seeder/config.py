"""Configuration dataclasses for the seeder module.

The collection table below is the single place that says where each part of
the demo dataset goes and how it is written.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError
from app.shared.store import Filter

if TYPE_CHECKING:
    from app.core.config import Settings


class WriteMode(str, Enum):
    """How a record lands in its collection."""

    INSERT = "insert"
    UPSERT = "upsert"


@dataclass(frozen=True)
class WritePolicy:
    """Write policy of a collection.

    Attributes:
        mode: Insert (always a new row) or upsert (create-or-replace).
        conflict_key: Column deciding which existing row an upsert replaces.
    """

    mode: WriteMode
    conflict_key: str | None = None

    def __post_init__(self) -> None:
        if self.mode == WriteMode.UPSERT and not self.conflict_key:
            raise ValueError("Upsert policy requires a conflict_key")
        if self.mode == WriteMode.INSERT and self.conflict_key:
            raise ValueError("Insert policy does not take a conflict_key")

    @classmethod
    def insert(cls) -> WritePolicy:
        return cls(WriteMode.INSERT)

    @classmethod
    def upsert(cls, conflict_key: str) -> WritePolicy:
        return cls(WriteMode.UPSERT, conflict_key)

    @property
    def is_upsert(self) -> bool:
        return self.mode == WriteMode.UPSERT


@dataclass(frozen=True)
class DemoMarker:
    """Tag distinguishing synthetic records from real user data.

    ``path`` is either a plain column (``is_demo``) or a JSON path into a
    column (``metadata->demo_data``). Only rows where the path equals True
    are ever targeted by a clear.
    """

    path: str = "metadata->demo_data"

    def __post_init__(self) -> None:
        parts = [part.strip() for part in self.path.split("->")]
        if not all(parts):
            raise ConfigurationError(
                f"Invalid demo marker path: {self.path!r}",
                details={"path": self.path},
            )
        # Written and queried paths must be the same string.
        object.__setattr__(self, "path", "->".join(parts))

    @property
    def parts(self) -> list[str]:
        return self.path.split("->")

    def apply(self, record: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``record`` carrying the marker.

        Existing nested objects along the path are merged, not replaced.
        """
        tagged = dict(record)
        *parents, leaf = self.parts
        node = tagged
        for key in parents:
            child = node.get(key)
            child = dict(child) if isinstance(child, Mapping) else {}
            node[key] = child
            node = child
        node[leaf] = True
        return tagged

    def filter(self) -> Filter:
        """Filter selecting only marked rows."""
        return Filter(self.path, True)


@dataclass(frozen=True)
class CollectionSpec:
    """One seedable collection.

    Attributes:
        name: Logical name used in counts and logs.
        table: Remote table the records are written to.
        source: Key of the record array in the demo dataset.
        write_policy: Insert or upsert-on-key.
        fields: Columns copied from each source record (absent ones are skipped).
        renames: Extra target columns filled from a source field (target -> source).
        identity_field: Source field naming a record in error messages.
        label: Human-readable record kind used in error messages.
        marked: Whether the demo marker is attached (makes the collection clearable).
        primary_key: Column used to target individual deletions on clear.
    """

    name: str
    table: str
    source: str
    write_policy: WritePolicy
    fields: tuple[str, ...]
    identity_field: str
    label: str
    renames: Mapping[str, str] = field(default_factory=dict)
    marked: bool = False
    primary_key: str = "id"

    def project(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Build the payload written to the store from a source record."""
        payload = {name: record[name] for name in self.fields if name in record}
        for target, source in self.renames.items():
            if source in record:
                payload[target] = record[source]
        return payload

    def identify(self, record: Mapping[str, Any]) -> str:
        """Record-identifying token for error messages."""
        value = record.get(self.identity_field)
        return str(value) if value not in (None, "") else "<unidentified>"

    @property
    def clearable(self) -> bool:
        return self.marked


USER_FIELDS = (
    "id",
    "email",
    "display_name",
    "avatar_url",
    "role",
    "mode",
    "is_active",
    "created_at",
    "last_login_at",
)

# No "id": history rows get server-issued identities, so re-seeding appends.
VALIDATION_FIELDS = (
    "user_id",
    "claim",
    "verdict",
    "score",
    "confidence",
    "mode",
    "explanation",
    "summary",
    "key_points",
    "risk_assessment",
    "bias_score",
    "bias_direction",
    "sources",
    "sentiment",
    "model_used",
    "tokens_used",
    "processing_time_ms",
    "created_at",
)

SENTIMENT_FIELDS = (
    "user_id",
    "topic",
    "positive",
    "neutral",
    "negative",
    "explanation",
    "summary",
    "quotes",
    "sources",
    "trending_score",
    "model_used",
    "tokens_used",
    "created_at",
)

SETTING_FIELDS = ("key", "value", "description", "is_public")


DEFAULT_COLLECTIONS: tuple[CollectionSpec, ...] = (
    CollectionSpec(
        name="users",
        table="user_profiles",
        source="users",
        write_policy=WritePolicy.upsert("email"),
        fields=USER_FIELDS,
        renames={"user_id": "id"},
        identity_field="email",
        label="User",
        marked=True,
        primary_key="user_id",
    ),
    CollectionSpec(
        name="validations",
        table="validation_history",
        source="validation_history",
        write_policy=WritePolicy.insert(),
        fields=VALIDATION_FIELDS,
        identity_field="id",
        label="Validation",
    ),
    CollectionSpec(
        name="sentiments",
        table="sentiment_history",
        source="sentiment_history",
        write_policy=WritePolicy.insert(),
        fields=SENTIMENT_FIELDS,
        identity_field="id",
        label="Sentiment",
    ),
    CollectionSpec(
        name="settings",
        table="system_settings",
        source="system_settings",
        write_policy=WritePolicy.upsert("key"),
        fields=SETTING_FIELDS,
        identity_field="key",
        label="Setting",
        primary_key="key",
    ),
)


@dataclass
class SeederConfig:
    """Master configuration for the demo-data seeder.

    Attributes:
        collections: Collections in processing order.
        marker: Demo marker attached to marked collections.
        dataset_path: Optional path to a custom demo dataset document.
    """

    collections: tuple[CollectionSpec, ...] = DEFAULT_COLLECTIONS
    marker: DemoMarker = field(default_factory=DemoMarker)
    dataset_path: str | None = None

    def __post_init__(self) -> None:
        names = [c.name for c in self.collections]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate collection names: {', '.join(duplicates)}",
                details={"duplicates": duplicates},
            )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SeederConfig:
        """Build configuration from application settings.

        Args:
            settings: Settings instance; defaults to the cached singleton.

        Returns:
            SeederConfig with the default collection table.
        """
        settings = settings or get_settings()
        return cls(
            marker=DemoMarker(settings.seeder_demo_marker_path),
            dataset_path=settings.seeder_dataset_path,
        )

    def clearable_collections(self) -> tuple[CollectionSpec, ...]:
        return tuple(c for c in self.collections if c.clearable)
