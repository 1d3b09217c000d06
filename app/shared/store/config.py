"""Connection settings for the remote collection store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from app.core.config import Settings

URL_ENV = "SUPABASE_URL"
SERVICE_KEY_ENV = "SUPABASE_SERVICE_ROLE_KEY"


@dataclass(frozen=True)
class StoreConfig:
    """Explicit store credentials passed into the client and seeder.

    Attributes:
        url: Project URL (REST requests go to ``<url>/rest/v1``).
        service_key: Admin (service role) key, sent as ``apikey`` and bearer token.
        timeout_seconds: Per-request timeout.
    """

    url: str
    service_key: str = field(repr=False)
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        missing = [
            name
            for name, value in ((URL_ENV, self.url), (SERVICE_KEY_ENV, self.service_key))
            if not value or not value.strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Missing Supabase credentials: {', '.join(missing)}",
                details={"missing": missing},
            )
        if not self.url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid {URL_ENV}: expected an http(s) URL",
                details={"url": self.url},
            )

    @property
    def rest_url(self) -> str:
        """Base URL of the PostgREST endpoint."""
        return f"{self.url.rstrip('/')}/rest/v1"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> StoreConfig:
        """Build store config from application settings.

        Args:
            settings: Settings to read; defaults to the cached singleton.

        Returns:
            Validated StoreConfig.

        Raises:
            ConfigurationError: If either credential is missing or invalid.
        """
        settings = settings or get_settings()
        return cls(
            url=settings.supabase_url,
            service_key=settings.supabase_service_role_key,
            timeout_seconds=settings.seeder_request_timeout_seconds,
        )
