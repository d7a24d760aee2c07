"""Main application settings and configuration management.

This module exposes the single `Settings` object used across the service.
Values are read from `LEDGER_WEB_*` environment variables and an optional
`.env` file, validated by pydantic, and made available through the
module-level `settings` singleton.
"""

import logging
import urllib.parse as urlparse
from typing import Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_FALSE_FLAGS = {"0", "false", "no", "off"}


class Settings(BaseSettings):
    """Aggregated configuration for the ledger query API.

    Only the admission-control toggle and the timing knobs are consumed by the
    core; the remaining values configure the surrounding HTTP scaffolding.

    Security Note:
        - The DSN carries database credentials and must never be logged.
        - The API is anonymous; disabling admission control (NOTHROTTLE) is
          only appropriate for trusted/internal deployments.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_WEB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "ledger-web"
    VERSION: str = "0.1.0"

    DSN: str = "postgres://localhost/ledger"
    LISTEN: str = ":8080"
    CORSORIGIN: str = ""
    NOTHROTTLE: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    POOL_SIZE: int = Field(ge=1, default=10)
    MAX_OVERFLOW: int = Field(ge=0, default=20)

    QUERY_TIMEOUT_SECONDS: float = Field(gt=0, default=5.0)
    STATS_REFRESH_SECONDS: float = Field(gt=0, default=60.0)

    RATE_LIMIT_CAPACITY: int = Field(ge=1, default=5)
    RATE_LIMIT_REFILL_PER_SECOND: float = Field(gt=0, default=1.0)
    RATE_LIMIT_MAX_CLIENTS: int = Field(ge=0, default=0)

    @field_validator("NOTHROTTLE", mode="before")
    @classmethod
    def parse_presence_flag(cls, v):
        """Treats any non-empty value as "set", matching the deployment scripts.

        Explicit negatives ("0", "false", "no", "off") still read as unset.
        """
        if isinstance(v, str):
            value = v.strip()
            return bool(value) and value.lower() not in _FALSE_FLAGS
        return v

    @property
    def async_database_url(self) -> str:
        """Builds the asyncpg SQLAlchemy URL from the configured DSN.

        lib/pq style `postgres://` DSNs are accepted. `sslmode` is dropped from
        the query string because asyncpg does not understand it.
        """
        dsn = self.DSN.strip()
        for prefix in ("postgres://", "postgresql://", "postgresql+psycopg2://"):
            if dsn.startswith(prefix):
                dsn = "postgresql+asyncpg://" + dsn[len(prefix):]
                break

        parsed = urlparse.urlparse(dsn)
        query = dict(urlparse.parse_qsl(parsed.query))
        query.pop("sslmode", None)
        parsed = parsed._replace(query=urlparse.urlencode(query))
        return urlparse.urlunparse(parsed)

    @property
    def listen_address(self) -> Tuple[str, int]:
        """Splits LISTEN ("host:port") into a (host, port) pair.

        An empty host means all interfaces.

        Raises:
            ValueError: If the port is missing or not an integer.
        """
        host, sep, port = self.LISTEN.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(f"Invalid listen address: {self.LISTEN!r}")
        host = host.strip("[]") or "0.0.0.0"
        return host, int(port)


def create_settings() -> Settings:
    """Create the settings instance from the environment."""
    settings_instance = Settings()
    logger.info(f"Admission control disabled: {settings_instance.NOTHROTTLE}")
    return settings_instance


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
