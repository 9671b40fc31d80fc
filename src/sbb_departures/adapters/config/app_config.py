"""12-factor configuration adapter using environment variables and an optional .env file."""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from sbb_departures.domain.errors import ConfigurationError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root log level")

    # Upstream APIs
    ojp_api_key: str | None = Field(
        default=None, description="Bearer token for the OJP 2.0 stop event API"
    )
    ojp_endpoint: str = Field(
        default="https://api.opentransportdata.swiss/ojp20",
        description="OJP 2.0 endpoint",
    )
    ojp_requestor_ref: str = Field(
        default="sbb_abfahrtstafel_prod",
        description="RequestorRef sent with every OJP request",
    )
    transport_api_base_url: str = Field(
        default="https://transport.opendata.ch/v1",
        description="Base URL of the transport.opendata.ch schedule API",
    )
    api_timeout_seconds: float = Field(
        default=15.0, description="Total timeout for a single upstream request in seconds"
    )

    # Polling
    quick_refresh_seconds: float = Field(
        default=30, description="Interval between quick (cache-preferring) refreshes"
    )
    full_refresh_seconds: float = Field(
        default=180, description="Interval between full refreshes"
    )
    retry_base_seconds: float = Field(
        default=5, description="Retry delay per attempt after a failed refresh"
    )
    retry_max_delay_seconds: float = Field(default=15, description="Upper bound of a retry delay")
    max_retries: int = Field(default=3, description="Automatic retries after consecutive failures")

    # Schedule aggregation
    min_transfer_minutes: int = Field(
        default=4, description="Minimum time to change trains at the transfer station"
    )
    origin_board_limit: int = Field(default=15, description="Departures fetched at the origin")
    transfer_board_limit_full: int = Field(
        default=100, description="Transfer station departures fetched on a full refresh"
    )
    transfer_board_limit_quick: int = Field(
        default=30, description="Transfer station departures fetched on a quick refresh"
    )
    route_limit: int = Field(default=15, description="Itineraries requested for the return trip")
    max_cached_quick_cycles: int | None = Field(
        default=5,
        description="Quick refreshes a cached full result may serve before a refetch is forced",
    )

    # Display
    timezone: str = Field(
        default="Europe/Zurich",
        description="Timezone for displayed times (IANA timezone name)",
    )

    @field_validator(
        "quick_refresh_seconds",
        "full_refresh_seconds",
        "retry_base_seconds",
        "retry_max_delay_seconds",
        "api_timeout_seconds",
    )
    @classmethod
    def validate_positive_interval(cls, v: float) -> float:
        """Validate that intervals are positive."""
        if v <= 0:
            raise ValueError("intervals must be positive")
        return v

    @field_validator("max_cached_quick_cycles")
    @classmethod
    def validate_cache_bound(cls, v: int | None) -> int | None:
        """Validate the cache bound is positive when set."""
        if v is not None and v < 1:
            raise ValueError("max_cached_quick_cycles must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return v.upper()

    def require_ojp_api_key(self) -> str:
        """Return the OJP API key or fail with a configuration error."""
        if not self.ojp_api_key:
            raise ConfigurationError("OJP_API_KEY is not configured")
        return self.ojp_api_key

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config from explicit values only, ignoring environment and .env."""
        return _IsolatedAppConfig(**overrides)


class _IsolatedAppConfig(AppConfig):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)
