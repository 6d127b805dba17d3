"""Configuration management for MaxBot."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://maxbot.yourdomain.com"
API_VERSION = "v1"


class RetryConfig(BaseModel):
    """Retry budget for ordinary API calls.

    Delays are fixed (no jitter). A rate-limited attempt waits
    ``rate_limit_delay`` before the next one instead of ``retry_delay``.

    Attributes:
        max_attempts: Total attempts including the first (3 default).
        retry_delay: Seconds between attempts (1.0 default).
        rate_limit_delay: Seconds to wait after HTTP 429 (5.0 default).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Total attempts per operation, including the first",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Fixed delay between attempts",
    )
    rate_limit_delay: float = Field(
        default=5.0,
        ge=0.0,
        le=300.0,
        description="Fixed delay after a rate-limited attempt",
    )


class PollingConfig(BaseModel):
    """Long-polling session settings.

    Attributes:
        timeout: Server-side long-wait in seconds (25 default).
        retry_delay: Pause after a failed fetch (1.0 default).
        buffer_size: Capacity of the delivery queue (100 default).
        update_offset: Cursor the session starts from (0 default).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout: int = Field(
        default=25,
        ge=0,
        le=600,
        description="Seconds the server may hold a getUpdates request open",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Seconds to wait after a failed fetch",
    )
    buffer_size: int = Field(
        default=100,
        ge=1,
        le=100_000,
        description="Capacity of the bounded delivery queue",
    )
    update_offset: int = Field(
        default=0,
        ge=0,
        description="First update id to request",
    )


class Settings(BaseSettings):
    """MaxBot client settings.

    Loaded from ``MAXBOT_*`` environment variables (nested fields use ``__``,
    e.g. ``MAXBOT_RETRY__MAX_ATTEMPTS=5``) or passed explicitly. Settings are
    frozen once constructed.
    """

    model_config = SettingsConfigDict(
        env_prefix="MAXBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    # API
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base address of the bot platform",
    )
    api_version: str = Field(
        default=API_VERSION,
        description="API version path segment",
    )
    api_key: str | None = Field(
        default=None,
        description="Bearer credential for the bot account",
    )
    user_agent: str = Field(
        default="maxbot-python",
        description="User-Agent header sent with every request",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Per-request timeout in seconds",
    )

    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry budget for API calls",
    )
    polling: PollingConfig = Field(
        default_factory=PollingConfig,
        description="Default long-polling session settings",
    )

    # Webhook
    webhook_secret: str | None = Field(
        default=None,
        description=(
            "Shared secret for X-Signature verification. "
            "When unset, inbound signatures are NOT verified."
        ),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Paths are joined as ``base_url + /api/...``."""
        return value.rstrip("/")

    @property
    def api_prefix(self) -> str:
        """Path prefix for versioned endpoints, e.g. ``/api/v1``."""
        return f"/api/{self.api_version}"
