"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.
All credentials and secrets are accessed exclusively through this module;
never call ``os.getenv`` directly elsewhere in the codebase.

Usage::

    from thumbnail_archiver.config.settings import get_settings

    settings = get_settings()
    bucket = settings.bucket_name
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from thumbnail_archiver.core.exceptions import ConfigError


class Settings(BaseSettings):
    """Process-wide configuration backed by environment variables and an optional .env file.

    The three identity-bearing values (bucket name, Twitch client ID and
    Twitch client secret) have no defaults and must be supplied via the
    environment or a .env file before the process starts.  The settings
    object is read-only once constructed and is passed explicitly into the
    pipeline.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Required identity-bearing values
    # ------------------------------------------------------------------

    bucket_name: str
    """Object-storage bucket that receives ``<channel_login>.jpg`` thumbnails."""

    twitch_client_id: str
    """Twitch application Client ID, sent as the ``Client-Id`` header."""

    twitch_client_secret: SecretStr
    """Twitch application secret used for the Client Credentials grant.

    Held as a ``SecretStr`` so it never renders in ``repr()`` or log output.
    """

    # ------------------------------------------------------------------
    # MinIO / S3-compatible object storage
    # ------------------------------------------------------------------

    minio_endpoint: str = "s3.amazonaws.com"
    """Host:port of the S3-compatible endpoint, without a scheme prefix.

    Use ``s3.amazonaws.com`` for AWS S3 or ``localhost:9000`` for a local MinIO.
    """

    minio_access_key: Optional[str] = None
    """Access key (equivalent to AWS_ACCESS_KEY_ID).  ``None`` for anonymous access."""

    minio_secret_key: Optional[SecretStr] = None
    """Secret key (equivalent to AWS_SECRET_ACCESS_KEY)."""

    minio_region: Optional[str] = None
    """Bucket region.  When ``None`` the client discovers it on first request."""

    minio_secure: bool = True
    """Whether to use TLS when connecting to the storage endpoint."""

    minio_auto_create_bucket: bool = False
    """Create ``bucket_name`` before the first write if it does not exist."""

    # ------------------------------------------------------------------
    # Pipeline behaviour
    # ------------------------------------------------------------------

    thumbnail_width: int = Field(default=1280, gt=0)
    """Value substituted for the ``{width}`` placeholder of thumbnail URLs."""

    thumbnail_height: int = Field(default=720, gt=0)
    """Value substituted for the ``{height}`` placeholder of thumbnail URLs."""

    twitch_live_only: bool = True
    """Send ``type=live`` with the streams query to pre-filter server-side."""

    http_timeout_seconds: float = Field(default=30.0, gt=0)
    """Timeout applied to every outbound HTTP request of one invocation."""

    # ------------------------------------------------------------------
    # Celery task queue
    # ------------------------------------------------------------------

    celery_broker_url: str = "redis://localhost:6379/1"
    """Redis URL used as Celery's message broker."""

    celery_result_backend: str = "redis://localhost:6379/2"
    """Redis URL used to store Celery task results."""

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    @field_validator("bucket_name", "twitch_client_id", "twitch_client_secret", mode="after")
    @classmethod
    def _require_non_empty(cls, value: str | SecretStr) -> str | SecretStr:
        raw = value.get_secret_value() if isinstance(value, SecretStr) else value
        if not raw.strip():
            raise ValueError("must not be empty")
        return value


def load_settings(**overrides: object) -> Settings:
    """Build a validated :class:`Settings` instance.

    Keyword overrides take precedence over environment variables, which is
    mostly useful in tests and one-off scripts.

    Raises:
        ConfigError: If a required value is missing or a value fails
            validation.  The message lists the offending field names but
            never their values.
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in error["loc"]) for error in exc.errors()}
        )
        raise ConfigError(
            f"Invalid or missing configuration: {', '.join(fields)}",
            fields=fields,
        ) from None


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Uses ``functools.lru_cache`` so that Pydantic Settings reads the environment
    and .env file exactly once per process lifetime.  In tests, call
    ``get_settings.cache_clear()`` after patching environment variables.

    Returns:
        Settings: The validated, immutable settings object.

    Raises:
        ConfigError: If required configuration is absent.
    """
    return load_settings()
