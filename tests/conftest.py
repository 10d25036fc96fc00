"""Shared pytest fixtures for thumbnail archiver tests.

Fixture summary
---------------
settings         : Validated Settings built from the test environment.
token_payload    : Recorded ``POST /oauth2/token`` response body.
streams_payload  : Recorded ``GET /helix/streams`` response body (one live stream).
mock_storage     : MagicMock standing in for a ``minio.Minio`` client.
publisher        : ArchivePublisher wrapping ``mock_storage``.

All tests run without network access or an object-storage server; HTTP is
mocked with respx and the storage client with ``unittest.mock``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

# ---------------------------------------------------------------------------
# Test environment bootstrap
# ---------------------------------------------------------------------------
# Set required env vars before any application modules are imported so that
# Settings() does not raise a ConfigError during collection.

_TEST_ENV_DEFAULTS: dict[str, str] = {
    "BUCKET_NAME": "thumbnails-test",
    "TWITCH_CLIENT_ID": "test-client-id",
    "TWITCH_CLIENT_SECRET": "test-client-secret",
    "MINIO_ENDPOINT": "localhost:9000",
    "MINIO_SECURE": "false",
    "CELERY_BROKER_URL": "memory://",
    "CELERY_RESULT_BACKEND": "cache+memory://",
}

for _key, _default in _TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _default)

from thumbnail_archiver.config.settings import Settings, get_settings, load_settings  # noqa: E402
from thumbnail_archiver.storage.publisher import ArchivePublisher  # noqa: E402

# Clear the lru_cache so Settings() re-reads from the patched environment.
get_settings.cache_clear()

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "api_responses" / "twitch"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a recorded Twitch API response by file name."""
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any ``configure_logging()`` call so ``capture_logs`` keeps working."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings() -> Settings:
    return load_settings(
        bucket_name="thumbnails-test",
        twitch_client_id="test-client-id",
        twitch_client_secret="test-client-secret",
    )


@pytest.fixture
def token_payload() -> dict[str, Any]:
    return load_fixture("token_response.json")


@pytest.fixture
def streams_payload() -> dict[str, Any]:
    return load_fixture("streams_response.json")


@pytest.fixture
def mock_storage() -> MagicMock:
    client = MagicMock()
    client.bucket_exists.return_value = True
    return client


@pytest.fixture
def publisher(mock_storage: MagicMock) -> ArchivePublisher:
    return ArchivePublisher(mock_storage)
