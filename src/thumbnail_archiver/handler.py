"""AWS Lambda-compatible entrypoint.

Deploy with the handler ``thumbnail_archiver.handler.handler`` and route
the stream-online EventBridge rule to it.  Settings are loaded and logging
is configured once per container (cold start); each event then runs one
pipeline invocation.

A failed invocation raises, so the Lambda runtime reports the error to the
event source, which owns retry and alerting policy.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any

import structlog

from thumbnail_archiver.config.settings import get_settings
from thumbnail_archiver.core.logging_config import configure_logging
from thumbnail_archiver.pipeline import PipelineOrchestrator

logger = structlog.get_logger(__name__)


@lru_cache
def _configure_once(log_level: str) -> None:
    """Configure logging on the first event of a container; later calls are no-ops."""
    configure_logging(log_level)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:  # noqa: ARG001, ANN401
    """Process one stream-online event.

    Args:
        event: EventBridge event whose ``detail`` carries
            ``{"twitch_user_login": "<login>"}``.
        context: Lambda context object (unused).

    Returns:
        The outcome summary with ``status == "accepted"``.

    Raises:
        ConfigError: If required configuration is missing.
        ThumbnailArchiverError: The subclass matching the failure category.
    """
    settings = get_settings()
    _configure_once(settings.log_level)

    outcome = asyncio.run(PipelineOrchestrator(settings).run_event(event))
    if not outcome.accepted:
        logger.error("lambda_handler.failed", **outcome.to_dict())
        outcome.raise_for_failure()
    return outcome.to_dict()
