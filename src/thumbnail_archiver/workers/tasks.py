"""Celery task wrapping the thumbnail pipeline.

Task naming convention::

    thumbnail_archiver.workers.tasks.<action>

The task never retries on its own: each pipeline stage is a single attempt
and a failed invocation is reported to the event source by marking the task
FAILED with the originating exception.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from thumbnail_archiver.config.settings import get_settings
from thumbnail_archiver.pipeline import PipelineOrchestrator
from thumbnail_archiver.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)


@celery_app.task(
    name="thumbnail_archiver.workers.tasks.archive_stream_thumbnail",
    acks_late=True,
)
def archive_stream_thumbnail(event: dict[str, Any]) -> dict[str, Any]:
    """Archive the current thumbnail of the channel named in *event*.

    Args:
        event: Stream-online payload, either ``{"twitch_user_login": ...}``
            or an EventBridge-style envelope with that mapping under
            ``detail``.

    Returns:
        The outcome summary (``status == "accepted"``).

    Raises:
        ThumbnailArchiverError: The subclass matching the failure category,
            so Celery records the task as FAILED.
    """
    outcome = asyncio.run(PipelineOrchestrator(get_settings()).run_event(event))
    if not outcome.accepted:
        logger.error("archive_task.failed", **outcome.to_dict())
        outcome.raise_for_failure()
    return outcome.to_dict()
