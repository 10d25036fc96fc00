"""Celery application factory for the thumbnail archiver.

Configures the broker, result backend, serialization and logging.  All
configuration values are sourced from ``Settings`` so that no secrets or
environment-specific values are hard-coded here.  Importing this module
validates the settings, so a worker with missing required configuration
fails at startup rather than on its first task.

Usage (starting a worker)::

    celery -A thumbnail_archiver.workers.celery_app worker --loglevel=info

Usage (dispatching a stream-online event from the event source)::

    from thumbnail_archiver.workers.celery_app import celery_app

    celery_app.send_task(
        "thumbnail_archiver.workers.tasks.archive_stream_thumbnail",
        kwargs={"event": {"twitch_user_login": "alice"}},
    )
"""

from __future__ import annotations

from celery import Celery
from celery.signals import setup_logging
from dotenv import load_dotenv

# Load .env values into os.environ before Settings is read.
load_dotenv()

from thumbnail_archiver.config.settings import get_settings  # noqa: E402
from thumbnail_archiver.core.logging_config import configure_logging  # noqa: E402

settings = get_settings()

#: The global Celery application instance.
celery_app = Celery(
    "thumbnail_archiver",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["thumbnail_archiver.workers.tasks"],
)

celery_app.conf.update(
    # JSON only; task arguments and results must be JSON-serializable.
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    enable_utc=True,
    # Acknowledge after completion so a crashed worker's event is redelivered.
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    result_expires=86_400,
    # One invocation is three HTTP calls and one object write.
    task_soft_time_limit=120,
    task_time_limit=300,
    # Retries are the event source's decision, not the worker's.
    task_max_retries=0,
)


@setup_logging.connect
def _configure_worker_logging(**kwargs: object) -> None:  # noqa: ARG001
    """Replace Celery's default logging setup with the structlog pipeline."""
    configure_logging(settings.log_level)
