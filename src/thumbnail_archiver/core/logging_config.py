"""Structured logging for the thumbnail archiver.

``configure_logging()`` is called once per process: on Celery worker boot
(``setup_logging`` signal), on Lambda cold start and in the manual script.
Every record is one JSON object on stdout; at ``DEBUG`` a coloured console
renderer is used instead.

Per-invocation context is carried by structlog's context variables.  The
pipeline orchestrator binds ``invocation_id`` and ``channel_login`` around
each run, so every record emitted by the Twitch client, the thumbnail
resolver and the publisher during that run carries both fields::

    with structlog.contextvars.bound_contextvars(invocation_id=..., channel_login="alice"):
        logger.info("pipeline.transition", state="token_acquired")

Twitch credentials, app access tokens and storage secret keys must never reach a
log sink; :func:`redact_secrets` scrubs them before rendering.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "[REDACTED]"

# Exact (lower-cased) keys whose values are always secret.
_SECRET_KEYS: frozenset[str] = frozenset({
    "access_token",
    "authorization",
    "client_secret",
    "twitch_client_secret",
    "minio_secret_key",
    "secret_key",
    "password",
})

# ``Bearer <token>`` anywhere inside a string value.
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+")

# Third-party loggers that log every request at INFO.
_CHATTY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "urllib3")


def _scrub(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, str):
        return _BEARER_RE.sub(f"Bearer {REDACTED}", value)
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in _SECRET_KEYS else _scrub(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_scrub(item) for item in value]
    return value


def redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace secret values in *event_dict*, at any nesting depth.

    Keys listed in ``_SECRET_KEYS`` are replaced outright; bearer tokens
    embedded in string values (e.g. a logged header dump or an error
    message) are masked in place.
    """
    return _scrub(event_dict)


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]


def _renderer_chain(development: bool) -> list[Processor]:
    if development:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    # Tracebacks as structured data so log aggregators can index them.
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging(log_level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route structlog and stdlib logging through one rendering pipeline.

    Safe to call repeatedly: the root logger ends up with exactly one
    handler, writing to *stream* (``sys.stdout`` by default).

    Args:
        log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` or
            ``CRITICAL``, case-insensitive.  ``DEBUG`` switches to the
            console renderer and leaves HTTP client loggers unfiltered.
        stream: Destination of rendered records.
    """
    level_name = log_level.upper()
    development = level_name == "DEBUG"
    shared = _shared_processors()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer_chain(development),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level_name, logging.INFO))

    chatty_level = logging.NOTSET if development else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
