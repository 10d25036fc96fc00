"""Pipeline orchestrator: stream-online event → archived thumbnail.

One invocation walks a linear state machine::

    START → TOKEN_ACQUIRED → STREAMS_QUERIED → THUMBNAIL_RESOLVED → PUBLISHED → DONE

Any transition may end in ``FAILED`` instead.  Each stage is attempted
exactly once; nothing is written before the final stage, so a failure
needs no rollback.  Every error of the application hierarchy is converted
into a failed :class:`PipelineOutcome` here; triggers decide how to report
it (see :meth:`PipelineOutcome.raise_for_failure`).

Usage::

    settings = get_settings()
    outcome = await PipelineOrchestrator(settings).run("alice")
    outcome.raise_for_failure()
"""

from __future__ import annotations

import asyncio
import enum
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from thumbnail_archiver._http import borrow_client
from thumbnail_archiver.config.settings import Settings
from thumbnail_archiver.core.exceptions import (
    FailureReason,
    MalformedEventError,
    PublishError,
    ThumbnailArchiverError,
)
from thumbnail_archiver.events import parse_stream_online_event, validate_channel_login
from thumbnail_archiver.storage.publisher import ArchivePublisher, storage_key
from thumbnail_archiver.thumbnails import ThumbnailAsset, ThumbnailResolver, select_stream
from thumbnail_archiver.twitch.auth import TokenProvider
from thumbnail_archiver.twitch.models import TwitchCredentials
from thumbnail_archiver.twitch.streams import StreamLookup

logger = structlog.get_logger(__name__)


class PipelineState(str, enum.Enum):
    """Stages of one invocation.

    The members from ``TOKEN_ACQUIRED`` to ``PUBLISHED`` are entered in
    order.  ``DONE`` and ``FAILED`` are terminal.  ``PipelineOutcome.last_state``
    records the last stage reached before a failure.
    """

    START = "start"
    TOKEN_ACQUIRED = "token_acquired"
    STREAMS_QUERIED = "streams_queried"
    THUMBNAIL_RESOLVED = "thumbnail_resolved"
    PUBLISHED = "published"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class PipelineOutcome:
    """The single observable result of one pipeline invocation.

    Attributes:
        channel_login: Channel the invocation ran for (empty when the
            trigger event could not be parsed).
        state: ``DONE`` or ``FAILED``.
        reason: Failure category; ``None`` when accepted.
        detail: Message of the failing exception.
        last_state: Last state reached before the failure.
        storage_key: Object key written (or that would have been written).
        error: The originating exception, kept for re-raising.
    """

    channel_login: str
    state: PipelineState
    reason: FailureReason | None = None
    detail: str | None = None
    last_state: PipelineState | None = None
    storage_key: str | None = None
    error: ThumbnailArchiverError | None = field(default=None, repr=False, compare=False)

    @property
    def accepted(self) -> bool:
        return self.state is PipelineState.DONE

    def raise_for_failure(self) -> None:
        """Re-raise the originating exception if the invocation failed."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable summary, used as the Celery/Lambda return value."""
        return {
            "status": "accepted" if self.accepted else "failed",
            "channel_login": self.channel_login,
            "state": self.state.value,
            "reason": self.reason.value if self.reason else None,
            "detail": self.detail,
            "last_state": self.last_state.value if self.last_state else None,
            "storage_key": self.storage_key,
        }


class PipelineOrchestrator:
    """Sequences token acquisition, stream lookup, thumbnail fetch and publish.

    The orchestrator holds only read-only configuration.  Every call to
    :meth:`run` builds its own Twitch components and HTTP client, so
    concurrent invocations share no mutable state.

    Args:
        settings: Validated process settings, loaded once at startup.
        http_client: Optional injected :class:`httpx.AsyncClient` shared by
            the HTTP stages of each run (caller-owned, never closed here).
        publisher: Optional :class:`ArchivePublisher`; built from *settings*
            at publish time when omitted.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        publisher: ArchivePublisher | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._publisher = publisher
        self._credentials = TwitchCredentials(
            client_id=settings.twitch_client_id,
            client_secret=settings.twitch_client_secret,
        )

    async def run_event(self, payload: Any) -> PipelineOutcome:  # noqa: ANN401
        """Validate a trigger payload and run the pipeline for its channel."""
        try:
            event = parse_stream_online_event(payload)
        except ThumbnailArchiverError as exc:
            logger.warning("pipeline.malformed_event", error=str(exc))
            return _failed("", PipelineState.START, exc)
        return await self.run(event.twitch_user_login)

    async def run(self, channel_login: str) -> PipelineOutcome:
        """Run all stages for *channel_login* and report the outcome.

        A blank login fails with ``MALFORMED_EVENT`` before any request is
        made.  Never raises for failures of the application hierarchy; those
        are returned as a ``FAILED`` outcome.  Programming errors propagate.
        """
        try:
            channel_login = validate_channel_login(channel_login)
        except MalformedEventError as exc:
            logger.warning("pipeline.malformed_event", error=str(exc))
            return _failed("", PipelineState.START, exc)

        with structlog.contextvars.bound_contextvars(
            invocation_id=uuid.uuid4().hex,
            channel_login=channel_login,
        ):
            return await self._run(channel_login)

    async def _run(self, channel_login: str) -> PipelineOutcome:
        settings = self._settings
        key = storage_key(channel_login)
        state = PipelineState.START
        logger.info("pipeline.started")

        try:
            async with borrow_client(self._http_client, settings.http_timeout_seconds) as client:
                token = await TokenProvider(client).acquire_token(self._credentials)
                state = _advance(PipelineState.TOKEN_ACQUIRED)

                result = await StreamLookup(
                    client, live_only=settings.twitch_live_only
                ).query_live_streams(channel_login, token, self._credentials.client_id)
                state = _advance(PipelineState.STREAMS_QUERIED)

                record = select_stream(result, channel_login)
                asset = await ThumbnailResolver(
                    client,
                    width=settings.thumbnail_width,
                    height=settings.thumbnail_height,
                ).resolve_thumbnail(record)
                state = _advance(PipelineState.THUMBNAIL_RESOLVED)

            await asyncio.to_thread(self._publish, key, asset)
            state = _advance(PipelineState.PUBLISHED)
        except ThumbnailArchiverError as exc:
            logger.warning(
                "pipeline.failed",
                last_state=state.value,
                reason=exc.reason.value,
                error=str(exc),
            )
            outcome = _failed(channel_login, state, exc)
            outcome.storage_key = key
            return outcome

        logger.info("pipeline.accepted", storage_key=key)
        return PipelineOutcome(
            channel_login=channel_login,
            state=PipelineState.DONE,
            last_state=state,
            storage_key=key,
        )

    def _publish(self, key: str, asset: ThumbnailAsset) -> None:
        publisher = self._publisher
        if publisher is None:
            try:
                publisher = ArchivePublisher.from_settings(self._settings)
            except Exception as exc:  # noqa: BLE001
                logger.error("archive.client_init_failed", error=str(exc))
                raise PublishError(storage_key=key) from exc
        publisher.publish(key, asset, self._settings.bucket_name)


def _advance(state: PipelineState) -> PipelineState:
    logger.info("pipeline.transition", state=state.value)
    return state


def _failed(
    channel_login: str,
    last_state: PipelineState,
    exc: ThumbnailArchiverError,
) -> PipelineOutcome:
    return PipelineOutcome(
        channel_login=channel_login,
        state=PipelineState.FAILED,
        reason=exc.reason,
        detail=str(exc),
        last_state=last_state,
        error=exc,
    )
