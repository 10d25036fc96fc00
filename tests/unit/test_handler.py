"""Tests for the Lambda-compatible entrypoint."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from thumbnail_archiver import handler as handler_module
from thumbnail_archiver.core.exceptions import AuthError, MalformedEventError
from thumbnail_archiver.pipeline import PipelineOutcome, PipelineState

EVENT = {"detail-type": "StreamOnline", "detail": {"twitch_user_login": "alice"}}


@pytest.fixture(autouse=True)
def configure_logging() -> Iterator[MagicMock]:
    handler_module._configure_once.cache_clear()
    with patch.object(handler_module, "configure_logging") as configure:
        yield configure
    handler_module._configure_once.cache_clear()


@pytest.fixture
def orchestrator_cls() -> Iterator[MagicMock]:
    with patch.object(handler_module, "PipelineOrchestrator") as cls:
        yield cls


def _failed(error: Exception, last_state: PipelineState) -> PipelineOutcome:
    return PipelineOutcome(
        channel_login="alice",
        state=PipelineState.FAILED,
        reason=error.reason,  # type: ignore[attr-defined]
        detail=str(error),
        last_state=last_state,
        error=error,  # type: ignore[arg-type]
    )


class TestHandler:
    def test_accepted_event_returns_summary(self, orchestrator_cls: MagicMock) -> None:
        orchestrator_cls.return_value.run_event = AsyncMock(
            return_value=PipelineOutcome(
                channel_login="alice",
                state=PipelineState.DONE,
                last_state=PipelineState.PUBLISHED,
                storage_key="alice.jpg",
            )
        )

        result = handler_module.handler(EVENT, None)

        orchestrator_cls.return_value.run_event.assert_awaited_once_with(EVENT)
        assert result == {
            "status": "accepted",
            "channel_login": "alice",
            "state": "done",
            "reason": None,
            "detail": None,
            "last_state": "published",
            "storage_key": "alice.jpg",
        }

    def test_failed_invocation_raises(self, orchestrator_cls: MagicMock) -> None:
        orchestrator_cls.return_value.run_event = AsyncMock(
            return_value=_failed(AuthError("twitch: token request failed", 401), PipelineState.START)
        )

        with pytest.raises(AuthError):
            handler_module.handler(EVENT, None)

    def test_malformed_event_raises(self, orchestrator_cls: MagicMock) -> None:
        orchestrator_cls.return_value.run_event = AsyncMock(
            return_value=_failed(MalformedEventError("bad event"), PipelineState.START)
        )

        with pytest.raises(MalformedEventError):
            handler_module.handler({}, None)

    def test_logging_is_configured_once_per_container(
        self, orchestrator_cls: MagicMock, configure_logging: MagicMock
    ) -> None:
        orchestrator_cls.return_value.run_event = AsyncMock(
            return_value=PipelineOutcome(channel_login="alice", state=PipelineState.DONE)
        )

        handler_module.handler(EVENT, None)
        handler_module.handler(EVENT, None)

        configure_logging.assert_called_once()
