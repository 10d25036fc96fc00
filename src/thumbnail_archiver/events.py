"""Trigger event parsing.

Stream-online notifications arrive either as an EventBridge/CloudWatch
envelope whose ``detail`` carries the payload::

    {"detail-type": "StreamOnline", "source": "twitch", "detail": {"twitch_user_login": "alice"}}

or as the bare detail mapping (Celery task arguments, manual runs)::

    {"twitch_user_login": "alice"}

Only ``twitch_user_login`` is consumed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from thumbnail_archiver.core.exceptions import MalformedEventError


class StreamOnlineEvent(BaseModel):
    """Validated detail of a stream-online notification."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    twitch_user_login: str = Field(min_length=1)

    @field_validator("twitch_user_login", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:  # noqa: ANN401
        return value.strip() if isinstance(value, str) else value


def validate_channel_login(channel_login: Any) -> str:  # noqa: ANN401
    """Return *channel_login* stripped, rejecting blank or non-string values.

    Raises:
        MalformedEventError: If the login is not a non-empty string.
    """
    try:
        event = StreamOnlineEvent(twitch_user_login=channel_login)
    except ValidationError as exc:
        raise MalformedEventError(
            "channel login must be a non-empty 'twitch_user_login' string"
        ) from exc
    return event.twitch_user_login


def parse_stream_online_event(payload: Any) -> StreamOnlineEvent:  # noqa: ANN401
    """Extract and validate the stream-online detail from a trigger payload.

    Raises:
        MalformedEventError: If the payload is not a mapping, the envelope's
            ``detail`` is missing or not a mapping, or ``twitch_user_login``
            is absent or empty.
    """
    if not isinstance(payload, Mapping):
        raise MalformedEventError(
            f"event payload must be a mapping, got {type(payload).__name__}"
        )

    detail: Any = payload
    if "detail" in payload and "twitch_user_login" not in payload:
        detail = payload["detail"]
        if not isinstance(detail, Mapping):
            raise MalformedEventError("event 'detail' must be a mapping")

    try:
        return StreamOnlineEvent.model_validate(dict(detail))
    except ValidationError as exc:
        raise MalformedEventError(
            "event detail is missing a non-empty 'twitch_user_login' string"
        ) from exc
