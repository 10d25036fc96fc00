"""Application-wide exception hierarchy for the thumbnail archiver.

All custom exceptions subclass ``ThumbnailArchiverError``, enabling
consistent error handling and structured logging across the application.
Every class carries a :class:`FailureReason` so the pipeline can report a
single failure category without inspecting exception types.

Hierarchy::

    ThumbnailArchiverError
    ├── ConfigError              (fields: list[str])
    ├── MalformedEventError
    ├── TwitchAPIError           (status_code: int | None)
    │   ├── AuthError
    │   └── StreamLookupError
    ├── NoLiveStreamError        (channel_login: str)
    ├── ThumbnailFetchError      (url: str, status_code: int | None)
    └── PublishError             (storage_key: str | None)
"""

from __future__ import annotations

import enum


class FailureReason(str, enum.Enum):
    """Failure categories reported by a failed pipeline invocation."""

    CONFIG_ERROR = "config_error"
    MALFORMED_EVENT = "malformed_event"
    AUTH_ERROR = "auth_error"
    LOOKUP_ERROR = "lookup_error"
    NO_LIVE_STREAM = "no_live_stream"
    FETCH_ERROR = "fetch_error"
    PUBLISH_ERROR = "publish_error"
    UNEXPECTED_ERROR = "unexpected_error"


class ThumbnailArchiverError(Exception):
    """Base class for all thumbnail archiver exceptions.

    All application-specific exceptions inherit from this class so that
    callers can catch the entire hierarchy with a single ``except`` clause
    when needed.
    """

    reason: FailureReason = FailureReason.UNEXPECTED_ERROR


# ---------------------------------------------------------------------------
# Input exceptions
# ---------------------------------------------------------------------------


class ConfigError(ThumbnailArchiverError):
    """Raised when required process configuration is missing or invalid.

    Args:
        message: Human-readable description of the failure.
        fields: Names of the offending settings fields.  Values are never
            included because several of them are secrets.
    """

    reason = FailureReason.CONFIG_ERROR

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class MalformedEventError(ThumbnailArchiverError):
    """Raised when a trigger event lacks the ``twitch_user_login`` detail."""

    reason = FailureReason.MALFORMED_EVENT


# ---------------------------------------------------------------------------
# Twitch API exceptions
# ---------------------------------------------------------------------------


class TwitchAPIError(ThumbnailArchiverError):
    """Base class for failures talking to the Twitch identity or Helix APIs.

    Args:
        message: Human-readable description of the failure.
        status_code: HTTP status code of the failing response, or ``None``
            for transport and parse failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(TwitchAPIError):
    """Raised when the Client Credentials token exchange fails."""

    reason = FailureReason.AUTH_ERROR


class StreamLookupError(TwitchAPIError):
    """Raised when the Helix streams query fails or returns an unusable body."""

    reason = FailureReason.LOOKUP_ERROR


# ---------------------------------------------------------------------------
# Pipeline stage exceptions
# ---------------------------------------------------------------------------


class NoLiveStreamError(ThumbnailArchiverError):
    """Raised when the streams query succeeded but returned no records.

    The channel was reported live by the event source but the Helix API does
    not (yet) list a live stream for it.

    Args:
        channel_login: Login name of the channel that was queried.
    """

    reason = FailureReason.NO_LIVE_STREAM

    def __init__(self, channel_login: str) -> None:
        super().__init__(f"Stream list did not include a live stream for '{channel_login}'")
        self.channel_login = channel_login


class ThumbnailFetchError(ThumbnailArchiverError):
    """Raised when downloading the resolved thumbnail image fails.

    Args:
        message: Human-readable description of the failure.
        url: The resolved thumbnail URL that was requested.
        status_code: HTTP status code, or ``None`` for transport failures.
    """

    reason = FailureReason.FETCH_ERROR

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PublishError(ThumbnailArchiverError):
    """Raised when writing the thumbnail to object storage fails.

    The message is deliberately generic; the storage client's native error
    is logged by the publisher before this exception is raised.

    Args:
        message: Generic description of the failure.
        storage_key: Object key that could not be written.
    """

    reason = FailureReason.PUBLISH_ERROR

    def __init__(
        self,
        message: str = "Failed to upload thumbnail to object storage.",
        storage_key: str | None = None,
    ) -> None:
        super().__init__(message)
        self.storage_key = storage_key
