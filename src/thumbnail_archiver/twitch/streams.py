"""Authenticated live-stream lookup against the Twitch Helix API.

Issues ``GET /helix/streams?user_login=<login>`` (plus ``type=live`` unless
disabled) and returns the first page of results.  Pagination is not
followed: a single channel login yields at most one live stream.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from thumbnail_archiver._http import DEFAULT_TIMEOUT_SECONDS, borrow_client
from thumbnail_archiver.core.exceptions import StreamLookupError
from thumbnail_archiver.twitch.config import (
    AUTHORIZATION_HEADER,
    CLIENT_ID_HEADER,
    STREAM_TYPE_LIVE,
    STREAMS_ENDPOINT,
    TWITCH_API_BASE,
)
from thumbnail_archiver.twitch.models import AccessToken, StreamQueryResult

logger = structlog.get_logger(__name__)


def build_helix_headers(client_id: str, token: AccessToken) -> dict[str, str]:
    """Return the ``Client-Id`` and bearer ``Authorization`` headers for Helix."""
    return {
        CLIENT_ID_HEADER: client_id,
        AUTHORIZATION_HEADER: f"Bearer {token.access_token}",
    }


class StreamLookup:
    """Queries a channel's live-stream records.

    Args:
        http_client: Optional injected :class:`httpx.AsyncClient`.
        api_base: Helix base URL; overridable for tests.
        live_only: When ``True`` (default) the query carries ``type=live``
            so the API filters out non-live records server-side.
        timeout: Request timeout in seconds for a self-created client.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        api_base: str = TWITCH_API_BASE,
        live_only: bool = True,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._http_client = http_client
        self._api_base = api_base.rstrip("/")
        self._live_only = live_only
        self._timeout = timeout

    async def query_live_streams(
        self,
        channel_login: str,
        token: AccessToken,
        client_id: str,
    ) -> StreamQueryResult:
        """Fetch the live-stream records for *channel_login*.

        Args:
            channel_login: Twitch login name of the channel.
            token: App access token from :class:`~thumbnail_archiver.twitch.auth.TokenProvider`.
            client_id: Application Client ID matching the token.

        Returns:
            The parsed first page of results.  May be empty; interpreting an
            empty result is the caller's decision.

        Raises:
            StreamLookupError: On transport failure, a non-2xx response, or a
                body that does not match the expected ``{"data": [...]}`` shape.
        """
        url = f"{self._api_base}{STREAMS_ENDPOINT}"
        params: dict[str, Any] = {"user_login": channel_login}
        if self._live_only:
            params["type"] = STREAM_TYPE_LIVE

        try:
            async with borrow_client(self._http_client, self._timeout) as client:
                response = await client.get(
                    url,
                    params=params,
                    headers=build_helix_headers(client_id, token),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StreamLookupError(
                f"twitch: HTTP {exc.response.status_code} on {STREAMS_ENDPOINT}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise StreamLookupError(
                f"twitch: request error on {STREAMS_ENDPOINT}: {exc}"
            ) from exc

        try:
            result = StreamQueryResult.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise StreamLookupError(
                f"twitch: malformed response body from {STREAMS_ENDPOINT}",
                status_code=response.status_code,
            ) from exc

        logger.info(
            "twitch.streams_queried",
            channel_login=channel_login,
            stream_count=len(result.data),
        )
        return result
