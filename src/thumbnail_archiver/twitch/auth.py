"""App access token acquisition via the Twitch Client Credentials grant.

Every call performs a fresh exchange against ``POST /oauth2/token``.  Tokens
are not cached between invocations, so the decoded ``expires_in`` is
informational only.
"""

from __future__ import annotations

import httpx
import structlog
from pydantic import ValidationError

from thumbnail_archiver._http import DEFAULT_TIMEOUT_SECONDS, borrow_client
from thumbnail_archiver.core.exceptions import AuthError
from thumbnail_archiver.twitch.config import GRANT_TYPE_CLIENT_CREDENTIALS, TWITCH_TOKEN_URL
from thumbnail_archiver.twitch.models import AccessToken, TwitchCredentials

logger = structlog.get_logger(__name__)


class TokenProvider:
    """Exchanges application credentials for a short-lived bearer token.

    Args:
        http_client: Optional injected :class:`httpx.AsyncClient`.  When
            omitted, a client is created and closed around each request.
        token_url: Token endpoint; overridable for tests.
        timeout: Request timeout in seconds for a self-created client.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        token_url: str = TWITCH_TOKEN_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._http_client = http_client
        self._token_url = token_url
        self._timeout = timeout

    async def acquire_token(self, credentials: TwitchCredentials) -> AccessToken:
        """Obtain a Twitch app access token via the Client Credentials grant.

        Args:
            credentials: Client ID and secret of the Twitch application.

        Returns:
            The decoded :class:`AccessToken`.  ``access_token`` is guaranteed
            to be a non-empty string.

        Raises:
            AuthError: On transport failure, a non-2xx response, or a body
                without a usable ``access_token`` field.
        """
        try:
            async with borrow_client(self._http_client, self._timeout) as client:
                response = await client.post(
                    self._token_url,
                    data={
                        "client_id": credentials.client_id,
                        "client_secret": credentials.client_secret.get_secret_value(),
                        "grant_type": GRANT_TYPE_CLIENT_CREDENTIALS,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise AuthError(
                f"twitch: failed to obtain app access token: HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise AuthError(
                f"twitch: connection error obtaining app access token: {exc}"
            ) from exc

        try:
            token = AccessToken.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AuthError(
                "twitch: token response missing a valid 'access_token' field",
                status_code=response.status_code,
            ) from exc

        logger.debug("twitch.token_acquired", expires_in=token.expires_in)
        return token
