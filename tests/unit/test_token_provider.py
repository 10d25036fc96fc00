"""Tests for the Client Credentials token exchange.

Covers:
- Happy path: form-encoded grant request, decoded AccessToken
- Extra response fields are ignored; expiry is decoded but optional
- 4xx/5xx responses raise AuthError carrying the status code
- Bodies without a usable access_token raise AuthError
- Transport failures raise AuthError
- Each call performs a fresh exchange (no caching)
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
import respx
from pydantic import SecretStr

from thumbnail_archiver.core.exceptions import AuthError, FailureReason
from thumbnail_archiver.twitch.auth import TokenProvider
from thumbnail_archiver.twitch.config import TWITCH_TOKEN_URL
from thumbnail_archiver.twitch.models import TwitchCredentials

CREDENTIALS = TwitchCredentials(client_id="cid-123", client_secret=SecretStr("shh-456"))


class TestAcquireToken:
    @pytest.mark.asyncio
    async def test_returns_token_from_well_formed_body(self, token_payload: dict[str, Any]) -> None:
        """acquire_token() decodes access_token, token_type and expires_in."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(200, json=token_payload)
            )
            token = await TokenProvider().acquire_token(CREDENTIALS)

        assert token.access_token == "jostpf5q0uzmxmkba9iyug38kjtgh"
        assert token.token_type == "bearer"
        assert token.expires_in == 5011271

    @pytest.mark.asyncio
    async def test_sends_form_encoded_client_credentials_grant(self) -> None:
        """The POST body carries client_id, client_secret and grant_type as a form."""
        with respx.mock:
            route = respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "T"})
            )
            await TokenProvider().acquire_token(CREDENTIALS)

        request = route.calls.last.request
        assert request.headers["content-type"].startswith(
            "application/x-www-form-urlencoded"
        )
        form = parse_qs(request.content.decode())
        assert form == {
            "client_id": ["cid-123"],
            "client_secret": ["shh-456"],
            "grant_type": ["client_credentials"],
        }

    @pytest.mark.asyncio
    async def test_minimal_body_is_accepted(self) -> None:
        """Only access_token is required; token_type/expires_in may be absent."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "T", "scope": []})
            )
            token = await TokenProvider().acquire_token(CREDENTIALS)

        assert token.access_token == "T"
        assert token.expires_in is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 500, 503])
    async def test_error_status_raises_auth_error(self, status: int) -> None:
        """Any 4xx/5xx from the token endpoint raises AuthError with the status."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(status, json={"message": "invalid client"})
            )
            with pytest.raises(AuthError) as exc_info:
                await TokenProvider().acquire_token(CREDENTIALS)

        assert exc_info.value.status_code == status
        assert exc_info.value.reason is FailureReason.AUTH_ERROR

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"token_type": "bearer", "expires_in": 3600},
            {"access_token": ""},
            {"access_token": 12345},
            {"access_token": None},
            ["not", "an", "object"],
        ],
    )
    async def test_malformed_body_raises_auth_error(self, body: Any) -> None:
        """A 200 without a non-empty string access_token raises AuthError."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(return_value=httpx.Response(200, json=body))
            with pytest.raises(AuthError, match="access_token"):
                await TokenProvider().acquire_token(CREDENTIALS)

    @pytest.mark.asyncio
    async def test_non_json_body_raises_auth_error(self) -> None:
        """A 200 with a non-JSON body raises AuthError."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(200, text="<html>maintenance</html>")
            )
            with pytest.raises(AuthError):
                await TokenProvider().acquire_token(CREDENTIALS)

    @pytest.mark.asyncio
    async def test_transport_error_raises_auth_error(self) -> None:
        """Connection failures raise AuthError without a status code."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(AuthError) as exc_info:
                await TokenProvider().acquire_token(CREDENTIALS)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_every_call_exchanges_again(self) -> None:
        """Tokens are not cached: two calls hit the token endpoint twice."""
        with respx.mock:
            route = respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "T"})
            )
            provider = TokenProvider()
            await provider.acquire_token(CREDENTIALS)
            await provider.acquire_token(CREDENTIALS)

        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_uses_injected_client_without_closing_it(self) -> None:
        """An injected AsyncClient is used for the request and left open."""
        with respx.mock:
            respx.post(TWITCH_TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "T"})
            )
            async with httpx.AsyncClient() as client:
                await TokenProvider(client).acquire_token(CREDENTIALS)
                assert not client.is_closed


class TestTokenRepr:
    def test_secret_and_token_are_hidden_from_repr(self) -> None:
        """Neither the client secret nor the access token render in repr()."""
        from thumbnail_archiver.twitch.models import AccessToken

        token = AccessToken(access_token="very-secret-token")
        assert "very-secret-token" not in repr(token)
        assert "shh-456" not in repr(CREDENTIALS)
