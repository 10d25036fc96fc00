"""API constants for the Twitch identity and Helix endpoints.

Used by :class:`~thumbnail_archiver.twitch.auth.TokenProvider` and
:class:`~thumbnail_archiver.twitch.streams.StreamLookup`.
"""

from __future__ import annotations

TWITCH_TOKEN_URL: str = "https://id.twitch.tv/oauth2/token"
"""OAuth 2.0 token endpoint for the Client Credentials grant."""

TWITCH_API_BASE: str = "https://api.twitch.tv/helix"
"""Base URL for the Twitch Helix REST API."""

STREAMS_ENDPOINT: str = "/streams"
"""Helix endpoint listing live streams, filtered here by ``user_login``."""

CLIENT_ID_HEADER: str = "Client-Id"
"""Header carrying the application Client ID on every Helix request."""

AUTHORIZATION_HEADER: str = "Authorization"
"""Header carrying ``Bearer <token>`` on every Helix request."""

GRANT_TYPE_CLIENT_CREDENTIALS: str = "client_credentials"

STREAM_TYPE_LIVE: str = "live"
"""Value of the ``type`` query parameter that restricts results to live streams."""
