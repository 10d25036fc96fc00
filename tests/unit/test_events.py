"""Tests for stream-online trigger event parsing."""

from __future__ import annotations

from typing import Any

import pytest

from thumbnail_archiver.core.exceptions import FailureReason, MalformedEventError
from thumbnail_archiver.events import parse_stream_online_event, validate_channel_login


class TestParseStreamOnlineEvent:
    def test_envelope_detail_is_unwrapped(self) -> None:
        payload = {
            "detail-type": "StreamOnline",
            "source": "twitch",
            "detail": {"twitch_user_login": "alice"},
        }

        assert parse_stream_online_event(payload).twitch_user_login == "alice"

    def test_bare_detail_is_accepted(self) -> None:
        assert parse_stream_online_event({"twitch_user_login": "alice"}).twitch_user_login == "alice"

    def test_surrounding_whitespace_is_stripped(self) -> None:
        event = parse_stream_online_event({"detail": {"twitch_user_login": "  alice \n"}})
        assert event.twitch_user_login == "alice"

    def test_extra_detail_fields_are_ignored(self) -> None:
        event = parse_stream_online_event(
            {"detail": {"twitch_user_login": "alice", "broadcaster_user_id": "42"}}
        )
        assert event.twitch_user_login == "alice"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"detail": {}},
            {"detail": {"twitch_user_login": ""}},
            {"detail": {"twitch_user_login": "   "}},
            {"detail": {"twitch_user_login": None}},
            {"detail": {"twitch_user_login": 42}},
            {"detail": "alice"},
            {"detail": None},
            "alice",
            None,
            ["alice"],
        ],
    )
    def test_malformed_payloads_raise(self, payload: Any) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            parse_stream_online_event(payload)

        assert exc_info.value.reason is FailureReason.MALFORMED_EVENT


class TestValidateChannelLogin:
    def test_returns_stripped_login(self) -> None:
        assert validate_channel_login(" alice\t") == "alice"

    @pytest.mark.parametrize("login", ["", "   ", None, 42])
    def test_blank_or_non_string_login_raises(self, login: Any) -> None:
        with pytest.raises(MalformedEventError):
            validate_channel_login(login)
