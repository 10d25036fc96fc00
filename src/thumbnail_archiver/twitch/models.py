"""Pydantic models for the Twitch payloads consumed by the pipeline.

Only the fields the pipeline needs are validated strictly; unknown fields
are ignored so that additive changes to the Helix API do not break parsing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class TwitchCredentials(BaseModel):
    """Application credentials for the Client Credentials grant."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: SecretStr


class AccessToken(BaseModel):
    """App access token returned by ``POST /oauth2/token``.

    ``expires_in`` is decoded for completeness but tokens are never cached;
    each pipeline invocation exchanges credentials again.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(min_length=1, repr=False)
    token_type: Optional[str] = None
    expires_in: Optional[int] = None


class StreamRecord(BaseModel):
    """One live stream as returned by ``GET /helix/streams``.

    ``thumbnail_url`` is a template containing the literal placeholders
    ``{width}`` and ``{height}``.  It is the only field the pipeline
    requires; the rest default to empty values when absent.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = ""
    user_id: str = ""
    user_login: str = ""
    user_name: str = ""
    game_id: str = ""
    game_name: str = ""
    stream_type: str = Field(default="", alias="type")
    title: str = ""
    tags: list[str] = Field(default_factory=list)
    viewer_count: int = 0
    started_at: Optional[datetime] = None
    language: str = ""
    thumbnail_url: str
    # Deprecated by Twitch; still present on some responses.
    tag_ids: list[str] = Field(default_factory=list)
    is_mature: bool = False

    @field_validator("tags", "tag_ids", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class StreamQueryResult(BaseModel):
    """First page of a ``GET /helix/streams`` response.

    The ``pagination`` cursor is ignored.  An empty ``data`` list means the
    channel has no observable live stream.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    data: list[StreamRecord]

    @property
    def is_empty(self) -> bool:
        return not self.data
