"""Thumbnail URL resolution and download.

Twitch stream records carry a templated ``thumbnail_url`` such as::

    https://static-cdn.jtvnw.net/previews-ttv/live_user_alice-{width}x{height}.jpg

Resolution is plain substring replacement of ``{width}`` and ``{height}``;
any other brace-delimited text in the URL is left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import structlog

from thumbnail_archiver._http import DEFAULT_TIMEOUT_SECONDS, borrow_client
from thumbnail_archiver.core.exceptions import NoLiveStreamError, ThumbnailFetchError
from thumbnail_archiver.twitch.models import StreamQueryResult, StreamRecord

logger = structlog.get_logger(__name__)

THUMBNAIL_WIDTH: int = 1280
THUMBNAIL_HEIGHT: int = 720
WIDTH_PLACEHOLDER: str = "{width}"
HEIGHT_PLACEHOLDER: str = "{height}"
DEFAULT_CONTENT_TYPE: str = "image/jpeg"


@dataclass(frozen=True, slots=True)
class ThumbnailAsset:
    """Downloaded thumbnail bytes.  The payload is opaque and not validated."""

    url: str
    content: bytes = field(repr=False)
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


def resolve_thumbnail_url(
    template: str,
    width: int = THUMBNAIL_WIDTH,
    height: int = THUMBNAIL_HEIGHT,
) -> str:
    """Substitute *width* and *height* into a thumbnail URL template.

    Idempotent: a URL without placeholders is returned unchanged.
    """
    return template.replace(WIDTH_PLACEHOLDER, str(width)).replace(
        HEIGHT_PLACEHOLDER, str(height)
    )


def select_stream(result: StreamQueryResult, channel_login: str = "") -> StreamRecord:
    """Return the stream whose thumbnail is archived: first result wins.

    Helix returns at most one live stream per login, so index 0 is treated
    as canonical even when several records come back.

    Raises:
        NoLiveStreamError: If *result* holds no records.
    """
    if result.is_empty:
        raise NoLiveStreamError(channel_login)
    return result.data[0]


class ThumbnailResolver:
    """Resolves a stream record's thumbnail template and downloads the image.

    Args:
        http_client: Optional injected :class:`httpx.AsyncClient`.
        width: Value substituted for ``{width}``.
        height: Value substituted for ``{height}``.
        timeout: Request timeout in seconds for a self-created client.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        width: int = THUMBNAIL_WIDTH,
        height: int = THUMBNAIL_HEIGHT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._http_client = http_client
        self._width = width
        self._height = height
        self._timeout = timeout

    def resolve_url(self, record: StreamRecord) -> str:
        return resolve_thumbnail_url(record.thumbnail_url, self._width, self._height)

    async def resolve_thumbnail(self, record: StreamRecord) -> ThumbnailAsset:
        """Download the thumbnail of *record* at the configured dimensions.

        The request is unauthenticated; the CDN serves preview images
        publicly.

        Raises:
            ThumbnailFetchError: On an unparseable URL, transport failure or
                a non-2xx response.
        """
        url = self.resolve_url(record)
        try:
            async with borrow_client(self._http_client, self._timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.InvalidURL as exc:
            # Not a RequestError: raised while building the request.
            raise ThumbnailFetchError(
                f"thumbnail: invalid URL {url!r}: {exc}",
                url=url,
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ThumbnailFetchError(
                f"thumbnail: HTTP {exc.response.status_code} fetching {url}",
                url=url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise ThumbnailFetchError(
                f"thumbnail: request error fetching {url}: {exc}",
                url=url,
            ) from exc

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        asset = ThumbnailAsset(url=url, content=response.content, content_type=content_type)
        logger.info("thumbnail.fetched", url=url, byte_count=asset.size)
        return asset
