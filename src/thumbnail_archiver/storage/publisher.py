"""Thumbnail persistence to S3-compatible object storage.

Objects are written with the MinIO client under a deterministic key,
``<channel_login>.jpg``, so that each new stream of a channel overwrites
the previous thumbnail.  The client is synchronous; async callers run
:meth:`ArchivePublisher.publish` in a worker thread.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any

import structlog
from minio import Minio  # type: ignore[import-untyped]
from minio.credentials import (  # type: ignore[import-untyped]
    ChainedProvider,
    EnvAWSProvider,
    EnvMinioProvider,
    IamAwsProvider,
)

from thumbnail_archiver.core.exceptions import PublishError

if TYPE_CHECKING:
    from thumbnail_archiver.config.settings import Settings
    from thumbnail_archiver.thumbnails import ThumbnailAsset

logger = structlog.get_logger(__name__)

STORAGE_KEY_SUFFIX: str = ".jpg"


def storage_key(channel_login: str) -> str:
    """Return the object key for a channel's thumbnail, ``<login>.jpg``."""
    return f"{channel_login}{STORAGE_KEY_SUFFIX}"


def build_minio_client(settings: Settings) -> Minio:
    """Construct a MinIO client from settings.

    Static keys are used when ``minio_access_key`` is configured.  Otherwise
    credentials are resolved from the standard AWS/MinIO environment
    variables or the instance/task IAM role, in that order.
    """
    if settings.minio_access_key:
        secret_key = (
            settings.minio_secret_key.get_secret_value()
            if settings.minio_secret_key is not None
            else None
        )
        return Minio(
            settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=secret_key,
            region=settings.minio_region,
            secure=settings.minio_secure,
        )
    return Minio(
        settings.minio_endpoint,
        region=settings.minio_region,
        secure=settings.minio_secure,
        credentials=ChainedProvider(
            [EnvAWSProvider(), EnvMinioProvider(), IamAwsProvider()]
        ),
    )


class ArchivePublisher:
    """Writes thumbnail bytes to a bucket, overwriting any existing object.

    Args:
        client: A configured :class:`minio.Minio` (or compatible) client.
        ensure_bucket: Create the bucket before writing when it is missing.
    """

    def __init__(self, client: Any, ensure_bucket: bool = False) -> None:  # noqa: ANN401
        self._client = client
        self._ensure_bucket = ensure_bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> ArchivePublisher:
        return cls(
            build_minio_client(settings),
            ensure_bucket=settings.minio_auto_create_bucket,
        )

    def publish(self, key: str, asset: ThumbnailAsset, bucket_name: str) -> None:
        """Store *asset* under *key* in *bucket_name*.

        Any failure of the storage client is logged with its full detail and
        replaced by a generic :class:`PublishError`; the native error type is
        not meaningful to callers of the pipeline.

        Raises:
            PublishError: If the bucket check or the object write fails.
        """
        log = logger.bind(bucket=bucket_name, object_key=key)
        try:
            if self._ensure_bucket and not self._client.bucket_exists(bucket_name=bucket_name):
                self._client.make_bucket(bucket_name=bucket_name)
                log.info("archive.bucket_created")

            self._client.put_object(
                bucket_name=bucket_name,
                object_name=key,
                data=io.BytesIO(asset.content),
                length=len(asset.content),
                content_type=asset.content_type,
            )
        except Exception as exc:  # noqa: BLE001
            log.error(
                "archive.publish_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PublishError(storage_key=key) from exc

        log.info("archive.published", byte_count=len(asset.content))
