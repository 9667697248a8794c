"""Image storage: upload diner images and thumbnails to S3-compatible storage.

Objects are keyed per diner:
    diner/{diner_id}/images/{uuid}.{ext}
    diner/{diner_id}/thumbnails/{uuid}.jpg
"""

from __future__ import annotations

import asyncio
import io
import logging
import uuid
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from app.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()
_THUMB_SIZE = tuple(_settings.s3.thumbnail_size)

_CONTENT_TYPES = {
    "jpg": "image/jpeg", "jpeg": "image/jpeg", "png": "image/png",
    "gif": "image/gif", "webp": "image/webp",
}


class StorageError(Exception):
    """Raised when an object cannot be written to or removed from storage."""


@lru_cache
def get_s3_client():
    s3 = _settings.s3
    kwargs = {"region_name": s3.region}
    if s3.endpoint_url:
        kwargs["endpoint_url"] = s3.endpoint_url
    if s3.access_key_id:
        kwargs["aws_access_key_id"] = s3.access_key_id
        kwargs["aws_secret_access_key"] = s3.secret_access_key
    return boto3.client("s3", **kwargs)


def get_extension(filename: str | None) -> str:
    """Lowercase extension without the dot, or "" if the name has none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def build_keys(diner_id: str, ext: str) -> tuple[str, str]:
    name = uuid.uuid4().hex
    return (
        f"diner/{diner_id}/images/{name}.{ext}",
        f"diner/{diner_id}/thumbnails/{name}.jpg",
    )


def public_url(key: str) -> str:
    if not key:
        return ""
    base = _settings.s3.public_base_url
    if not base:
        base = f"https://{_settings.s3.bucket}.s3.{_settings.s3.region}.amazonaws.com"
    return f"{base.rstrip('/')}/{key}"


def make_thumbnail(data: bytes) -> bytes:
    img = Image.open(io.BytesIO(data))
    img_copy = img.convert("RGB")
    img_copy.thumbnail(_THUMB_SIZE)
    buf = io.BytesIO()
    img_copy.save(buf, "JPEG", quality=85)
    return buf.getvalue()


def _upload_sync(data: bytes, diner_id: str, ext: str) -> tuple[str, str]:
    try:
        thumb_bytes = make_thumbnail(data)
    except (UnidentifiedImageError, OSError) as e:
        raise StorageError(f"Not a readable image: {e}") from e

    key, thumb_key = build_keys(diner_id, ext)
    client = get_s3_client()
    bucket = _settings.s3.bucket
    try:
        client.put_object(
            Bucket=bucket, Key=key, Body=data,
            ContentType=_CONTENT_TYPES.get(ext, "application/octet-stream"),
        )
        client.put_object(Bucket=bucket, Key=thumb_key, Body=thumb_bytes, ContentType="image/jpeg")
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Upload to s3://{bucket}/{key} failed: {e}") from e

    logger.info("Uploaded diner image s3://%s/%s (%d bytes)", bucket, key, len(data))
    return key, thumb_key


async def upload_diner_image(data: bytes, diner_id: str, ext: str) -> tuple[str, str]:
    """Upload original + thumbnail. Returns (key, thumbnail_key)."""
    return await asyncio.to_thread(_upload_sync, data, diner_id, ext)


def _remove_sync(*keys: str) -> None:
    client = get_s3_client()
    bucket = _settings.s3.bucket
    for key in keys:
        if not key:
            continue
        try:
            client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Delete of s3://{bucket}/{key} failed: {e}") from e
        logger.info("Removed s3://%s/%s", bucket, key)


async def remove_objects(*keys: str) -> None:
    await asyncio.to_thread(_remove_sync, *keys)
