"""Object storage for uploaded images.

Two backends: files on local disk served by the app under ``/uploads``, or an
S3 bucket. ``delete`` never raises; a failed delete is logged and reported
as False so database cleanup always goes ahead.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = "/uploads"


def sanitize_prefix(value: str) -> str:
    """Make a salon name safe to use as a directory or key prefix."""
    return re.sub(r"[^a-zA-Z0-9_-]", "_", value.strip()) or "misc"


def unique_name(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    return f"{uuid.uuid4().hex}{suffix}"


class ObjectStorage(Protocol):
    def save(self, data: bytes, filename: str | None, prefix: str, content_type: str) -> str:
        """Store ``data`` and return its public URL."""
        ...

    def delete(self, url: str) -> bool: ...


class LocalDiskStorage:
    """Writes under ``UPLOAD_DIR``; URLs are ``{PUBLIC_BASE_URL}/uploads/<prefix>/<name>``."""

    def __init__(self, root: str | Path | None = None, base_url: str | None = None):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.base_url = (settings.PUBLIC_BASE_URL if base_url is None else base_url).rstrip("/")

    def save(self, data: bytes, filename: str | None, prefix: str, content_type: str) -> str:
        folder = self.root / sanitize_prefix(prefix)
        folder.mkdir(parents=True, exist_ok=True)
        name = unique_name(filename)
        (folder / name).write_bytes(data)
        return f"{self.base_url}{LOCAL_URL_PREFIX}/{folder.name}/{name}"

    def delete(self, url: str) -> bool:
        path = urlparse(url).path
        if not path.startswith(f"{LOCAL_URL_PREFIX}/"):
            logger.warning("Refusing to delete non-local upload %s", url)
            return False
        target = (self.root / path[len(LOCAL_URL_PREFIX) + 1 :]).resolve()
        if self.root.resolve() not in target.parents:
            logger.warning("Refusing to delete path outside upload dir: %s", url)
            return False
        try:
            target.unlink()
        except OSError as exc:
            logger.warning("Failed to delete local upload %s: %s", url, exc)
            return False
        return True


class S3Storage:
    """Public-read objects in ``S3_BUCKET_NAME``; credentials come from the boto3 chain."""

    def __init__(self, bucket: str | None = None, base_url: str | None = None, client=None):
        self.bucket = bucket or settings.S3_BUCKET_NAME
        self.base_url = (base_url or settings.S3_BASE_URL).rstrip("/")
        self.client = client or boto3.client("s3", region_name=settings.S3_REGION or None)

    def save(self, data: bytes, filename: str | None, prefix: str, content_type: str) -> str:
        key = f"{sanitize_prefix(prefix)}/{unique_name(filename)}"
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
            ACL="public-read",
        )
        return f"{self.base_url}/{key}"

    def delete(self, url: str) -> bool:
        key = urlparse(url).path.lstrip("/")
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to delete S3 object %s: %s", key, exc)
            return False
        return True


def get_storage() -> ObjectStorage:
    """Router dependency returning the configured backend."""
    if settings.STORAGE_BACKEND == "s3":
        return S3Storage()
    return LocalDiskStorage()
