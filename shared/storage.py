"""Brand logo storage on MinIO/S3."""
from __future__ import annotations

import io
import logging
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath
from typing import Dict, Optional

from minio import Minio
from minio.error import S3Error
from PIL import Image, UnidentifiedImageError

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

LOGO_CONTENT_TYPES: Dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/svg+xml": ".svg",
}
VECTOR_CONTENT_TYPES = {"image/svg+xml"}
# Logos are served from a public URL, so active SVG content is refused.
UNSAFE_SVG = re.compile(rb"<script|<foreignobject|javascript:|\son[a-z]+\s*=", re.IGNORECASE)


class StorageError(RuntimeError):
    """Raised when the object store cannot complete a request."""


class UploadRejected(ValueError):
    """Raised when an upload fails validation before reaching the store."""

    def __init__(self, reason: str, status_code: int = 400) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


@dataclass
class StoredObject:
    """An object written to the bucket together with its public URL."""

    key: str
    url: str
    size: int
    content_type: str


def validate_logo(payload: bytes, content_type: str, max_bytes: int) -> str:
    """Check a logo upload and return its normalised content type."""

    normalised = (content_type or "").split(";")[0].strip().lower()
    if normalised not in LOGO_CONTENT_TYPES:
        raise UploadRejected(f"Unsupported logo type '{content_type}'", status_code=415)
    if not payload:
        raise UploadRejected("Logo file is empty")
    if len(payload) > max_bytes:
        raise UploadRejected(
            f"Logo exceeds the {max_bytes} byte limit ({len(payload)} bytes)", status_code=413
        )
    if normalised in VECTOR_CONTENT_TYPES:
        if b"<svg" not in payload[:4096].lower():
            raise UploadRejected("Logo is not a valid SVG document")
        if UNSAFE_SVG.search(payload):
            raise UploadRejected("SVG logos may not contain scripts or event handlers")
        return normalised
    try:
        with Image.open(io.BytesIO(payload)) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, EOFError, ValueError) as exc:
        raise UploadRejected(f"Logo could not be decoded as an image: {exc}") from exc
    return normalised


class LogoStorage:
    """Writes validated logos into a bucket and hands back public links."""

    def __init__(
        self,
        client: Minio,
        bucket: str,
        public_base_url: str,
        max_bytes: int,
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes
        self._bucket_ready = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "LogoStorage":
        client = Minio(
            endpoint=settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
        )
        return cls(
            client,
            bucket=settings.minio_bucket,
            public_base_url=settings.public_storage_url,
            max_bytes=settings.max_logo_bytes,
        )

    def ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
        self._bucket_ready = True

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def key_for_url(self, url: str) -> Optional[str]:
        prefix = f"{self.public_base_url}/{self.bucket}/"
        if url.startswith(prefix):
            return url[len(prefix):]
        return None

    def upload_logo(
        self,
        user_id: uuid.UUID,
        filename: str | None,
        payload: bytes,
        content_type: str,
    ) -> StoredObject:
        content_type = validate_logo(payload, content_type, self.max_bytes)
        suffix = PurePath(filename or "").suffix.lower() or LOGO_CONTENT_TYPES[content_type]
        key = f"logos/{user_id}/{uuid.uuid4().hex}{suffix}"
        try:
            self.ensure_bucket()
            self.client.put_object(
                self.bucket,
                key,
                io.BytesIO(payload),
                len(payload),
                content_type=content_type,
            )
        except S3Error as exc:
            logger.error("Logo upload failed for user %s: %s", user_id, exc)
            raise StorageError(str(exc)) from exc
        logger.info("Stored logo for user %s at %s (%d bytes)", user_id, key, len(payload))
        return StoredObject(key=key, url=self.public_url(key), size=len(payload), content_type=content_type)

    def read_logo(self, url: str) -> tuple[bytes, str]:
        """Fetch a previously uploaded logo by its public URL."""

        key = self.key_for_url(url)
        if key is None:
            raise StorageError(f"Logo URL '{url}' is not managed by this store")
        try:
            response = self.client.get_object(self.bucket, key)
            try:
                data = response.read()
                content_type = response.headers.get("Content-Type", "application/octet-stream")
            finally:
                response.close()
                response.release_conn()
        except S3Error as exc:
            raise StorageError(str(exc)) from exc
        return data, content_type

    def delete_logo(self, url: str) -> bool:
        """Remove a replaced logo; a failure leaves an orphan but is not fatal."""

        key = self.key_for_url(url)
        if key is None:
            return False
        try:
            self.client.remove_object(self.bucket, key)
        except S3Error as exc:
            logger.warning("Could not delete replaced logo %s: %s", key, exc)
            return False
        logger.info("Deleted replaced logo %s", key)
        return True


@lru_cache()
def get_storage() -> LogoStorage:
    return LogoStorage.from_settings(get_settings())
