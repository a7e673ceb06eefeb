from __future__ import annotations

import io
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from minio.error import S3Error
from PIL import Image

from shared.storage import LogoStorage, StorageError, UploadRejected, validate_logo

SVG_BYTES = b'<?xml version="1.0"?><svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"></svg>'


def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(12, 34, 56)).save(buffer, format="PNG")
    return buffer.getvalue()


class DeniedError(S3Error):
    def __init__(self) -> None:
        Exception.__init__(self, "AccessDenied")


class FakeObject:
    def __init__(self, data: bytes, content_type: str) -> None:
        self.data = data
        self.headers = {"Content-Type": content_type}
        self.closed = False

    def read(self) -> bytes:
        return self.data

    def close(self) -> None:
        self.closed = True

    def release_conn(self) -> None:
        pass


class FakeMinio:
    def __init__(self, bucket_exists: bool = False, fail_put: bool = False) -> None:
        self.buckets = {"festivly-logos"} if bucket_exists else set()
        self.objects: Dict[str, tuple[bytes, str]] = {}
        self.made: List[str] = []
        self.fail_put = fail_put

    def bucket_exists(self, bucket: str) -> bool:
        return bucket in self.buckets

    def make_bucket(self, bucket: str) -> None:
        self.made.append(bucket)
        self.buckets.add(bucket)

    def put_object(self, bucket: str, key: str, data: Any, length: int, content_type: str) -> None:
        if self.fail_put:
            raise DeniedError()
        payload = data.read()
        assert len(payload) == length
        self.objects[key] = (payload, content_type)

    def get_object(self, bucket: str, key: str) -> FakeObject:
        payload, content_type = self.objects[key]
        return FakeObject(payload, content_type)

    def remove_object(self, bucket: str, key: str) -> None:
        if self.fail_put:
            raise DeniedError()
        del self.objects[key]


def make_storage(client: FakeMinio, max_bytes: int = 1024) -> LogoStorage:
    return LogoStorage(
        client,
        bucket="festivly-logos",
        public_base_url="http://cdn.local:9000/",
        max_bytes=max_bytes,
    )


def test_validate_logo_accepts_real_images() -> None:
    assert validate_logo(png_bytes(), "image/PNG; charset=binary", 1024) == "image/png"
    assert validate_logo(SVG_BYTES, "image/svg+xml", 1024) == "image/svg+xml"


@pytest.mark.parametrize(
    "payload, content_type, status_code",
    [
        (b"%PDF-1.4", "application/pdf", 415),
        (b"", "image/png", 400),
        (b"x" * 2048, "image/png", 413),
        (b"not really a png", "image/png", 400),
        (b"<html></html>", "image/svg+xml", 400),
    ],
)
def test_validate_logo_rejections(payload: bytes, content_type: str, status_code: int) -> None:
    with pytest.raises(UploadRejected) as excinfo:
        validate_logo(payload, content_type, 1024)

    assert excinfo.value.status_code == status_code


def test_upload_creates_bucket_and_returns_public_url() -> None:
    client = FakeMinio()
    storage = make_storage(client)
    user_id = uuid.uuid4()
    payload = png_bytes()

    stored = storage.upload_logo(user_id, "Brand Logo.PNG", payload, "image/png")

    assert client.made == ["festivly-logos"]
    assert stored.key.startswith(f"logos/{user_id}/")
    assert stored.key.endswith(".png")
    assert stored.url == f"http://cdn.local:9000/festivly-logos/{stored.key}"
    assert stored.size == len(payload)
    assert client.objects[stored.key] == (payload, "image/png")


def test_upload_without_filename_uses_content_type_suffix() -> None:
    storage = make_storage(FakeMinio(bucket_exists=True))

    stored = storage.upload_logo(uuid.uuid4(), None, SVG_BYTES, "image/svg+xml")

    assert stored.key.endswith(".svg")


def test_upload_keys_are_unique_per_upload() -> None:
    storage = make_storage(FakeMinio(bucket_exists=True))
    user_id = uuid.uuid4()

    first = storage.upload_logo(user_id, "logo.png", png_bytes(), "image/png")
    second = storage.upload_logo(user_id, "logo.png", png_bytes(), "image/png")

    assert first.key != second.key


def test_rejected_upload_never_reaches_the_store() -> None:
    client = FakeMinio()
    storage = make_storage(client)

    with pytest.raises(UploadRejected):
        storage.upload_logo(uuid.uuid4(), "logo.gif", b"GIF-broken", "image/gif")

    assert client.objects == {}
    assert client.made == []


def test_store_failure_becomes_storage_error() -> None:
    storage = make_storage(FakeMinio(bucket_exists=True, fail_put=True))

    with pytest.raises(StorageError):
        storage.upload_logo(uuid.uuid4(), "logo.png", png_bytes(), "image/png")


def test_read_logo_round_trips_by_url() -> None:
    storage = make_storage(FakeMinio())
    stored = storage.upload_logo(uuid.uuid4(), "logo.svg", SVG_BYTES, "image/svg+xml")

    assert storage.read_logo(stored.url) == (SVG_BYTES, "image/svg+xml")


def test_read_logo_refuses_foreign_urls() -> None:
    storage = make_storage(FakeMinio())

    assert storage.key_for_url("https://elsewhere.example/logo.png") is None
    with pytest.raises(StorageError):
        storage.read_logo("https://elsewhere.example/logo.png")


@pytest.mark.parametrize(
    "payload",
    [
        b'<svg xmlns="http://www.w3.org/2000/svg"><script>alert(1)</script></svg>',
        b'<svg xmlns="http://www.w3.org/2000/svg" onload="alert(1)"></svg>',
        b'<svg xmlns="http://www.w3.org/2000/svg"><a href="javascript:alert(1)"/></svg>',
        b'<svg xmlns="http://www.w3.org/2000/svg"><foreignObject><p/></foreignObject></svg>',
    ],
)
def test_active_svg_content_is_rejected(payload: bytes) -> None:
    with pytest.raises(UploadRejected) as excinfo:
        validate_logo(payload, "image/svg+xml", 1024)

    assert excinfo.value.status_code == 400


def test_delete_logo_removes_managed_object() -> None:
    client = FakeMinio()
    storage = make_storage(client)
    stored = storage.upload_logo(uuid.uuid4(), "logo.svg", SVG_BYTES, "image/svg+xml")

    assert storage.delete_logo(stored.url) is True
    assert client.objects == {}
    assert storage.delete_logo("https://elsewhere.example/logo.png") is False


def test_delete_logo_failure_is_reported_not_raised() -> None:
    client = FakeMinio()
    storage = make_storage(client)
    stored = storage.upload_logo(uuid.uuid4(), "logo.svg", SVG_BYTES, "image/svg+xml")
    client.fail_put = True

    assert storage.delete_logo(stored.url) is False
    assert stored.key in client.objects
