from __future__ import annotations

import asyncio
import io
import sys
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import UUID

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.dependencies import get_db, get_event_broker, get_logo_storage
from api.main import app
from shared.models import Base
from shared.storage import LogoStorage


class MemoryObject:
    def __init__(self, data: bytes, content_type: str) -> None:
        self.data = data
        self.headers = {"Content-Type": content_type}

    def read(self) -> bytes:
        return self.data

    def close(self) -> None:
        pass

    def release_conn(self) -> None:
        pass


class MemoryMinio:
    """Just enough of the Minio client for logo round trips."""

    def __init__(self) -> None:
        self.buckets: set[str] = set()
        self.objects: Dict[str, tuple[bytes, str]] = {}

    def bucket_exists(self, bucket: str) -> bool:
        return bucket in self.buckets

    def make_bucket(self, bucket: str) -> None:
        self.buckets.add(bucket)

    def put_object(self, bucket: str, key: str, data: Any, length: int, content_type: str) -> None:
        self.objects[key] = (data.read(), content_type)

    def get_object(self, bucket: str, key: str) -> MemoryObject:
        return MemoryObject(*self.objects[key])

    def remove_object(self, bucket: str, key: str) -> None:
        del self.objects[key]


class RecordingBroker:
    def __init__(self) -> None:
        self.published: List[tuple[UUID, Dict[str, Any]]] = []

    async def publish(self, user_id: UUID, payload: Dict[str, Any]) -> int:
        self.published.append((user_id, payload))
        return 0


def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(240, 120, 20)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def session_factory() -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async def prepare_schema() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(prepare_schema())
    factory = async_sessionmaker(engine, expire_on_commit=False)

    yield factory

    asyncio.run(engine.dispose())


@pytest.fixture()
def logo_storage() -> LogoStorage:
    return LogoStorage(
        MemoryMinio(),
        bucket="festivly-logos",
        public_base_url="http://storage.test",
        max_bytes=64 * 1024,
    )


@pytest.fixture()
def event_broker() -> RecordingBroker:
    return RecordingBroker()


@pytest.fixture()
def client(
    session_factory: async_sessionmaker[AsyncSession],
    logo_storage: LogoStorage,
    event_broker: RecordingBroker,
) -> TestClient:
    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_logo_storage] = lambda: logo_storage
    app.dependency_overrides[get_event_broker] = lambda: event_broker
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def sign_up(
    client: TestClient,
    email: str = "owner@example.com",
    password: str = "secret123",
    full_name: Optional[str] = None,
) -> tuple[str, Dict[str, str]]:
    """Register and log in, returning the user id and bearer headers."""

    body: Dict[str, Any] = {"email": email, "password": password}
    if full_name:
        body["full_name"] = full_name
    registered = client.post("/auth/register", json=body)
    assert registered.status_code == 201, registered.text
    login = client.post("/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    return registered.json()["id"], {"Authorization": f"Bearer {login.json()['access_token']}"}
