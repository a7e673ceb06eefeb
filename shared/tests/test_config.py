from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shared.config import Settings, settings_dict


def test_settings_dict_masks_credentials() -> None:
    settings = Settings(
        database_url="postgresql+asyncpg://festivly:hunter2@db:5432/festivly",
        sync_database_url="postgresql+psycopg://festivly:hunter2@db:5432/festivly",
        minio_access_key="AKIAEXAMPLE",
        minio_secret_key="s3cr3t",
        gemini_api_key="gm-key",
    )

    payload = settings_dict(settings)

    assert "hunter2" not in str(payload)
    assert payload["database_url"] == "postgresql+asyncpg://festivly:***@db:5432/festivly"
    assert payload["sync_database_url"].startswith("postgresql+psycopg://festivly:***@")
    assert payload["minio_access_key"] == "***"
    assert payload["minio_secret_key"] == "***"
    assert payload["gemini_api_key"] == "***"


def test_settings_dict_leaves_unset_secrets_alone() -> None:
    payload = settings_dict(Settings(gemini_api_key=None, database_url="sqlite+aiosqlite:///:memory:"))

    assert payload["gemini_api_key"] is None
    assert payload["database_url"] == "sqlite+aiosqlite:///:memory:"
    assert payload["log_level"] == "INFO"
