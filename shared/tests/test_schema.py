from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from shared.models import REQUIRED_PROFILE_COLUMNS, Base
from shared.schema import apply_profile_migrations, main, verify_profiles_schema


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


def _create_legacy_profiles(engine) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE profiles ("
                "id CHAR(32) PRIMARY KEY, email VARCHAR(255), industry_type VARCHAR(120), "
                "brand_logo_url TEXT)"
            )
        )


def test_verify_reports_missing_table(engine) -> None:
    report = verify_profiles_schema(engine)

    assert not report.table_exists
    assert not report.ok
    assert report.missing == list(REQUIRED_PROFILE_COLUMNS)


def test_verify_passes_on_current_schema(engine) -> None:
    Base.metadata.create_all(engine)

    report = verify_profiles_schema(engine)

    assert report.ok
    assert report.present == list(REQUIRED_PROFILE_COLUMNS)


def test_migrate_adds_style_column_to_legacy_table(engine) -> None:
    _create_legacy_profiles(engine)
    assert verify_profiles_schema(engine).missing == ["brand_style_context"]

    added = apply_profile_migrations(engine)

    assert added == ["brand_style_context"]
    columns = {column["name"] for column in inspect(engine).get_columns("profiles")}
    assert "brand_style_context" in columns
    assert apply_profile_migrations(engine) == []


def test_cli_exit_codes(engine, capsys) -> None:
    assert main(["verify"], engine=engine) == 1
    assert "profiles table is missing" in capsys.readouterr().out

    assert main(["migrate"], engine=engine) == 0
    output = capsys.readouterr().out
    assert "brand_style_context: ok" in output


def test_cli_rejects_unknown_command(engine) -> None:
    with pytest.raises(SystemExit):
        main(["drop"], engine=engine)
