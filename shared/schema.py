"""Verify and patch the ``profiles`` table.

Run ``python -m shared.schema verify`` to check that every column onboarding
relies on exists, or ``python -m shared.schema migrate`` to create missing
tables and add the ``brand_style_context`` column to older databases.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy import Engine, inspect, text

from .models import REQUIRED_PROFILE_COLUMNS, Base, Profile

logger = logging.getLogger(__name__)

# Columns added after the first release; safe to add in place.
ADDITIVE_COLUMNS = {"brand_style_context": "TEXT"}


@dataclass
class SchemaReport:
    table_exists: bool
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.table_exists and not self.missing


def verify_profiles_schema(engine: Engine) -> SchemaReport:
    inspector = inspect(engine)
    table = Profile.__tablename__
    if not inspector.has_table(table):
        return SchemaReport(table_exists=False, missing=list(REQUIRED_PROFILE_COLUMNS))
    columns = {column["name"] for column in inspector.get_columns(table)}
    return SchemaReport(
        table_exists=True,
        present=[name for name in REQUIRED_PROFILE_COLUMNS if name in columns],
        missing=[name for name in REQUIRED_PROFILE_COLUMNS if name not in columns],
    )


def apply_profile_migrations(engine: Engine) -> List[str]:
    """Create missing tables and add missing additive columns; return what was added."""

    Base.metadata.create_all(engine)
    existing = {column["name"] for column in inspect(engine).get_columns(Profile.__tablename__)}
    added: List[str] = []
    with engine.begin() as conn:
        for name, ddl_type in ADDITIVE_COLUMNS.items():
            if name in existing:
                continue
            conn.execute(text(f"ALTER TABLE {Profile.__tablename__} ADD COLUMN {name} {ddl_type}"))
            logger.info("Added column %s.%s", Profile.__tablename__, name)
            added.append(name)
    return added


def main(argv: Optional[Sequence[str]] = None, engine: Optional[Engine] = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m shared.schema", description=__doc__)
    parser.add_argument("command", choices=["verify", "migrate"])
    args = parser.parse_args(argv)

    if engine is None:
        from .db import sync_engine

        engine = sync_engine

    if args.command == "migrate":
        added = apply_profile_migrations(engine)
        print(f"Added columns: {', '.join(added)}" if added else "Schema already up to date")

    report = verify_profiles_schema(engine)
    if not report.table_exists:
        print("profiles table is missing")
        return 1
    for name in REQUIRED_PROFILE_COLUMNS:
        print(f"  - {name}: {'ok' if name in report.present else 'MISSING'}")
    return 0 if report.ok else 1


def cli() -> None:
    from .log_setup import setup_logging

    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    cli()
