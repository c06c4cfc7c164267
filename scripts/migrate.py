"""Apply pending migrations to the configured database and print the ledger."""

import sys
import os

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from agenda.config import get_settings
from agenda.core.exceptions import MigrationError
from agenda.core.logging import configure_logging
from agenda.domain.models.migration import MigrationRecord
from agenda.infrastructure.database import create_db_engine
from agenda.infrastructure.migrations.runner import run_migrations


def migrate() -> int:
    configure_logging()
    settings = get_settings()
    print(f"Migrating {settings.DATABASE_URL} ...")

    engine = create_db_engine(settings.DATABASE_URL)
    try:
        applied = run_migrations(engine)
    except MigrationError as e:
        print(f"Migration failed: {e.message}")
        return 1

    print(f"Applied now: {applied or 'nothing, schema up to date'}")
    ledger = MigrationRecord.__table__
    with engine.connect() as conn:
        for row in conn.execute(select(ledger).order_by(ledger.c.id)):
            print(f"  {row.id:>3}  {row.name:<28} {row.applied_at}")
        conn.rollback()
    engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(migrate())
