"""
Versioned schema migration runner.

Each migration is applied at most once, in ascending id order, inside its own
transaction that also writes its row in the schema_migrations ledger. A
failing migration rolls back completely (DDL included) and is re-raised as
MigrationError: the application must not serve requests against a partially
migrated store.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set

import structlog
from sqlalchemy import inspect, insert, select, text
from sqlalchemy.engine import Connection, Engine

from agenda.core.clock import local_timestamp
from agenda.core.exceptions import MigrationError
from agenda.domain.models.migration import MigrationRecord

logger = structlog.get_logger(__name__)

LEDGER_TABLE = MigrationRecord.__tablename__

LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TEXT NOT NULL
)
"""


@dataclass(frozen=True)
class Migration:
    id: int
    name: str
    apply: Callable[[Connection], None]


def ensure_ledger(engine: Engine) -> None:
    """Create the ledger table if it is missing. No write when it exists."""
    with engine.connect() as conn:
        exists = inspect(conn).has_table(LEDGER_TABLE)
        conn.rollback()
    if exists:
        return
    with engine.begin() as conn:
        conn.execute(text(LEDGER_DDL))
    logger.info("Migration ledger created", table=LEDGER_TABLE)


def get_applied_ids(engine: Engine) -> Set[int]:
    ledger = MigrationRecord.__table__
    with engine.connect() as conn:
        ids = {row[0] for row in conn.execute(select(ledger.c.id))}
        conn.rollback()
    return ids


def _check_unique_ids(migrations: List[Migration]) -> None:
    counts = Counter(m.id for m in migrations)
    duplicated = sorted(mid for mid, n in counts.items() if n > 1)
    if duplicated:
        raise MigrationError("Identificadores de migración duplicados", {"ids": duplicated})


def run_migrations(engine: Engine, migrations: Optional[Iterable[Migration]] = None) -> List[int]:
    """Apply every pending migration. Returns the ids applied by this call."""
    if migrations is None:
        from agenda.infrastructure.migrations.versions import MIGRATIONS
        migrations = MIGRATIONS

    pending = sorted(migrations, key=lambda m: m.id)
    _check_unique_ids(pending)

    ensure_ledger(engine)
    applied = get_applied_ids(engine)
    ledger = MigrationRecord.__table__

    newly_applied: List[int] = []
    for migration in pending:
        if migration.id in applied:
            continue

        logger.info("Applying migration", migration_id=migration.id, name=migration.name)
        try:
            with engine.begin() as conn:
                migration.apply(conn)
                conn.execute(
                    insert(ledger).values(
                        id=migration.id,
                        name=migration.name,
                        applied_at=local_timestamp(),
                    )
                )
        except Exception as exc:
            logger.exception("Migration failed", migration_id=migration.id, name=migration.name)
            raise MigrationError(
                f"La migración {migration.id} ({migration.name}) falló: {exc}",
                {"id": migration.id, "name": migration.name},
            ) from exc

        newly_applied.append(migration.id)

    if newly_applied:
        logger.info("Migrations applied", ids=newly_applied)
    else:
        logger.info("Database schema up to date", applied=len(applied))
    return newly_applied
