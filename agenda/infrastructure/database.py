"""
Database engine, session factory and declarative base.

The store is a single SQLite file. The engine keeps exactly one connection
(StaticPool) for the lifetime of the process, in WAL mode with foreign keys
enforced. pysqlite's implicit transaction handling is disabled and BEGIN is
emitted explicitly, so DDL statements are rolled back together with data
changes when a transaction fails.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from agenda.config import get_settings

Base = declarative_base()


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def create_db_engine(url: str | None = None) -> Engine:
    """Create the process-wide engine for the given SQLite URL."""
    url = url or get_settings().DATABASE_URL
    engine = create_engine(
        url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.close()
        # unicode-aware case folding; SQLite lower() only folds ASCII
        dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the integrity error comes from a UNIQUE constraint."""
    orig = exc.orig
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(orig)
