"""
Ordered migration list — the only place schema and seed data are defined.

Every step must be safe to re-enter inside its own transaction: tables use
CREATE ... IF NOT EXISTS and seeds only run when the target table is empty.
"""

import json

from sqlalchemy import text
from sqlalchemy.engine import Connection

from agenda.config import get_settings
from agenda.core.clock import local_timestamp
from agenda.core.security import hash_password
from agenda.domain.models.setting import DEFAULT_SETTINGS
from agenda.domain.permissions import DEFAULT_ROLES
from agenda.infrastructure.migrations.runner import Migration


def _count(conn: Connection, table: str) -> int:
    return conn.execute(text(f"SELECT count(*) FROM {table}")).scalar() or 0


def create_auth_tables(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS usuarios (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            nombre TEXT NOT NULL,
            apellido TEXT NOT NULL,
            usuario TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            level INTEGER NOT NULL CHECK (level >= 1),
            last_login TEXT,
            created_at TEXT DEFAULT (datetime('now', 'localtime'))
        )
    """))
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS roles (
            id INTEGER PRIMARY KEY,
            label TEXT NOT NULL,
            permissions TEXT DEFAULT '[]'
        )
    """))


def seed_roles_and_admin(conn: Connection) -> None:
    if _count(conn, "roles") == 0:
        for role_id, label, permissions in DEFAULT_ROLES:
            conn.execute(
                text("INSERT INTO roles (id, label, permissions) VALUES (:id, :label, :permissions)"),
                {"id": role_id, "label": label, "permissions": json.dumps(permissions)},
            )

    if _count(conn, "usuarios") == 0:
        settings = get_settings()
        conn.execute(
            text("""
                INSERT INTO usuarios (nombre, apellido, usuario, password, level, created_at)
                VALUES (:nombre, :apellido, :usuario, :password, 1, :created_at)
            """),
            {
                "nombre": "Admin",
                "apellido": "Principal",
                "usuario": settings.DEFAULT_ADMIN_USER,
                "password": hash_password(settings.DEFAULT_ADMIN_PASSWORD),
                "created_at": local_timestamp(),
            },
        )


def create_catalog_tables(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS customers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            documento TEXT NOT NULL UNIQUE,
            nombre TEXT NOT NULL,
            apellido TEXT NOT NULL,
            telefono TEXT,
            email TEXT,
            created_at TEXT DEFAULT (datetime('now', 'localtime')),
            updated_at TEXT DEFAULT (datetime('now', 'localtime'))
        )
    """))
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS servicios (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            nombre TEXT NOT NULL UNIQUE,
            activo INTEGER NOT NULL DEFAULT 1,
            created_at TEXT DEFAULT (datetime('now', 'localtime'))
        )
    """))


def create_shifts_table(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS shifts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            fecha TEXT NOT NULL,
            hora TEXT NOT NULL,
            cliente TEXT NOT NULL,
            servicio TEXT NOT NULL,
            profesional TEXT DEFAULT 'Staff',
            estado TEXT NOT NULL DEFAULT 'pendiente',
            customer_id INTEGER REFERENCES customers(id) ON DELETE SET NULL,
            created_at TEXT DEFAULT (datetime('now', 'localtime'))
        )
    """))
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_shifts_fecha ON shifts (fecha)"))


def create_settings_table(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """))
    if _count(conn, "settings") == 0:
        for key, value in DEFAULT_SETTINGS.items():
            conn.execute(
                text("INSERT INTO settings (key, value) VALUES (:key, :value)"),
                {"key": key, "value": value},
            )


MIGRATIONS = [
    Migration(1, "create_auth_tables", create_auth_tables),
    Migration(2, "seed_roles_and_admin", seed_roles_and_admin),
    Migration(3, "create_catalog_tables", create_catalog_tables),
    Migration(4, "create_shifts_table", create_shifts_table),
    Migration(5, "create_settings_table", create_settings_table),
]
