"""Backup service — copies of the SQLite store kept in the backup directory.

Backups are taken with SQLite's online backup API from the live connection,
so they are consistent without closing the store. Only the newest
BACKUP_RETENTION files are kept. The auto-backup-on-exit flag lives in the
settings table under "auto_backup".
"""

import os
import shutil
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import structlog
from sqlalchemy.orm import Session

from agenda.application.services.auth_service import require_permission
from agenda.core.clock import get_timezone, local_now
from agenda.core.exceptions import BusinessRuleViolationException, EntityNotFoundException
from agenda.domain import permissions
from agenda.domain.models.setting import Setting
from agenda.domain.schemas.auth import SessionContext
from agenda.domain.schemas.backup import BackupRead
from agenda.domain.schemas.settings import coerce_setting_value

logger = structlog.get_logger(__name__)

BACKUP_SUFFIX = ".backup"
RESTORE_SUFFIX = ".restoring"
AUTO_BACKUP_KEY = "auto_backup"


def _entries(backup_dir: Path) -> List[Path]:
    if not backup_dir.is_dir():
        return []
    files = [p for p in backup_dir.iterdir() if p.is_file() and p.suffix == BACKUP_SUFFIX]
    return sorted(files, key=lambda p: (p.stat().st_mtime, p.name), reverse=True)


def _to_read(path: Path) -> BackupRead:
    stat = path.stat()
    return BackupRead(
        name=path.name,
        size=stat.st_size,
        created_at=datetime.fromtimestamp(stat.st_mtime, tz=get_timezone()),
    )


def _resolve(backup_dir: Path, name: str) -> Path:
    path = (backup_dir / name).resolve()
    if path.parent != backup_dir.resolve() or path.suffix != BACKUP_SUFFIX:
        raise BusinessRuleViolationException("Nombre de respaldo inválido", {"name": name})
    if not path.is_file():
        raise EntityNotFoundException("Respaldo no encontrado", {"name": name})
    return path


def _prune(backup_dir: Path, retention: int) -> None:
    for old in _entries(backup_dir)[retention:]:
        try:
            old.unlink()
            logger.info("Old backup removed", name=old.name)
        except OSError as exc:
            logger.warning("Could not remove old backup", name=old.name, error=str(exc))


def list_backups(db: Session, session: Optional[SessionContext], backup_dir: Path) -> List[BackupRead]:
    require_permission(db, session, permissions.CONFIG_SISTEMA)
    return [_to_read(p) for p in _entries(backup_dir)]


def write_backup(db: Session, backup_dir: Path, label: Optional[str] = None, retention: int = 10) -> BackupRead:
    """Copy the live database into a new backup file. No permission check."""
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = local_now().strftime("%Y-%m-%dT%H-%M-%S-%f")
    dest = backup_dir / f"{label or 'manual'}_{stamp}{BACKUP_SUFFIX}"

    # pending ORM changes are not part of a backup
    db.rollback()
    source = db.connection().connection.driver_connection
    target = sqlite3.connect(str(dest))
    try:
        source.backup(target)
        # self-contained file, no -wal/-shm companions
        target.execute("PRAGMA journal_mode = DELETE")
    finally:
        target.close()
        db.rollback()

    logger.info("Backup created", name=dest.name, size=dest.stat().st_size)
    _prune(backup_dir, retention)
    return _to_read(dest)


def create_backup(db: Session, session: Optional[SessionContext], backup_dir: Path, label: Optional[str] = None, retention: int = 10) -> BackupRead:
    require_permission(db, session, permissions.CONFIG_SISTEMA)
    return write_backup(db, backup_dir, label, retention)


def delete_backup(db: Session, session: Optional[SessionContext], backup_dir: Path, name: str) -> None:
    require_permission(db, session, permissions.CONFIG_SISTEMA)
    _resolve(backup_dir, name).unlink()
    logger.info("Backup deleted", name=name)


def check_backup_file(path: Path) -> None:
    """Reject files that SQLite cannot open or that fail PRAGMA quick_check."""
    try:
        conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True)
        try:
            result = conn.execute("PRAGMA quick_check").fetchone()
        finally:
            conn.close()
    except sqlite3.DatabaseError as exc:
        raise BusinessRuleViolationException("El archivo de respaldo está corrupto", {"name": path.name}) from exc
    if not result or result[0] != "ok":
        raise BusinessRuleViolationException("El archivo de respaldo está corrupto", {"name": path.name})


def prepare_restore(db: Session, session: Optional[SessionContext], backup_dir: Path, name: str) -> Path:
    """Permission, name and integrity checks; the live store is not touched yet."""
    require_permission(db, session, permissions.CONFIG_SISTEMA)
    source = _resolve(backup_dir, name)
    check_backup_file(source)
    return source


def replace_database(db: Session, source: Path, database_path: Path) -> None:
    """Swap the live database file for source.

    Closes the session and disposes the engine; the caller must reopen the
    store (and run migrations) whether or not the swap succeeds. The copy goes
    to a sibling file first, so a failed copy leaves the live file untouched.
    """
    engine = db.get_bind()
    db.close()
    engine.dispose()

    staging = database_path.with_name(database_path.name + RESTORE_SUFFIX)
    try:
        shutil.copyfile(source, staging)
        os.replace(staging, database_path)
    finally:
        if staging.exists():
            staging.unlink()

    for suffix in ("-wal", "-shm"):
        leftover = database_path.with_name(database_path.name + suffix)
        if leftover.exists():
            leftover.unlink()

    logger.warning("Database restored from backup", name=source.name, database=str(database_path))


def restore_backup(db: Session, session: Optional[SessionContext], backup_dir: Path, name: str, database_path: Path) -> None:
    """Overwrite the live database file with a checked backup."""
    source = prepare_restore(db, session, backup_dir, name)
    replace_database(db, source, database_path)


def is_auto_backup_enabled(db: Session, default: bool = False) -> bool:
    """Stored auto-backup-on-exit flag; default when it was never set."""
    stored = db.get(Setting, AUTO_BACKUP_KEY)
    if stored is None:
        return default
    return stored.value == "true"


def get_config(db: Session, session: Optional[SessionContext], default: bool = False) -> Dict[str, bool]:
    require_permission(db, session, permissions.CONFIG_SISTEMA)
    return {"enabled": is_auto_backup_enabled(db, default)}


def set_auto_backup(db: Session, session: Optional[SessionContext], enabled: bool) -> Dict[str, bool]:
    require_permission(db, session, permissions.CONFIG_SISTEMA)
    value = coerce_setting_value(enabled)
    stored = db.get(Setting, AUTO_BACKUP_KEY)
    if stored is None:
        db.add(Setting(key=AUTO_BACKUP_KEY, value=value))
    else:
        stored.value = value
    db.commit()

    logger.info("Auto backup toggled", enabled=enabled)
    return {"enabled": enabled}
