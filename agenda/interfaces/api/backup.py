"""Backup handlers — list, create, delete and restore copies of the store, and the exit-backup switch."""

from pathlib import Path

from agenda.application.services import backup_service
from agenda.core.exceptions import BusinessRuleViolationException
from agenda.domain.schemas.backup import AutoBackupRequest, BackupCreateRequest, BackupNameRequest
from agenda.interfaces.dispatcher import Router

router = Router(prefix="backup")


def _backup_dir(ctx) -> Path:
    return Path(ctx.settings.BACKUP_DIR)


def _database_path(ctx) -> Path:
    database = ctx.db.get_bind().url.database
    if not database or database == ":memory:":
        raise BusinessRuleViolationException("La base de datos en memoria no admite restauración")
    return Path(database)


@router.handle("list")
def list_backups(ctx, _):
    return backup_service.list_backups(ctx.db, ctx.session, _backup_dir(ctx))


@router.handle("create", payload=BackupCreateRequest)
def create_backup(ctx, body: BackupCreateRequest):
    return backup_service.create_backup(
        ctx.db, ctx.session, _backup_dir(ctx), body.label, ctx.settings.BACKUP_RETENTION
    )


@router.handle("delete", payload=BackupNameRequest)
def delete_backup(ctx, body: BackupNameRequest):
    backup_service.delete_backup(ctx.db, ctx.session, _backup_dir(ctx), body.name)
    return None


@router.handle("restore", payload=BackupNameRequest)
def restore_backup(ctx, body: BackupNameRequest):
    """Swap the database file and reopen it; the login session ends."""
    source = backup_service.prepare_restore(ctx.db, ctx.session, _backup_dir(ctx), body.name)
    database_path = _database_path(ctx)
    try:
        backup_service.replace_database(ctx.db, source, database_path)
    finally:
        # the engine is disposed even when the copy fails
        ctx.reopen()
    return {"restored": body.name}


@router.handle("getConfig")
def get_config(ctx, _):
    return backup_service.get_config(ctx.db, ctx.session, ctx.settings.AUTO_BACKUP)


@router.handle("toggleAuto", payload=AutoBackupRequest)
def toggle_auto(ctx, body: AutoBackupRequest):
    return backup_service.set_auto_backup(ctx.db, ctx.session, body.enabled)
