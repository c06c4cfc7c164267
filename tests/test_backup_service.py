import pytest

from agenda.application.services import backup_service
from agenda.core.exceptions import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    UnauthorizedException,
)
from agenda.domain.models.customer import Customer
from agenda.domain.models.setting import Setting
from agenda.infrastructure.database import create_session_factory


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "backups"


def test_create_and_list(db, admin, backup_dir):
    created = backup_service.create_backup(db, admin, backup_dir, label="manual")

    assert created.name.startswith("manual_")
    assert created.name.endswith(".backup")
    assert created.size > 0
    assert (backup_dir / created.name).is_file()
    assert [b.name for b in backup_service.list_backups(db, admin, backup_dir)] == [created.name]


def test_backup_is_a_valid_database(db, admin, backup_dir):
    created = backup_service.create_backup(db, admin, backup_dir)

    backup_service.check_backup_file(backup_dir / created.name)


def test_retention_keeps_newest(db, backup_dir):
    names = [backup_service.write_backup(db, backup_dir, label=f"b{i}", retention=2).name for i in range(4)]

    remaining = sorted(p.name for p in backup_dir.iterdir())
    assert remaining == sorted(names[-2:])


def test_list_without_directory(db, admin, tmp_path):
    assert backup_service.list_backups(db, admin, tmp_path / "nowhere") == []


def test_corrupt_file_is_rejected(tmp_path):
    bad = tmp_path / "bad.backup"
    bad.write_bytes(b"this is not a database" * 100)

    with pytest.raises(BusinessRuleViolationException):
        backup_service.check_backup_file(bad)


def test_restore_refuses_corrupt_backup(db, admin, backup_dir, database_path):
    backup_dir.mkdir()
    (backup_dir / "bad.backup").write_bytes(b"garbage" * 100)

    with pytest.raises(BusinessRuleViolationException):
        backup_service.restore_backup(db, admin, backup_dir, "bad.backup", database_path)


def test_names_outside_backup_dir_are_rejected(db, admin, backup_dir, tmp_path):
    backup_dir.mkdir()
    (tmp_path / "outside.backup").write_bytes(b"x")

    with pytest.raises(BusinessRuleViolationException):
        backup_service.delete_backup(db, admin, backup_dir, "../outside.backup")
    assert (tmp_path / "outside.backup").exists()


def test_delete(db, admin, backup_dir):
    created = backup_service.create_backup(db, admin, backup_dir)

    backup_service.delete_backup(db, admin, backup_dir, created.name)

    assert not (backup_dir / created.name).exists()
    with pytest.raises(EntityNotFoundException):
        backup_service.delete_backup(db, admin, backup_dir, created.name)


def test_backups_require_system_permission(db, staff, backup_dir):
    with pytest.raises(UnauthorizedException):
        backup_service.create_backup(db, staff, backup_dir)
    with pytest.raises(UnauthorizedException):
        backup_service.list_backups(db, staff, backup_dir)


def test_restore_brings_back_previous_state(db, admin, backup_dir, migrated_engine, database_path):
    snapshot = backup_service.create_backup(db, admin, backup_dir)
    db.add(Customer(documento="1", nombre="Tarde", apellido="Llegada"))
    db.commit()

    backup_service.restore_backup(db, admin, backup_dir, snapshot.name, database_path)

    reopened = create_session_factory(migrated_engine)()
    try:
        assert reopened.query(Customer).count() == 0
    finally:
        reopened.close()


def test_auto_backup_flag_falls_back_to_default(db, admin):
    assert backup_service.is_auto_backup_enabled(db) is False
    assert backup_service.is_auto_backup_enabled(db, default=True) is True
    assert backup_service.get_config(db, admin, default=True) == {"enabled": True}


def test_auto_backup_flag_is_stored(db, admin):
    assert backup_service.set_auto_backup(db, admin, True) == {"enabled": True}
    assert db.get(Setting, backup_service.AUTO_BACKUP_KEY).value == "true"
    assert backup_service.is_auto_backup_enabled(db, default=False) is True

    backup_service.set_auto_backup(db, admin, False)
    assert backup_service.get_config(db, admin, default=True) == {"enabled": False}


def test_auto_backup_config_requires_system_permission(db, staff):
    with pytest.raises(UnauthorizedException):
        backup_service.get_config(db, staff)
    with pytest.raises(UnauthorizedException):
        backup_service.set_auto_backup(db, staff, True)
    assert db.get(Setting, backup_service.AUTO_BACKUP_KEY) is None


def test_restore_checks_permission_before_the_file(db, staff, backup_dir):
    with pytest.raises(UnauthorizedException):
        backup_service.prepare_restore(db, staff, backup_dir, "missing.backup")


def test_failed_copy_leaves_live_database_untouched(db, admin, backup_dir, migrated_engine, database_path, monkeypatch):
    snapshot = backup_service.create_backup(db, admin, backup_dir)
    db.add(Customer(documento="1", nombre="Sigue", apellido="Aqui"))
    db.commit()

    def broken_copy(src, dst):
        with open(dst, "wb") as fh:
            fh.write(b"half")
        raise OSError("No space left on device")

    monkeypatch.setattr(backup_service.shutil, "copyfile", broken_copy)
    source = backup_service.prepare_restore(db, admin, backup_dir, snapshot.name)
    with pytest.raises(OSError):
        backup_service.replace_database(db, source, database_path)

    assert not database_path.with_name(database_path.name + backup_service.RESTORE_SUFFIX).exists()
    reopened = create_session_factory(migrated_engine)()
    try:
        assert reopened.query(Customer).count() == 1
    finally:
        reopened.close()
