from pathlib import Path

from agenda.main import Application


def _backups(settings):
    backup_dir = Path(settings.BACKUP_DIR)
    return sorted(p.name for p in backup_dir.iterdir()) if backup_dir.is_dir() else []


def test_shutdown_writes_backup_when_toggled_on(settings):
    app = Application(settings)
    dispatcher = app.start()
    dispatcher.dispatch("auth:login", {"usuario": "administrador", "password": "admin123"})
    assert dispatcher.dispatch("backup:toggleAuto", True)["success"] is True

    app.shutdown()

    names = _backups(settings)
    assert len(names) == 1
    assert names[0].startswith("auto_exit_")


def test_toggle_survives_a_restart(settings):
    app = Application(settings)
    dispatcher = app.start()
    dispatcher.dispatch("auth:login", {"usuario": "administrador", "password": "admin123"})
    dispatcher.dispatch("backup:toggleAuto", True)
    app.shutdown()

    app = Application(settings)
    dispatcher = app.start()
    dispatcher.dispatch("auth:login", {"usuario": "administrador", "password": "admin123"})
    assert dispatcher.dispatch("backup:getConfig")["data"] == {"enabled": True}
    app.shutdown()


def test_shutdown_skips_backup_by_default(settings):
    app = Application(settings)
    app.start()

    app.shutdown()

    assert _backups(settings) == []


def test_stored_flag_overrides_environment_default(settings, monkeypatch):
    monkeypatch.setattr(settings, "AUTO_BACKUP", True)
    app = Application(settings)
    dispatcher = app.start()
    dispatcher.dispatch("auth:login", {"usuario": "administrador", "password": "admin123"})
    dispatcher.dispatch("backup:toggleAuto", False)

    app.shutdown()

    assert _backups(settings) == []
