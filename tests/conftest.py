import json

import pytest

from agenda.config import Settings, get_settings
from agenda.core.security import hash_password
from agenda.domain.models.role import Role
from agenda.domain.models.service import Service
from agenda.domain.models.user import User
from agenda.domain.schemas.auth import SessionContext
from agenda.infrastructure.database import create_db_engine, create_session_factory
from agenda.infrastructure.migrations.runner import run_migrations

ADMIN_USER = "administrador"
ADMIN_PASSWORD = "admin123"


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Pin the settings every test sees, whatever .env or the environment says."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("TIMEZONE", "America/Argentina/Buenos_Aires")
    monkeypatch.setenv("DEFAULT_ADMIN_USER", ADMIN_USER)
    monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("BACKUP_DIR", str(tmp_path / "backups"))
    monkeypatch.setenv("BACKUP_RETENTION", "3")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def settings(test_settings) -> Settings:
    return test_settings


@pytest.fixture
def database_path(tmp_path):
    return tmp_path / "app.db"


@pytest.fixture
def engine(database_path):
    engine = create_db_engine(f"sqlite:///{database_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def migrated_engine(engine):
    run_migrations(engine)
    return engine


@pytest.fixture
def db(migrated_engine):
    session = create_session_factory(migrated_engine)()
    yield session
    session.close()


@pytest.fixture
def admin(db) -> SessionContext:
    user = db.query(User).filter(User.usuario == ADMIN_USER).one()
    return SessionContext(user_id=user.id, level=user.level)


@pytest.fixture
def make_user(db):
    """Insert a user at the given level and return its SessionContext."""
    password = hash_password("secret1")
    counter = {"n": 0}

    def _make(level: int, usuario: str | None = None) -> SessionContext:
        counter["n"] += 1
        user = User(
            nombre="Test",
            apellido="User",
            usuario=usuario or f"user{level}_{counter['n']}",
            password=password,
            level=level,
        )
        db.add(user)
        db.commit()
        return SessionContext(user_id=user.id, level=user.level)

    return _make


@pytest.fixture
def staff(make_user) -> SessionContext:
    """Level 2 (Staff): shift, customers, services and own profile, no configuration."""
    return make_user(2)


@pytest.fixture
def auditor(make_user) -> SessionContext:
    """Level 3 (Auditor): dashboard and appearance settings only."""
    return make_user(3)


@pytest.fixture
def set_role_permissions(db):
    def _set(level: int, permissions) -> None:
        role = db.get(Role, level)
        role.permissions = permissions if isinstance(permissions, str) else json.dumps(permissions)
        db.commit()

    return _set


@pytest.fixture
def catalog(db):
    """Two active services and one inactive one."""
    db.add_all([
        Service(nombre="Corte", activo=1),
        Service(nombre="Barba", activo=1),
        Service(nombre="Tintura", activo=0),
    ])
    db.commit()
