import pytest

from agenda.application.services import auth_service
from agenda.core.exceptions import EntityNotFoundException, InvalidCredentialsException, UnauthorizedException
from agenda.core.security import verify_password
from agenda.domain.models.user import User
from agenda.domain.schemas.auth import SessionContext


def test_login_opens_session_and_stamps_last_login(db):
    session, user = auth_service.login(db, "administrador", "admin123")

    assert session == SessionContext(user_id=user.id, level=1)
    assert user.usuario == "administrador"
    assert user.last_login is not None
    assert "password" not in user.model_dump()
    assert db.get(User, user.id).last_login == user.last_login


def test_login_wrong_password(db):
    with pytest.raises(InvalidCredentialsException):
        auth_service.login(db, "administrador", "wrong-password")


def test_login_unknown_user(db):
    with pytest.raises(EntityNotFoundException):
        auth_service.login(db, "nobody", "admin123")


def test_login_rehashes_legacy_bcrypt_hash(db):
    import bcrypt

    legacy = bcrypt.hashpw(b"legacy1", bcrypt.gensalt(rounds=4)).decode()
    db.add(User(nombre="Old", apellido="Hash", usuario="legacy", password=legacy, level=2))
    db.commit()

    auth_service.login(db, "legacy", "legacy1")

    stored = db.query(User).filter(User.usuario == "legacy").one().password
    assert stored.startswith("$pbkdf2-sha256$")
    assert verify_password("legacy1", stored)


def test_anonymous_has_no_permission(db):
    assert auth_service.check_permission(db, None, "dashboard") is False


def test_level_one_has_every_permission(db, admin, set_role_permissions):
    set_role_permissions(1, [])

    assert auth_service.check_permission(db, admin, "perfil_usuarios") is True
    assert auth_service.check_permission(db, admin, "anything-at-all") is True


def test_role_permissions_are_honoured(db, staff, set_role_permissions):
    set_role_permissions(2, ["shift", "services"])

    assert auth_service.check_permission(db, staff, "shift") is True
    assert auth_service.check_permission(db, staff, "services") is True
    assert auth_service.check_permission(db, staff, "perfil_usuarios") is False


def test_wildcard_role_grants_everything(db, auditor, set_role_permissions):
    set_role_permissions(3, ["*"])

    assert auth_service.check_permission(db, auditor, "config_sistema") is True


def test_permission_changes_apply_immediately(db, staff, set_role_permissions):
    assert auth_service.check_permission(db, staff, "customers") is True

    set_role_permissions(2, ["dashboard"])

    assert auth_service.check_permission(db, staff, "customers") is False


def test_missing_role_denies(db):
    assert auth_service.check_permission(db, SessionContext(user_id=99, level=42), "dashboard") is False


def test_malformed_permissions_deny(db, staff, set_role_permissions):
    set_role_permissions(2, "not json [")

    assert auth_service.check_permission(db, staff, "shift") is False


def test_require_permission_raises(db, auditor):
    with pytest.raises(UnauthorizedException) as exc_info:
        auth_service.require_permission(db, auditor, "customers")

    assert exc_info.value.details == {"permission": "customers"}
