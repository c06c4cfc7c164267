import pytest

from agenda.application.services import auth_service, user_service
from agenda.core.exceptions import (
    DuplicateKeyException,
    EntityNotFoundException,
    InvalidCredentialsException,
    UnauthorizedException,
)
from agenda.domain.models.user import User
from agenda.domain.schemas.auth import UserCreate, UserUpdate


def _new_user(**overrides) -> UserCreate:
    data = {"nombre": "mARIA", "apellido": "  gonzalez", "usuario": "maria", "password": "secreto1", "level": 2}
    data.update(overrides)
    return UserCreate(**data)


def test_create_user_normalizes_names_and_hashes_password(db, admin):
    user = user_service.create_user(db, admin, _new_user())

    assert user.nombre == "Maria"
    assert user.apellido == "Gonzalez"
    stored = db.get(User, user.id)
    assert stored.password != "secreto1"
    session, _ = auth_service.login(db, "maria", "secreto1")
    assert session.level == 2


def test_create_user_duplicate_login_name(db, admin):
    user_service.create_user(db, admin, _new_user())

    with pytest.raises(DuplicateKeyException):
        user_service.create_user(db, admin, _new_user(nombre="Otra"))


def test_create_user_requires_permission(db, staff):
    with pytest.raises(UnauthorizedException):
        user_service.create_user(db, staff, _new_user())


def test_create_user_requires_existing_level(db, admin):
    with pytest.raises(EntityNotFoundException):
        user_service.create_user(db, admin, _new_user(level=9))


def test_get_users_never_exposes_passwords(db, admin, staff):
    users = user_service.get_users(db)

    assert [u.id for u in users] == [admin.user_id, staff.user_id]
    assert all("password" not in u.model_dump() for u in users)


def test_self_delete_is_always_rejected(db, admin):
    with pytest.raises(UnauthorizedException):
        user_service.delete_user(db, admin, admin.user_id)

    assert db.get(User, admin.user_id) is not None


def test_delete_user(db, admin, staff):
    user_service.delete_user(db, admin, staff.user_id)

    assert db.get(User, staff.user_id) is None
    with pytest.raises(EntityNotFoundException):
        user_service.delete_user(db, admin, staff.user_id)


def test_delete_user_requires_permission(db, admin, staff):
    with pytest.raises(UnauthorizedException):
        user_service.delete_user(db, staff, admin.user_id)


def test_user_may_edit_own_name_without_permission(db, staff):
    user = user_service.update_user(db, staff, staff.user_id, UserUpdate(nombre="jUAN"))

    assert user.nombre == "Juan"


def test_level_change_requires_permission(db, staff):
    with pytest.raises(UnauthorizedException):
        user_service.update_user(db, staff, staff.user_id, UserUpdate(level=1))

    assert db.get(User, staff.user_id).level == 2


def test_editing_someone_else_requires_permission(db, admin, staff):
    with pytest.raises(UnauthorizedException):
        user_service.update_user(db, staff, admin.user_id, UserUpdate(nombre="Hacker"))


def test_admin_changes_level(db, admin, staff):
    user = user_service.update_user(db, admin, staff.user_id, UserUpdate(level=3))

    assert user.level == 3


def test_update_to_taken_login_name(db, admin, staff):
    with pytest.raises(DuplicateKeyException):
        user_service.update_user(db, admin, staff.user_id, UserUpdate(usuario="administrador"))


def test_change_password(db, staff):
    user_service.change_password(db, staff, staff.user_id, "secret1", "nuevo123")

    with pytest.raises(InvalidCredentialsException):
        auth_service.login(db, db.get(User, staff.user_id).usuario, "secret1")


def test_change_password_wrong_current(db, staff):
    with pytest.raises(InvalidCredentialsException):
        user_service.change_password(db, staff, staff.user_id, "nope", "nuevo123")


def test_change_password_only_for_oneself(db, admin, staff):
    with pytest.raises(UnauthorizedException):
        user_service.change_password(db, admin, staff.user_id, "secret1", "nuevo123")
