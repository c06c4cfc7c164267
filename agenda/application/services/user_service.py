"""User service — account management on top of the permission checks."""

from typing import List, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agenda.application.services.auth_service import check_permission, require_permission, require_session
from agenda.core.exceptions import (
    DuplicateKeyException,
    EntityNotFoundException,
    InvalidCredentialsException,
    UnauthorizedException,
)
from agenda.core.security import hash_password, verify_password
from agenda.domain import permissions
from agenda.domain.models.role import Role
from agenda.domain.models.user import User
from agenda.domain.schemas.auth import SessionContext, UserCreate, UserRead, UserUpdate
from agenda.domain.schemas.common import format_name
from agenda.infrastructure.database import is_unique_violation

logger = structlog.get_logger(__name__)


def _require_role(db: Session, level: int) -> None:
    if db.get(Role, level) is None:
        raise EntityNotFoundException("El nivel de acceso no existe", {"level": level})


def _commit_unique(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise DuplicateKeyException(message) from exc
        raise


def get_users(db: Session) -> List[UserRead]:
    users = db.query(User).order_by(User.id.asc()).all()
    return [UserRead.model_validate(u) for u in users]


def create_user(db: Session, session: Optional[SessionContext], data: UserCreate) -> UserRead:
    require_permission(db, session, permissions.PERFIL_USUARIOS, "No tienes permiso para crear usuarios")
    _require_role(db, data.level)

    user = User(
        nombre=format_name(data.nombre),
        apellido=format_name(data.apellido),
        usuario=data.usuario.strip(),
        password=hash_password(data.password),
        level=data.level,
    )
    db.add(user)
    _commit_unique(db, "El usuario ya existe")
    db.refresh(user)

    logger.info("User created", user_id=user.id, level=user.level, by=session.user_id)
    return UserRead.model_validate(user)


def update_user(db: Session, session: Optional[SessionContext], user_id: int, data: UserUpdate) -> UserRead:
    """Self-edits of name fields need no permission; anything else, including level, does."""
    is_self = session is not None and session.user_id == user_id
    has_perm = check_permission(db, session, permissions.PERFIL_USUARIOS)

    if not is_self and not has_perm:
        raise UnauthorizedException()
    if data.level is not None and not has_perm:
        raise UnauthorizedException("No puedes cambiar el nivel de acceso")

    user = db.get(User, user_id)
    if user is None:
        raise EntityNotFoundException("Usuario no encontrado")
    if data.level is not None:
        _require_role(db, data.level)

    if data.nombre:
        user.nombre = format_name(data.nombre)
    if data.apellido:
        user.apellido = format_name(data.apellido)
    if data.usuario:
        user.usuario = data.usuario.strip()
    if data.level is not None:
        user.level = data.level

    _commit_unique(db, "El usuario ya existe")
    db.refresh(user)
    return UserRead.model_validate(user)


def delete_user(db: Session, session: Optional[SessionContext], user_id: int) -> None:
    session = require_session(session)
    if session.user_id == user_id:
        raise UnauthorizedException("No puedes eliminarte a ti mismo")
    require_permission(db, session, permissions.PERFIL_USUARIOS)

    user = db.get(User, user_id)
    if user is None:
        raise EntityNotFoundException("Usuario no encontrado")

    db.delete(user)
    db.commit()
    logger.info("User deleted", user_id=user_id, by=session.user_id)


def change_password(db: Session, session: Optional[SessionContext], user_id: int, current_password: str, new_password: str) -> None:
    """Only the account owner may change its password."""
    if session is None or session.user_id != user_id:
        raise UnauthorizedException()

    user = db.get(User, user_id)
    if user is None:
        raise EntityNotFoundException("Usuario no encontrado")
    if not verify_password(current_password, user.password):
        raise InvalidCredentialsException("La contraseña actual es incorrecta")

    user.password = hash_password(new_password)
    db.commit()
    logger.info("Password changed", user_id=user_id)
