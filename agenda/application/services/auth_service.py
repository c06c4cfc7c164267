"""Auth service — login and permission checks for the active session.

The session is a SessionContext value (user id + level) owned by the caller
and passed in explicitly; None means nobody is logged in.
"""

from typing import Optional

import structlog
from sqlalchemy.orm import Session

from agenda.core.clock import local_timestamp
from agenda.core.exceptions import (
    EntityNotFoundException,
    InvalidCredentialsException,
    UnauthorizedException,
)
from agenda.core.security import verify_and_update
from agenda.domain.models.role import Role, ADMIN_LEVEL, WILDCARD
from agenda.domain.models.user import User
from agenda.domain.schemas.auth import SessionContext, UserRead

logger = structlog.get_logger(__name__)


def get_user_by_usuario(db: Session, usuario: str) -> Optional[User]:
    return db.query(User).filter(User.usuario == usuario).first()


def login(db: Session, usuario: str, password: str) -> tuple[SessionContext, UserRead]:
    """Authenticate and open a session.

    Raises EntityNotFoundException for an unknown login name and
    InvalidCredentialsException for a wrong password; callers facing the end
    user must collapse both into one message.
    """
    user = get_user_by_usuario(db, usuario)
    if user is None:
        raise EntityNotFoundException("Usuario no encontrado")

    try:
        valid, new_hash = verify_and_update(password, user.password)
    except ValueError:
        logger.warning("Unrecognized password hash", user_id=user.id)
        valid, new_hash = False, None
    if not valid:
        raise InvalidCredentialsException()

    if new_hash:
        user.password = new_hash
    user.last_login = local_timestamp()
    db.commit()
    db.refresh(user)

    logger.info("User logged in", user_id=user.id, level=user.level)
    return SessionContext(user_id=user.id, level=user.level), UserRead.model_validate(user)


def check_permission(db: Session, session: Optional[SessionContext], permission: str) -> bool:
    """Does the session hold the permission?

    Level 1 always does. Any other level is resolved against its role row,
    read fresh on every call.
    """
    if session is None:
        return False
    if session.level == ADMIN_LEVEL:
        return True

    role = db.get(Role, session.level, populate_existing=True)
    if role is None:
        return False

    try:
        permissions = role.permission_list
    except ValueError:
        logger.warning("Malformed role permissions", role_id=role.id)
        return False
    return permission in permissions or WILDCARD in permissions


def require_permission(db: Session, session: Optional[SessionContext], permission: str, message: str = "No autorizado") -> None:
    if not check_permission(db, session, permission):
        raise UnauthorizedException(message, {"permission": permission})


def require_session(session: Optional[SessionContext]) -> SessionContext:
    if session is None:
        raise UnauthorizedException("Debe iniciar sesión")
    return session
