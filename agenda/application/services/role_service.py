"""Role service — access levels and their permission lists."""

import json
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from agenda.core.exceptions import EntityNotFoundException, UnauthorizedException
from agenda.domain.models.role import Role, ADMIN_LEVEL
from agenda.domain.schemas.auth import RoleRead, RoleUpdate, SessionContext

logger = structlog.get_logger(__name__)


def _to_read(role: Role) -> RoleRead:
    try:
        perms = role.permission_list
    except ValueError:
        logger.warning("Malformed role permissions", role_id=role.id)
        perms = []
    return RoleRead(id=role.id, label=role.label, permissions=perms)


def get_roles(db: Session) -> List[RoleRead]:
    roles = db.query(Role).order_by(Role.id.asc()).all()
    return [_to_read(r) for r in roles]


def update_role(db: Session, session: Optional[SessionContext], data: RoleUpdate) -> RoleRead:
    """Only a level-1 session may edit roles; the admin role itself is never changed."""
    if session is None or session.level != ADMIN_LEVEL:
        raise UnauthorizedException("Solo el administrador puede editar roles")

    role = db.get(Role, data.id)
    if role is None:
        raise EntityNotFoundException("Rol no encontrado")

    if role.id == ADMIN_LEVEL:
        logger.info("Ignoring update of the administrator role", by=session.user_id)
        return _to_read(role)

    role.label = data.label.strip()
    # de-duplicated, order preserved
    role.permissions = json.dumps(list(dict.fromkeys(data.permissions)))
    db.commit()
    db.refresh(role)

    logger.info("Role updated", role_id=role.id, by=session.user_id)
    return _to_read(role)
