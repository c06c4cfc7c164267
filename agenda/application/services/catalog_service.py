"""Catalog service — the services offered by the business (cuts, colouring, ...).

Names are unique ignoring case, accented capitals too: a casefold(nombre) check
runs before every write and the database UNIQUE constraint backs it up.
"""

from typing import List, Optional

import structlog
from sqlalchemy.exc import IntegrityError

from agenda.application.services.auth_service import require_permission
from agenda.core.exceptions import DuplicateKeyException, EntityNotFoundException
from agenda.domain import permissions
from agenda.domain.models.service import Service
from agenda.domain.repositories.service_repository import ServiceRepository
from agenda.domain.schemas.auth import SessionContext
from agenda.domain.schemas.service import ServiceRead
from agenda.infrastructure.database import is_unique_violation

logger = structlog.get_logger(__name__)


def _get_or_404(repo: ServiceRepository, service_id: int) -> Service:
    service = repo.get_by_id(service_id)
    if service is None:
        raise EntityNotFoundException("Servicio no encontrado")
    return service


def _ensure_unique(repo: ServiceRepository, nombre: str, exclude_id: int | None = None) -> None:
    if repo.find_by_name_ci(nombre, exclude_id=exclude_id):
        raise DuplicateKeyException("Ya existe un servicio con este nombre", {"nombre": nombre})


def get_all(repo: ServiceRepository) -> List[ServiceRead]:
    return [ServiceRead.model_validate(s) for s in repo.get_all_ordered()]


def get_active(repo: ServiceRepository) -> List[ServiceRead]:
    return [ServiceRead.model_validate(s) for s in repo.get_active()]


def create_service(repo: ServiceRepository, session: Optional[SessionContext], nombre: str) -> ServiceRead:
    require_permission(repo.db, session, permissions.SERVICES)
    nombre = nombre.strip()
    _ensure_unique(repo, nombre)

    try:
        service = repo.create({"nombre": nombre, "activo": 1})
    except IntegrityError as exc:
        repo.db.rollback()
        if is_unique_violation(exc):
            raise DuplicateKeyException("Ya existe un servicio con este nombre", {"nombre": nombre}) from exc
        raise

    logger.info("Service created", service_id=service.id, nombre=nombre)
    return ServiceRead.model_validate(service)


def update_service(repo: ServiceRepository, session: Optional[SessionContext], service_id: int, nombre: str) -> ServiceRead:
    require_permission(repo.db, session, permissions.SERVICES)
    service = _get_or_404(repo, service_id)
    nombre = nombre.strip()
    _ensure_unique(repo, nombre, exclude_id=service_id)

    try:
        service = repo.update(service, {"nombre": nombre})
    except IntegrityError as exc:
        repo.db.rollback()
        if is_unique_violation(exc):
            raise DuplicateKeyException("Ya existe otro servicio con este nombre", {"nombre": nombre}) from exc
        raise
    return ServiceRead.model_validate(service)


def toggle_active(repo: ServiceRepository, session: Optional[SessionContext], service_id: int) -> int:
    """Flip the activo flag and return the new value."""
    require_permission(repo.db, session, permissions.SERVICES)
    service = _get_or_404(repo, service_id)

    new_state = 0 if service.activo == 1 else 1
    repo.update(service, {"activo": new_state})

    logger.info("Service toggled", service_id=service_id, activo=new_state)
    return new_state


def delete_service(repo: ServiceRepository, session: Optional[SessionContext], service_id: int) -> None:
    """Hard delete. Past appointments keep the name in their own text column."""
    require_permission(repo.db, session, permissions.SERVICES)
    if repo.delete(service_id) is None:
        raise EntityNotFoundException("Servicio no encontrado")
    logger.info("Service deleted", service_id=service_id)
