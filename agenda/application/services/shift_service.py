"""Shift service — booking, status changes and calendar load for appointments.

Load figures count every appointment on a date except cancelled ones. Every
call re-queries the store; nothing is cached.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agenda.application.services.auth_service import require_permission
from agenda.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateKeyException,
    EntityNotFoundException,
)
from agenda.domain import permissions
from agenda.domain.models.customer import Customer
from agenda.domain.models.service import Service
from agenda.domain.models.shift import Shift, ESTADO_PENDIENTE
from agenda.domain.repositories.shift_repository import ShiftRepository
from agenda.domain.schemas.auth import SessionContext
from agenda.domain.schemas.common import format_name
from agenda.domain.schemas.shift import ShiftCreate, ShiftRead, join_services
from agenda.infrastructure.database import is_unique_violation
from agenda.infrastructure.repositories.customer_repository import SQLAlchemyCustomerRepository
from agenda.infrastructure.repositories.service_repository import SQLAlchemyServiceRepository
from agenda.infrastructure.repositories.shift_repository import SQLAlchemyShiftRepository

logger = structlog.get_logger(__name__)


def _shifts(db: Session) -> ShiftRepository:
    return SQLAlchemyShiftRepository(db, Shift)


def _resolve_services(db: Session, names: List[str]) -> str:
    """Map requested names onto active catalog entries and join them for storage."""
    repo = SQLAlchemyServiceRepository(db, Service)
    resolved: List[str] = []
    for name in names:
        service = repo.find_by_name_ci(name)
        if service is None:
            raise BusinessRuleViolationException(f"El servicio '{name}' no existe", {"servicio": name})
        if service.activo != 1:
            raise BusinessRuleViolationException(f"El servicio '{service.nombre}' está inactivo", {"servicio": service.nombre})
        if service.nombre not in resolved:
            resolved.append(service.nombre)
    return join_services(resolved)


def _resolve_customer(db: Session, data: ShiftCreate) -> tuple[Optional[Customer], bool]:
    """Existing customer by id or document, a new one (flushed, not committed), or None for walk-ins."""
    customers = SQLAlchemyCustomerRepository(db, Customer)

    if data.customer_id is not None:
        customer = customers.get_by_id(data.customer_id)
        if customer is None:
            raise EntityNotFoundException("Cliente no encontrado")
        return customer, False

    if data.documento:
        customer = customers.get_by_document(data.documento)
        if customer is not None:
            return customer, False
        if data.nuevo_cliente is None:
            raise BusinessRuleViolationException(
                "Cliente no registrado: complete los datos del nuevo cliente",
                {"documento": data.documento},
            )
        nuevo = data.nuevo_cliente
        customer = customers.create(
            {
                "documento": data.documento,
                "nombre": format_name(nuevo.nombre),
                "apellido": format_name(nuevo.apellido),
                "telefono": nuevo.telefono,
                "email": str(nuevo.email) if nuevo.email else None,
            },
            commit=False,
        )
        return customer, True

    return None, False


def create_shift(db: Session, session: Optional[SessionContext], data: ShiftCreate) -> ShiftRead:
    """Book an appointment, creating its customer first when needed.

    Customer and appointment rows are committed together or not at all.
    """
    require_permission(db, session, permissions.SHIFT)

    try:
        servicio = _resolve_services(db, data.servicios)
        customer, created_customer = _resolve_customer(db, data)

        shift = Shift(
            fecha=data.fecha,
            hora=data.hora,
            cliente=customer.full_name if customer is not None else data.cliente.strip(),
            servicio=servicio,
            profesional=data.profesional or "Staff",
            estado=ESTADO_PENDIENTE,
            customer_id=customer.id if customer is not None else None,
        )
        db.add(shift)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise DuplicateKeyException("El documento ya existe") from exc
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(shift)
    logger.info(
        "Shift created",
        shift_id=shift.id,
        fecha=shift.fecha,
        hora=shift.hora,
        customer_id=shift.customer_id,
        new_customer=created_customer,
    )
    return ShiftRead.model_validate(shift)


def get_by_date(db: Session, fecha: str) -> List[ShiftRead]:
    """All appointments of the day ordered by time, whatever their status."""
    return [ShiftRead.model_validate(s) for s in _shifts(db).get_by_date(fecha)]


def monthly_load(db: Session, year: int, month: int) -> Dict[str, int]:
    """{fecha: count} of non-cancelled appointments in the month."""
    return _shifts(db).get_load(f"{year:04d}-{month:02d}-")


def yearly_load(db: Session, year: int) -> Dict[str, int]:
    """{fecha: count} of non-cancelled appointments in the year."""
    return _shifts(db).get_load(f"{year:04d}-")


def initial_data(db: Session, fecha: str, year: int, month: int) -> Dict[str, Any]:
    """Day list plus month load, for the first render of the calendar."""
    return {
        "shifts": get_by_date(db, fecha),
        "monthly_load": monthly_load(db, year, month),
    }


def update_status(db: Session, session: Optional[SessionContext], shift_id: int, estado: str) -> ShiftRead:
    """Any status may follow any other; appointments are never deleted."""
    require_permission(db, session, permissions.SHIFT)
    repo = _shifts(db)
    shift = repo.get_by_id(shift_id)
    if shift is None:
        raise EntityNotFoundException("Turno no encontrado")

    previous = shift.estado
    shift = repo.update(shift, {"estado": estado})
    logger.info("Shift status changed", shift_id=shift_id, previous=previous, estado=estado)
    return ShiftRead.model_validate(shift)
