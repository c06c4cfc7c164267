"""Customer service — business logic for the customer directory."""

from typing import Any, Dict, Optional

import structlog
from sqlalchemy.exc import IntegrityError

from agenda.application.services.auth_service import require_permission
from agenda.core.exceptions import DuplicateKeyException, EntityNotFoundException
from agenda.domain import permissions
from agenda.domain.repositories.customer_repository import CustomerRepository
from agenda.domain.schemas.auth import SessionContext
from agenda.domain.schemas.common import format_name
from agenda.domain.schemas.customer import CustomerCreate, CustomerFilter, CustomerRead, CustomerUpdate
from agenda.infrastructure.database import is_unique_violation

logger = structlog.get_logger(__name__)

DUPLICATE_DOCUMENT = "El documento ya existe"


def _normalized(data: dict) -> dict:
    for field in ("nombre", "apellido"):
        if data.get(field):
            data[field] = format_name(data[field])
    if data.get("documento"):
        data["documento"] = data["documento"].strip()
    if data.get("email"):
        data["email"] = str(data["email"])
    return data


def get_paginated(repo: CustomerRepository, filters: CustomerFilter) -> Dict[str, Any]:
    """Get customers with search and pagination."""
    page = repo.get_with_filters(filters)
    page["items"] = [CustomerRead.model_validate(c) for c in page["items"]]
    return page


def get_by_id(repo: CustomerRepository, customer_id: int) -> CustomerRead:
    customer = repo.get_by_id(customer_id)
    if customer is None:
        raise EntityNotFoundException("Cliente no encontrado")
    return CustomerRead.model_validate(customer)


def find_by_document(repo: CustomerRepository, documento: str) -> Optional[CustomerRead]:
    """Exact document lookup; None means a new customer."""
    customer = repo.get_by_document(documento.strip())
    return CustomerRead.model_validate(customer) if customer else None


def create_customer(repo: CustomerRepository, session: Optional[SessionContext], data: CustomerCreate) -> CustomerRead:
    require_permission(repo.db, session, permissions.CUSTOMERS)
    payload = _normalized(data.model_dump())

    if repo.get_by_document(payload["documento"]):
        raise DuplicateKeyException(DUPLICATE_DOCUMENT)
    try:
        customer = repo.create(payload)
    except IntegrityError as exc:
        repo.db.rollback()
        if is_unique_violation(exc):
            raise DuplicateKeyException(DUPLICATE_DOCUMENT) from exc
        raise

    logger.info("Customer created", customer_id=customer.id)
    return CustomerRead.model_validate(customer)


def update_customer(repo: CustomerRepository, session: Optional[SessionContext], customer_id: int, data: CustomerUpdate) -> CustomerRead:
    require_permission(repo.db, session, permissions.CUSTOMERS)
    customer = repo.get_by_id(customer_id)
    if customer is None:
        raise EntityNotFoundException("Cliente no encontrado")

    changes = _normalized(data.model_dump(exclude_unset=True))
    # documento/nombre/apellido are NOT NULL
    for required in ("documento", "nombre", "apellido"):
        if required in changes and changes[required] is None:
            changes.pop(required)
    if not changes:
        return CustomerRead.model_validate(customer)

    try:
        customer = repo.update(customer, changes)
    except IntegrityError as exc:
        repo.db.rollback()
        if is_unique_violation(exc):
            raise DuplicateKeyException(DUPLICATE_DOCUMENT) from exc
        raise
    return CustomerRead.model_validate(customer)


def delete_customer(repo: CustomerRepository, session: Optional[SessionContext], customer_id: int) -> None:
    """Appointments keep their copy of the name; their customer_id becomes NULL."""
    require_permission(repo.db, session, permissions.CUSTOMERS)
    if repo.delete(customer_id) is None:
        raise EntityNotFoundException("Cliente no encontrado")
    logger.info("Customer deleted", customer_id=customer_id)
