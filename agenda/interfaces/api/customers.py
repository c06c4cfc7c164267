"""Customer handlers — directory listing, lookup and edits."""

from agenda.application.services import customer_service
from agenda.domain.schemas.common import IdRequest
from agenda.domain.schemas.customer import (
    CustomerCreate,
    CustomerFilter,
    CustomerUpdateRequest,
    DocumentQuery,
)
from agenda.interfaces.deps import get_customer_repository
from agenda.interfaces.dispatcher import Router

router = Router(prefix="customers")


@router.handle("getPaginated", payload=CustomerFilter)
def list_customers(ctx, filters: CustomerFilter):
    """Search by name or document, paginated."""
    return customer_service.get_paginated(get_customer_repository(ctx), filters)


@router.handle("getById", payload=IdRequest)
def get_customer(ctx, body: IdRequest):
    return customer_service.get_by_id(get_customer_repository(ctx), body.id)


@router.handle("findByDocument", payload=DocumentQuery)
def find_by_document(ctx, body: DocumentQuery):
    return customer_service.find_by_document(get_customer_repository(ctx), body.documento)


@router.handle("create", payload=CustomerCreate)
def create_customer(ctx, body: CustomerCreate):
    return customer_service.create_customer(get_customer_repository(ctx), ctx.session, body)


@router.handle("update", payload=CustomerUpdateRequest)
def update_customer(ctx, body: CustomerUpdateRequest):
    return customer_service.update_customer(get_customer_repository(ctx), ctx.session, body.id, body.data)


@router.handle("delete", payload=IdRequest)
def delete_customer(ctx, body: IdRequest):
    customer_service.delete_customer(get_customer_repository(ctx), ctx.session, body.id)
    return None
