"""Service catalog handlers."""

from agenda.application.services import catalog_service
from agenda.domain.schemas.common import IdRequest
from agenda.domain.schemas.service import ServiceName, ServiceUpdate
from agenda.interfaces.deps import get_service_repository
from agenda.interfaces.dispatcher import Router

router = Router(prefix="services")


@router.handle("getAll")
def list_services(ctx, _):
    return catalog_service.get_all(get_service_repository(ctx))


@router.handle("getActive")
def list_active_services(ctx, _):
    """Services offered in the booking form."""
    return catalog_service.get_active(get_service_repository(ctx))


@router.handle("create", payload=ServiceName)
def create_service(ctx, body: ServiceName):
    return catalog_service.create_service(get_service_repository(ctx), ctx.session, body.nombre)


@router.handle("update", payload=ServiceUpdate)
def update_service(ctx, body: ServiceUpdate):
    return catalog_service.update_service(get_service_repository(ctx), ctx.session, body.id, body.nombre)


@router.handle("toggle", payload=IdRequest)
def toggle_service(ctx, body: IdRequest):
    return {"activo": catalog_service.toggle_active(get_service_repository(ctx), ctx.session, body.id)}


@router.handle("delete", payload=IdRequest)
def delete_service(ctx, body: IdRequest):
    catalog_service.delete_service(get_service_repository(ctx), ctx.session, body.id)
    return None
