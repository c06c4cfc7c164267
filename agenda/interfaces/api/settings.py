"""Settings handlers."""

from agenda.application.services import settings_service
from agenda.domain.schemas.settings import SetManyRequest, SetSettingRequest
from agenda.interfaces.dispatcher import Router

router = Router(prefix="settings")


@router.handle("getAll")
def get_settings(ctx, _):
    return settings_service.get_all(ctx.db)


@router.handle("set", payload=SetSettingRequest)
def set_setting(ctx, body: SetSettingRequest):
    return settings_service.set_value(ctx.db, ctx.session, body.key, body.value)


@router.handle("setMany", payload=SetManyRequest)
def set_many(ctx, body: SetManyRequest):
    return settings_service.set_many(ctx.db, ctx.session, body.root)
