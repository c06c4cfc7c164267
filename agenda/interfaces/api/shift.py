"""Appointment handlers — booking, day list, status and calendar load."""

from agenda.application.services import shift_service
from agenda.domain.schemas.shift import (
    DateQuery,
    InitialDataQuery,
    MonthlyLoadQuery,
    ShiftCreate,
    UpdateStatusRequest,
    YearlyLoadQuery,
)
from agenda.interfaces.dispatcher import Router

router = Router(prefix="shift")


@router.handle("create", payload=ShiftCreate)
def create_shift(ctx, body: ShiftCreate):
    return shift_service.create_shift(ctx.db, ctx.session, body)


@router.handle("getByDate", payload=DateQuery)
def shifts_by_date(ctx, body: DateQuery):
    return shift_service.get_by_date(ctx.db, body.fecha)


@router.handle("getMonthlyLoad", payload=MonthlyLoadQuery)
def monthly_load(ctx, body: MonthlyLoadQuery):
    return shift_service.monthly_load(ctx.db, body.year, body.month)


@router.handle("getYearlyLoad", payload=YearlyLoadQuery)
def yearly_load(ctx, body: YearlyLoadQuery):
    return shift_service.yearly_load(ctx.db, body.year)


@router.handle("getInitialData", payload=InitialDataQuery)
def initial_data(ctx, body: InitialDataQuery):
    """Day list and month load in a single request."""
    return shift_service.initial_data(ctx.db, body.date, body.year, body.month)


@router.handle("updateStatus", payload=UpdateStatusRequest)
def update_status(ctx, body: UpdateStatusRequest):
    return shift_service.update_status(ctx.db, ctx.session, body.id, body.estado)
