import pytest

from agenda.application.services import shift_service
from agenda.core.exceptions import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    UnauthorizedException,
)
from agenda.domain.models.customer import Customer
from agenda.domain.models.service import Service
from agenda.domain.models.shift import Shift
from agenda.domain.repositories.shift_repository import ShiftRepository
from agenda.domain.schemas.shift import ShiftCreate


def _book(db, session, fecha="2025-06-10", hora="10:00", servicios=("Corte",), **extra):
    data = ShiftCreate(fecha=fecha, hora=hora, servicios=list(servicios), **extra)
    return shift_service.create_shift(db, session, data)


@pytest.fixture
def customer(db):
    c = Customer(documento="30111222", nombre="Ana", apellido="Perez")
    db.add(c)
    db.commit()
    return c


def test_book_existing_customer(db, admin, catalog, customer):
    shift = _book(db, admin, hora="9:30", servicios=["corte", "Barba"], customer_id=customer.id)

    assert shift.cliente == "Ana Perez"
    assert shift.customer_id == customer.id
    assert shift.hora == "09:30"
    assert shift.servicio == "Corte, Barba"
    assert shift.servicios == ["Corte", "Barba"]
    assert shift.estado == "pendiente"
    assert shift.profesional == "Staff"


def test_book_by_document_finds_customer(db, admin, catalog, customer):
    shift = _book(db, admin, documento="30111222")

    assert shift.customer_id == customer.id


def test_book_creates_new_customer(db, admin, catalog):
    shift = _book(
        db,
        admin,
        documento="40999888",
        nuevo_cliente={"nombre": "lucia", "apellido": "DIAZ", "telefono": "1144443333"},
    )

    created = db.query(Customer).filter(Customer.documento == "40999888").one()
    assert shift.customer_id == created.id
    assert shift.cliente == "Lucia Diaz"


def test_unknown_document_without_customer_data(db, admin, catalog):
    with pytest.raises(BusinessRuleViolationException):
        _book(db, admin, documento="40999888")

    assert db.query(Shift).count() == 0


def test_walk_in_without_customer_record(db, admin, catalog):
    shift = _book(db, admin, cliente="Cliente de paso")

    assert shift.customer_id is None
    assert shift.cliente == "Cliente de paso"


def test_booking_is_atomic(db, admin, catalog, monkeypatch):
    def broken_shift(**kwargs):
        raise RuntimeError("disk I/O error")

    monkeypatch.setattr(shift_service, "Shift", broken_shift)

    with pytest.raises(RuntimeError):
        _book(db, admin, documento="40999888", nuevo_cliente={"nombre": "Lucia", "apellido": "Diaz"})

    assert db.query(Customer).count() == 0


def test_services_must_be_active_catalog_entries(db, admin, catalog, customer):
    with pytest.raises(BusinessRuleViolationException):
        _book(db, admin, servicios=["Tintura"], customer_id=customer.id)
    with pytest.raises(BusinessRuleViolationException):
        _book(db, admin, servicios=["Masaje"], customer_id=customer.id)


def test_missing_customer_id(db, admin, catalog):
    with pytest.raises(EntityNotFoundException):
        _book(db, admin, customer_id=404)


def test_booking_requires_permission(db, auditor, catalog, customer):
    with pytest.raises(UnauthorizedException):
        _book(db, auditor, customer_id=customer.id)


def test_day_list_is_ordered_and_unfiltered(db, admin, catalog):
    late = _book(db, admin, hora="18:00", cliente="Tarde")
    early = _book(db, admin, hora="08:30", cliente="Temprano")
    shift_service.update_status(db, admin, late.id, "cancelado")
    _book(db, admin, fecha="2025-06-11", cliente="Otro dia")

    day = shift_service.get_by_date(db, "2025-06-10")

    assert [s.id for s in day] == [early.id, late.id]
    assert day[1].estado == "cancelado"


def test_monthly_and_yearly_load(db, admin, catalog):
    _book(db, admin, fecha="2025-06-10", cliente="A")
    done = _book(db, admin, fecha="2025-06-10", cliente="B")
    _book(db, admin, fecha="2025-06-11", cliente="C")
    cancelled = _book(db, admin, fecha="2025-06-12", cliente="D")
    _book(db, admin, fecha="2025-07-01", cliente="E")
    _book(db, admin, fecha="2024-06-10", cliente="F")
    shift_service.update_status(db, admin, done.id, "completado")
    shift_service.update_status(db, admin, cancelled.id, "cancelado")

    assert shift_service.monthly_load(db, 2025, 6) == {"2025-06-10": 2, "2025-06-11": 1}
    assert shift_service.yearly_load(db, 2025) == {"2025-06-10": 2, "2025-06-11": 1, "2025-07-01": 1}
    assert shift_service.monthly_load(db, 2025, 8) == {}


def test_initial_data(db, admin, catalog):
    shift = _book(db, admin, cliente="A")

    data = shift_service.initial_data(db, "2025-06-10", 2025, 6)

    assert [s.id for s in data["shifts"]] == [shift.id]
    assert data["monthly_load"] == {"2025-06-10": 1}


def test_update_status(db, staff, catalog):
    shift = _book(db, staff, cliente="A")

    updated = shift_service.update_status(db, staff, shift.id, "ausente")
    assert updated.estado == "ausente"

    # any status may follow any other
    assert shift_service.update_status(db, staff, shift.id, "pendiente").estado == "pendiente"

    with pytest.raises(EntityNotFoundException):
        shift_service.update_status(db, staff, 999, "completado")


def test_accented_service_names_match_ignoring_case(db, admin, customer):
    db.add(Service(nombre="DEPILACIÓN", activo=1))
    db.commit()

    shift = _book(db, admin, servicios=["depilación"], customer_id=customer.id)

    assert shift.servicio == "DEPILACIÓN"


def test_shift_queries_go_through_the_repository_interface(db):
    assert isinstance(shift_service._shifts(db), ShiftRepository)
