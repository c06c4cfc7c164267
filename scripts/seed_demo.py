"""Fill the configured database with demo services, customers and appointments."""

import sys
import os
import random
from datetime import date, timedelta

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agenda.config import get_settings
from agenda.core.clock import get_current_date
from agenda.core.logging import configure_logging
from agenda.domain.models.customer import Customer
from agenda.domain.models.service import Service
from agenda.domain.models.shift import Shift, ESTADO_CANCELADO, ESTADO_COMPLETADO, ESTADO_PENDIENTE
from agenda.infrastructure.database import create_db_engine, create_session_factory
from agenda.infrastructure.migrations.runner import run_migrations

SERVICES_COUNT = 7
CUSTOMERS_COUNT = 10
SHIFTS_COUNT = 2000
START_DATE = date(2024, 1, 1)
END_DATE = date(2025, 12, 31)

SERVICE_NAMES = [
    "Corte Clásico",
    "Corte con Navaja",
    "Barba y Perfilado",
    "Coloración",
    "Alisado Permanente",
    "Peinado Evento",
    "Tratamiento Capilar",
]
NAMES = ["Juan", "Pedro", "Maria", "Ana", "Luis", "Carlos", "Sofia", "Lucia", "Miguel", "Elena"]
SURNAMES = ["Gomez", "Perez", "Rodriguez", "Lopez", "Garcia", "Martinez", "Fernandez", "Gonzalez", "Diaz", "Sanchez"]


def _random_time() -> str:
    return f"{random.randint(9, 20):02d}:{random.choice(['00', '15', '30', '45'])}"


def seed() -> int:
    configure_logging()
    engine = create_db_engine(get_settings().DATABASE_URL)
    run_migrations(engine)
    db = create_session_factory(engine)()

    try:
        print(f"Inserting up to {SERVICES_COUNT} services...")
        existing = {s.nombre.lower() for s in db.query(Service).all()}
        for nombre in SERVICE_NAMES[:SERVICES_COUNT]:
            if nombre.lower() not in existing:
                db.add(Service(nombre=nombre, activo=1))

        print(f"Inserting {CUSTOMERS_COUNT} customers...")
        for i in range(CUSTOMERS_COUNT):
            nombre, apellido = random.choice(NAMES), random.choice(SURNAMES)
            documento = str(10000000 + i + random.randint(1, 9999))
            if db.query(Customer).filter(Customer.documento == documento).first():
                continue
            db.add(Customer(
                documento=documento,
                nombre=nombre,
                apellido=apellido,
                telefono=f"11{random.randint(10000000, 99999999)}",
                email=f"{nombre.lower()}.{apellido.lower()}{i}@test.com",
            ))
        db.flush()

        services = db.query(Service).all()
        customers = db.query(Customer).all()
        if not services or not customers:
            raise RuntimeError("No services or customers available, aborting")

        print(f"Inserting {SHIFTS_COUNT} appointments ({START_DATE} to {END_DATE})...")
        today = get_current_date()
        span = (END_DATE - START_DATE).days
        for _ in range(SHIFTS_COUNT):
            customer = random.choice(customers)
            day = START_DATE + timedelta(days=random.randint(0, span))
            if day < today:
                estado = ESTADO_COMPLETADO if random.random() > 0.1 else ESTADO_CANCELADO
            else:
                estado = ESTADO_PENDIENTE
            db.add(Shift(
                fecha=day.isoformat(),
                hora=_random_time(),
                cliente=customer.full_name,
                servicio=random.choice(services).nombre,
                customer_id=customer.id,
                profesional="Staff",
                estado=estado,
            ))

        db.commit()
        print(f"Done: {len(services)} services, {len(customers)} customers, {SHIFTS_COUNT} appointments.")
        return 0
    except Exception as e:
        db.rollback()
        print(f"Seed failed: {e}")
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(seed())
