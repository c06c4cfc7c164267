"""Shift (appointment) domain model — maps to the 'shifts' table."""

from sqlalchemy import Column, Integer, String, ForeignKey

from agenda.core.clock import local_timestamp
from agenda.infrastructure.database import Base

ESTADO_PENDIENTE = "pendiente"
ESTADO_COMPLETADO = "completado"
ESTADO_CANCELADO = "cancelado"
ESTADO_AUSENTE = "ausente"

ESTADOS = (ESTADO_PENDIENTE, ESTADO_COMPLETADO, ESTADO_CANCELADO, ESTADO_AUSENTE)


class Shift(Base):
    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fecha = Column(String, nullable=False, index=True)  # YYYY-MM-DD
    hora = Column(String, nullable=False)  # HH:mm
    cliente = Column(String, nullable=False)  # customer display name at booking time
    servicio = Column(String, nullable=False)  # comma-joined service names
    profesional = Column(String, default="Staff")
    estado = Column(String, nullable=False, default=ESTADO_PENDIENTE)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(String, default=local_timestamp)

    def __repr__(self):
        return f"<Shift {self.fecha} {self.hora} - {self.cliente} ({self.estado})>"
