"""Service domain model — maps to the 'servicios' table (offerings of the business)."""

from sqlalchemy import Column, Integer, String

from agenda.core.clock import local_timestamp
from agenda.infrastructure.database import Base


class Service(Base):
    __tablename__ = "servicios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String, unique=True, nullable=False)
    activo = Column(Integer, nullable=False, default=1)  # soft-disable flag, 0/1
    created_at = Column(String, default=local_timestamp)

    def __repr__(self):
        return f"<Service {self.nombre} activo={self.activo}>"
