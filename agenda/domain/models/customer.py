"""Customer domain model — maps to the 'customers' table."""

from sqlalchemy import Column, Integer, String

from agenda.core.clock import local_timestamp
from agenda.infrastructure.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    documento = Column(String, unique=True, nullable=False)
    nombre = Column(String, nullable=False)
    apellido = Column(String, nullable=False)
    telefono = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(String, default=local_timestamp)
    updated_at = Column(String, default=local_timestamp, onupdate=local_timestamp)

    @property
    def full_name(self) -> str:
        return f"{self.nombre} {self.apellido}"

    def __repr__(self):
        return f"<Customer {self.documento} - {self.full_name}>"
