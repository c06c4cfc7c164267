"""
SQLAlchemy Implementation of Service Repository.
"""

from typing import List, Optional

from sqlalchemy import func

from agenda.domain.models.service import Service
from agenda.domain.repositories.service_repository import ServiceRepository
from agenda.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyServiceRepository(SQLAlchemyRepository[Service], ServiceRepository):
    """Service repository implementation using SQLAlchemy."""

    def get_all_ordered(self) -> List[Service]:
        return self.db.query(Service).order_by(Service.nombre.asc()).all()

    def get_active(self) -> List[Service]:
        return (
            self.db.query(Service)
            .filter(Service.activo == 1)
            .order_by(Service.nombre.asc())
            .all()
        )

    def find_by_name_ci(self, nombre: str, exclude_id: int | None = None) -> Optional[Service]:
        query = self.db.query(Service).filter(func.casefold(Service.nombre) == nombre.strip().casefold())
        if exclude_id is not None:
            query = query.filter(Service.id != exclude_id)
        return query.first()
