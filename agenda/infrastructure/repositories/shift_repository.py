"""
SQLAlchemy Implementation of Shift Repository.
"""

from typing import Dict, List

from sqlalchemy import func

from agenda.domain.models.shift import Shift, ESTADO_CANCELADO
from agenda.domain.repositories.shift_repository import ShiftRepository
from agenda.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyShiftRepository(SQLAlchemyRepository[Shift], ShiftRepository):
    """Shift repository implementation using SQLAlchemy."""

    def get_by_date(self, fecha: str) -> List[Shift]:
        return (
            self.db.query(Shift)
            .filter(Shift.fecha == fecha)
            .order_by(Shift.hora.asc(), Shift.id.asc())
            .all()
        )

    def get_load(self, prefix: str) -> Dict[str, int]:
        """Count non-cancelled shifts per date among dates starting with prefix ('2025-06-')."""
        results = (
            self.db.query(
                Shift.fecha,
                func.count(Shift.id).label("count"),
            )
            .filter(Shift.fecha.like(f"{prefix}%"))
            .filter(Shift.estado != ESTADO_CANCELADO)
            .group_by(Shift.fecha)
            .order_by(Shift.fecha)
            .all()
        )
        return {r.fecha: r.count for r in results}
