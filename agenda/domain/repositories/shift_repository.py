"""
Shift Repository Interface.
Defines appointment queries, including the calendar load aggregation.
"""

from typing import Dict, List

from agenda.domain.repositories.base import BaseRepository
from agenda.domain.models.shift import Shift


class ShiftRepository(BaseRepository[Shift]):
    """Interface for Shift-specific operations."""

    def get_by_date(self, fecha: str) -> List[Shift]:
        """All appointments of one date ordered by time, any status."""
        ...

    def get_load(self, prefix: str) -> Dict[str, int]:
        """Non-cancelled appointment count per date for dates starting with prefix."""
        ...
