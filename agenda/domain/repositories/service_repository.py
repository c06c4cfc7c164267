"""
Service Repository Interface.
Defines data access operations for the services catalog.
"""

from typing import List, Optional

from agenda.domain.repositories.base import BaseRepository
from agenda.domain.models.service import Service


class ServiceRepository(BaseRepository[Service]):
    """Interface for Service-specific operations."""

    def get_all_ordered(self) -> List[Service]:
        """All services ordered by name."""
        ...

    def get_active(self) -> List[Service]:
        """Active services ordered by name."""
        ...

    def find_by_name_ci(self, nombre: str, exclude_id: int | None = None) -> Optional[Service]:
        """Case-insensitive name lookup, optionally ignoring one id."""
        ...
