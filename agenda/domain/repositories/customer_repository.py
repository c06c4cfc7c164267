"""
Customer Repository Interface.
Defines specific data access operations for Customers.
"""

from typing import Any, Dict, Optional

from agenda.domain.repositories.base import BaseRepository
from agenda.domain.models.customer import Customer
from agenda.domain.schemas.customer import CustomerFilter


class CustomerRepository(BaseRepository[Customer]):
    """Interface for Customer-specific operations."""

    def get_by_document(self, documento: str) -> Optional[Customer]:
        """Exact match on the unique document number."""
        ...

    def get_with_filters(self, filters: CustomerFilter) -> Dict[str, Any]:
        """Search by name/surname/document with pagination."""
        ...
