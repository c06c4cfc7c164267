"""
SQLAlchemy Implementation of Customer Repository.
"""

from typing import Any, Dict, Optional

from sqlalchemy import or_

from agenda.domain.models.customer import Customer
from agenda.domain.repositories.customer_repository import CustomerRepository
from agenda.domain.schemas.customer import CustomerFilter
from agenda.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCustomerRepository(SQLAlchemyRepository[Customer], CustomerRepository):
    """Customer repository implementation using SQLAlchemy."""

    def get_by_document(self, documento: str) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.documento == documento).first()

    def get_with_filters(self, filters: CustomerFilter) -> Dict[str, Any]:
        """Search customers and paginate, ordered by surname then name."""
        query = self.db.query(Customer)

        if filters.search and filters.search.strip():
            term = f"%{filters.search.strip()}%"
            query = query.filter(
                or_(
                    Customer.nombre.like(term),
                    Customer.apellido.like(term),
                    Customer.documento.like(term),
                )
            )

        total = query.count()
        offset = (filters.page - 1) * filters.limit
        customers = (
            query.order_by(Customer.apellido.asc(), Customer.nombre.asc(), Customer.id.asc())
            .offset(offset)
            .limit(filters.limit)
            .all()
        )

        return {
            "items": customers,
            "total": total,
            "page": filters.page,
            "limit": filters.limit,
            "total_pages": (total + filters.limit - 1) // filters.limit,
        }
