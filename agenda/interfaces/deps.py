"""
Repository factories for handlers, bound to the dispatcher's current Session.
"""

from agenda.domain.models.customer import Customer
from agenda.domain.models.service import Service
from agenda.domain.repositories.customer_repository import CustomerRepository
from agenda.domain.repositories.service_repository import ServiceRepository
from agenda.infrastructure.repositories.customer_repository import SQLAlchemyCustomerRepository
from agenda.infrastructure.repositories.service_repository import SQLAlchemyServiceRepository


def get_customer_repository(ctx) -> CustomerRepository:
    """Get customer repository instance."""
    return SQLAlchemyCustomerRepository(ctx.db, Customer)


def get_service_repository(ctx) -> ServiceRepository:
    """Get service catalog repository instance."""
    return SQLAlchemyServiceRepository(ctx.db, Service)
