"""
Marketplace Service Layer

Business logic for the marketplace app, organized into domain services.

Services:
- CatalogService: Listing browsing, seller CRUD, moderation
- OrderService: Order lifecycle driving listing status

Usage:
    from infrastructure.container import container

    catalog_service = container.catalog_service()
    result = catalog_service.list_listings(filters={"category": "tops"})

    if result.ok:
        page = result.value
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from marketplace.catalog.domain.services.catalog_service import CatalogService  # noqa: E402
from marketplace.ordering.domain.services.order_service import OrderService  # noqa: E402

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
    # Services
    "CatalogService",
    "OrderService",
]
