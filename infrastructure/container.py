"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure dependencies.
Services get their listing store through the abstract interface, so the
backend (ORM or in-memory) is a configuration choice.

Usage:
    from infrastructure.container import container

    catalog = container.catalog_service()
    orders = container.order_service()
"""

import logging
from typing import Optional

from .storage import ListingStoreFactory, ListingStoreInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton: every ``ServiceContainer()`` call returns the same object.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._listing_store: Optional[ListingStoreInterface] = None

            # Domain Services
            self._catalog_engine = None
            self._catalog_service = None
            self._order_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def listing_store(self, backend: Optional[str] = None) -> ListingStoreInterface:
        """
        Get the listing store.

        Args:
            backend: 'orm' or 'memory'. If None, uses configuration from
                settings. Passing a backend replaces the cached store and
                every service built on it.

        Returns:
            ListingStoreInterface implementation (cached)
        """
        if self._listing_store is None or backend is not None:
            self._listing_store = ListingStoreFactory.create(backend)
            self._catalog_engine = None
            self._catalog_service = None
            self._order_service = None
            logger.debug(f"Created listing store: {type(self._listing_store).__name__}")

        return self._listing_store

    def catalog_engine(self):
        """Get CatalogQueryEngine instance."""
        if self._catalog_engine is None:
            from django.conf import settings

            from marketplace.catalog.domain.engine import CatalogQueryEngine

            self._catalog_engine = CatalogQueryEngine(
                store=self.listing_store(),
                default_limit=getattr(settings, "CATALOG_DEFAULT_PAGE_SIZE", 20),
            )
            logger.debug("Created CatalogQueryEngine")
        return self._catalog_engine

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.services import CatalogService

            self._catalog_service = CatalogService(store=self.listing_store(), engine=self.catalog_engine())
            logger.debug("Created CatalogService")
        return self._catalog_service

    def order_service(self):
        """Get OrderService instance."""
        if self._order_service is None:
            from marketplace.services import OrderService

            self._order_service = OrderService(store=self.listing_store())
            logger.debug("Created OrderService")
        return self._order_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._listing_store = None
        self._catalog_engine = None
        self._catalog_service = None
        self._order_service = None
        logger.info("Service container reset")

    def configure_for_testing(self):
        """
        Configure container with the in-memory listing store.

        Services created afterwards share one empty, process-local store.
        """
        self.listing_store("memory")
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()
