"""
Listing Store Factory
=====================

Factory pattern for creating listing store instances based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .interface import ListingStoreInterface
from .memory_adapter import InMemoryListingStore
from .orm_adapter import OrmListingStore

logger = logging.getLogger(__name__)

ListingStoreBackend = Literal["orm", "memory"]


class ListingStoreFactory:
    """
    Factory for creating listing store instances.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"LISTING_STORE_BACKEND": "orm"}  # or 'memory'

        # In your code
        store = ListingStoreFactory.create()
    """

    @staticmethod
    def create(backend: ListingStoreBackend | None = None) -> ListingStoreInterface:
        """
        Create a listing store instance.

        Args:
            backend: 'orm' or 'memory'. If None, reads
                settings.INFRASTRUCTURE['LISTING_STORE_BACKEND']

        Raises:
            ValueError: If backend type is invalid
        """
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("LISTING_STORE_BACKEND", "orm")

        logger.info(f"Creating listing store backend: {backend_type}")

        if backend_type == "orm":
            return OrmListingStore()
        elif backend_type == "memory":
            return InMemoryListingStore()
        else:
            raise ValueError(f"Invalid listing store backend: {backend_type}. Must be 'orm' or 'memory'")
