"""
Listing Store Abstraction Layer
===============================

Provides a unified interface for listing persistence (Django ORM, in-memory).
"""

from .factory import ListingStoreFactory
from .interface import ListingStoreInterface, StoreUnavailableError
from .memory_adapter import InMemoryListingStore
from .orm_adapter import OrmListingStore

__all__ = [
    "ListingStoreInterface",
    "StoreUnavailableError",
    "InMemoryListingStore",
    "OrmListingStore",
    "ListingStoreFactory",
]
