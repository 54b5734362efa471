"""
Listing Store Interface
=======================

Abstract base class defining the contract every listing store must honour.
The catalog engine and services depend only on this interface; concrete
adapters map their native representation to ``ListingRecord``.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from marketplace.catalog.domain.criteria import ListingCriteria, OrderField
from marketplace.catalog.domain.errors import StoreUnavailableError
from marketplace.catalog.domain.records import CategoryRecord, ListingRecord

# Fields a seller may change after creation
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "price",
        "original_price",
        "condition",
        "category",
        "brand",
        "size",
        "color",
        "material",
        "image_urls",
    }
)


class ListingStoreInterface(ABC):
    """
    Abstract interface for listing persistence.

    Concrete implementations:
        - OrmListingStore: Django ORM (production)
        - InMemoryListingStore: process-local dict (tests, local development)

    Every method raises StoreUnavailableError when the backing store fails.
    """

    @abstractmethod
    def get(self, listing_id: str) -> Optional[ListingRecord]:
        """
        Fetch a listing regardless of its status.

        Returns:
            The record, or None if the id is unknown or malformed
        """
        pass

    @abstractmethod
    def select(
        self,
        criteria: ListingCriteria,
        ordering: Sequence[OrderField],
        offset: int,
        limit: int,
    ) -> Tuple[List[ListingRecord], int]:
        """
        Filter, order and window the listing set.

        Args:
            criteria: Validated predicates, including the visibility set
            ordering: Sort fields, most significant first
            offset: Number of matching records to skip (>= 0)
            limit: Maximum number of records to return (>= 0)

        Returns:
            Tuple of (records in the window, total number of matches)
        """
        pass

    @abstractmethod
    def increment_views(self, listing_id: str) -> Optional[int]:
        """
        Atomically add one to the listing's view counter.

        Concurrent calls must never lose an update.

        Returns:
            The new counter value, or None if the listing does not exist
        """
        pass

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> ListingRecord:
        """
        Persist a new listing.

        The store assigns the id, timestamps, ``status=active`` and
        ``view_count=0``; ``data`` must carry ``seller_id``.
        """
        pass

    @abstractmethod
    def update(self, listing_id: str, changes: Mapping[str, Any]) -> Optional[ListingRecord]:
        """
        Apply seller-editable changes (see UPDATABLE_FIELDS).

        Returns:
            Updated record, or None if the listing does not exist
        """
        pass

    @abstractmethod
    def set_status(self, listing_id: str, status: str, expected: Optional[str] = None) -> Optional[ListingRecord]:
        """
        Write a new status.

        When ``expected`` is given the write only happens if the stored
        status still equals it, so two concurrent transitions cannot both win.

        Returns:
            Updated record, or None if the listing is missing or the
            expected status did not match
        """
        pass

    @abstractmethod
    def categories(self) -> List[CategoryRecord]:
        """Return active categories ordered by name."""
        pass

    @abstractmethod
    def get_category(self, key: str) -> Optional[CategoryRecord]:
        """Look up an active category by slug or display name."""
        pass


__all__ = ["ListingStoreInterface", "StoreUnavailableError", "UPDATABLE_FIELDS"]
