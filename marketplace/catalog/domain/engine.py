"""
Catalog query engine.

Turns a filter mapping, a sort key and a pagination window into a
deterministic page of visible listings, and resolves single listings by id
with the view-count side effect.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional

from infrastructure.storage.interface import ListingStoreInterface

from .criteria import DEFAULT_LIMIT, ORDERINGS, ListingCriteria, parse_pagination, resolve_sort
from .errors import NotFoundError
from .records import ListingRecord, ListingStatus

logger = logging.getLogger(__name__)

PUBLIC_STATUSES = frozenset({ListingStatus.ACTIVE})


@dataclass(frozen=True)
class CatalogContext:
    """
    Who is asking, as already established by the identity layer.

    Attributes:
        identity: Verified user id, or None for anonymous callers
        is_admin: Administrative capability; lifts the visibility rule
        track_view: Count this fetch as a detail view
    """

    identity: Optional[str] = None
    is_admin: bool = False
    track_view: bool = False

    @property
    def visible_statuses(self):
        return None if self.is_admin else PUBLIC_STATUSES


class CatalogPage(Sequence):
    """Read-only window over a filtered, sorted listing set."""

    def __init__(self, items: Iterable[ListingRecord], total: int, limit: int, offset: int, sort: str):
        self._items = tuple(items)
        self.total = total
        self.limit = limit
        self.offset = offset
        self.sort = sort

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self):
        return len(self._items)

    def __eq__(self, other):
        if isinstance(other, CatalogPage):
            return self._items == other._items and self.total == other.total
        return NotImplemented

    def __repr__(self):
        return f"CatalogPage(items={len(self._items)}, total={self.total}, offset={self.offset}, limit={self.limit})"

    @property
    def has_next(self) -> bool:
        return self.offset + len(self._items) < self.total

    @property
    def ids(self):
        return [record.id for record in self._items]


class CatalogQueryEngine:
    def __init__(self, store: ListingStoreInterface, default_limit: int = DEFAULT_LIMIT):
        self.store = store
        self.default_limit = default_limit

    def query(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[str] = None,
        pagination: Optional[Mapping[str, Any]] = None,
        context: Optional[CatalogContext] = None,
    ) -> CatalogPage:
        """
        Return the requested window of listings visible in ``context``.

        Raises:
            InvalidFilterError: a filter or pagination value is malformed
            StoreUnavailableError: the store failed
        """
        context = context or CatalogContext()
        criteria = ListingCriteria.from_filters(filters, visible_statuses=context.visible_statuses)
        sort_key = resolve_sort(sort)
        limit, offset = parse_pagination(pagination, default_limit=self.default_limit)

        records, total = self.store.select(criteria, ORDERINGS[sort_key], offset, limit)
        logger.debug(f"Catalog query sort={sort_key} offset={offset} limit={limit} matched={total}")
        return CatalogPage(records, total=total, limit=limit, offset=offset, sort=sort_key)

    def get_by_id(self, listing_id, context: Optional[CatalogContext] = None) -> ListingRecord:
        """
        Fetch one listing.

        Deleted listings are hidden outside the administrative context;
        sold and pending listings stay reachable so orders can resolve them.
        A detail view increments the counter in the store and the returned
        record carries the incremented value.

        Raises:
            NotFoundError: unknown, malformed or hidden id
            StoreUnavailableError: the store failed
        """
        context = context or CatalogContext()
        record = self.store.get(str(listing_id))
        if record is None:
            raise NotFoundError(listing_id)
        if record.status == ListingStatus.DELETED and not context.is_admin:
            raise NotFoundError(listing_id)

        if context.track_view:
            view_count = self.store.increment_views(record.id)
            if view_count is None:
                # Removed between the read and the increment
                raise NotFoundError(listing_id)
            record = replace(record, view_count=view_count)

        return record
