"""
In-Memory Listing Store
=======================

Process-local implementation of ListingStoreInterface. Used by unit tests
and for running the API without a database. All access goes through one
lock, so increments and conditional status writes are atomic.
"""

import logging
import threading
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from django.utils import timezone

from marketplace.catalog.domain.criteria import ListingCriteria, OrderField
from marketplace.catalog.domain.records import (
    DEFAULT_CATEGORIES,
    CategoryRecord,
    ListingCondition,
    ListingRecord,
    ListingStatus,
)

from .interface import UPDATABLE_FIELDS, ListingStoreInterface

logger = logging.getLogger(__name__)


class InMemoryListingStore(ListingStoreInterface):
    def __init__(
        self,
        records: Optional[Iterable[ListingRecord]] = None,
        categories: Iterable[CategoryRecord] = DEFAULT_CATEGORIES,
    ):
        self._lock = threading.Lock()
        self._listings: Dict[str, ListingRecord] = {}
        self._categories: Dict[str, CategoryRecord] = {category.slug: category for category in categories}
        for record in records or ():
            self.put(record)

    def put(self, record: ListingRecord) -> ListingRecord:
        """Insert or replace a record verbatim (fixtures, imports)."""
        with self._lock:
            self._listings[str(record.id)] = record
        return record

    def clear(self) -> None:
        with self._lock:
            self._listings.clear()

    def _resolve_category(self, key: Optional[str]) -> Optional[CategoryRecord]:
        if key is None:
            return None
        category = self._categories.get(key)
        if category is None:
            category = next((c for c in self._categories.values() if c.name == key), None)
        if category is None or not category.is_active:
            return None
        return category

    def get(self, listing_id: str) -> Optional[ListingRecord]:
        with self._lock:
            return self._listings.get(str(listing_id))

    def select(
        self,
        criteria: ListingCriteria,
        ordering: Sequence[OrderField],
        offset: int,
        limit: int,
    ) -> Tuple[List[ListingRecord], int]:
        with self._lock:
            matched = [record for record in self._listings.values() if criteria.matches(record)]

        # Stable sorts applied from the least significant key up
        for order in reversed(ordering):
            matched.sort(key=lambda record: _sort_value(record, order.field), reverse=order.descending)

        return matched[offset : offset + limit], len(matched)

    def increment_views(self, listing_id: str) -> Optional[int]:
        with self._lock:
            record = self._listings.get(str(listing_id))
            if record is None:
                return None
            record = replace(record, view_count=record.view_count + 1)
            self._listings[record.id] = record
            return record.view_count

    def create(self, data: Mapping[str, Any]) -> ListingRecord:
        category = self._resolve_category(data.get("category"))
        now = timezone.now()
        record = ListingRecord(
            id=str(uuid.uuid4()),
            title=data["title"],
            description=data.get("description") or "",
            price=Decimal(str(data["price"])),
            original_price=_optional_decimal(data.get("original_price")),
            seller_id=str(data["seller_id"]),
            seller_name=data.get("seller_name"),
            condition=ListingCondition.normalize(data.get("condition") or ListingCondition.GOOD),
            category=category.slug if category else None,
            category_name=category.name if category else None,
            brand=data.get("brand") or "",
            size=data.get("size") or "",
            color=data.get("color") or "",
            material=data.get("material") or "",
            image_urls=tuple(data.get("image_urls") or ()),
            status=ListingStatus.ACTIVE,
            view_count=0,
            is_featured=bool(data.get("is_featured", False)),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._listings[record.id] = record
        logger.info(f"Created in-memory listing {record.id}")
        return record

    def update(self, listing_id: str, changes: Mapping[str, Any]) -> Optional[ListingRecord]:
        values = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        if "category" in values:
            category = self._resolve_category(values["category"])
            values["category"] = category.slug if category else None
            values["category_name"] = category.name if category else None
        if "price" in values:
            values["price"] = Decimal(str(values["price"]))
        if "original_price" in values:
            values["original_price"] = _optional_decimal(values["original_price"])
        if "condition" in values:
            values["condition"] = ListingCondition.normalize(values["condition"])
        if "image_urls" in values:
            values["image_urls"] = tuple(values["image_urls"] or ())

        with self._lock:
            record = self._listings.get(str(listing_id))
            if record is None:
                return None
            record = replace(record, updated_at=timezone.now(), **values)
            self._listings[record.id] = record
            return record

    def set_status(self, listing_id: str, status: str, expected: Optional[str] = None) -> Optional[ListingRecord]:
        with self._lock:
            record = self._listings.get(str(listing_id))
            if record is None or (expected is not None and record.status != expected):
                return None
            record = replace(record, status=status, updated_at=timezone.now())
            self._listings[record.id] = record
            return record

    def categories(self) -> List[CategoryRecord]:
        return sorted((c for c in self._categories.values() if c.is_active), key=lambda c: c.name)

    def get_category(self, key: str) -> Optional[CategoryRecord]:
        return self._resolve_category(key)


def _sort_value(record: ListingRecord, field: str):
    value = getattr(record, field)
    if field == "id":
        return str(value)
    return value


def _optional_decimal(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return Decimal(str(value))
