"""
ORM Listing Store
=================

Concrete implementation of ListingStoreInterface on top of the Django ORM.
Filtering and ordering are pushed down to the database; view counts are
incremented with a single ``UPDATE ... SET view_count = view_count + 1``.
"""

import logging
import uuid
from functools import wraps
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from django.db import DatabaseError, transaction
from django.db.models import F, Q
from django.utils import timezone

from marketplace.catalog.domain.criteria import ListingCriteria, OrderField
from marketplace.catalog.domain.errors import StoreUnavailableError
from marketplace.catalog.domain.records import CategoryRecord, ListingCondition, ListingRecord, ListingStatus
from marketplace.models import Category, Listing

from .interface import UPDATABLE_FIELDS, ListingStoreInterface

logger = logging.getLogger(__name__)


def _database_call(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as e:
            logger.error(f"Listing store {func.__name__} failed: {str(e)}")
            raise StoreUnavailableError(f"Listing store unavailable: {str(e)}") from e

    return wrapper


def _parse_uuid(value) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def to_record(listing: Listing) -> ListingRecord:
    category = listing.category
    seller = listing.seller
    return ListingRecord(
        id=str(listing.id),
        title=listing.title,
        description=listing.description,
        price=listing.price,
        original_price=listing.original_price,
        seller_id=str(listing.seller_id),
        seller_name=seller.get_display_name() if seller is not None else None,
        condition=listing.condition,
        category=category.slug if category else None,
        category_name=category.name if category else None,
        brand=listing.brand,
        size=listing.size,
        color=listing.color,
        material=listing.material,
        image_urls=tuple(listing.image_urls or ()),
        status=listing.status,
        view_count=listing.view_count,
        is_featured=listing.is_featured,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )


def to_category_record(category: Category) -> CategoryRecord:
    return CategoryRecord(
        slug=category.slug,
        name=category.name,
        description=category.description,
        is_active=category.is_active,
    )


class OrmListingStore(ListingStoreInterface):
    def _queryset(self):
        return Listing.objects.select_related("category", "seller")

    def _find_category(self, key) -> Optional[Category]:
        if key is None:
            return None
        return Category.objects.filter(is_active=True).filter(Q(slug=key) | Q(name=key)).first()

    def _filter(self, queryset, criteria: ListingCriteria):
        if criteria.statuses is not None:
            if not criteria.statuses:
                return queryset.none()
            queryset = queryset.filter(status__in=sorted(criteria.statuses))

        if criteria.category is not None:
            queryset = queryset.filter(Q(category__slug=criteria.category) | Q(category__name=criteria.category))

        if criteria.condition is not None:
            queryset = queryset.filter(condition=criteria.condition)

        if criteria.min_price is not None:
            queryset = queryset.filter(price__gte=criteria.min_price)

        if criteria.max_price is not None:
            queryset = queryset.filter(price__lte=criteria.max_price)

        if criteria.seller is not None:
            seller_id = _parse_uuid(criteria.seller)
            if seller_id is None:
                # Not a user id at all, so nobody can match
                return queryset.none()
            queryset = queryset.filter(seller_id=seller_id)

        if criteria.search is not None:
            queryset = queryset.filter(
                Q(title__icontains=criteria.search)
                | Q(description__icontains=criteria.search)
                | Q(brand__icontains=criteria.search)
            )

        return queryset

    @_database_call
    def get(self, listing_id: str) -> Optional[ListingRecord]:
        pk = _parse_uuid(listing_id)
        if pk is None:
            return None
        listing = self._queryset().filter(pk=pk).first()
        return to_record(listing) if listing else None

    @_database_call
    def select(
        self,
        criteria: ListingCriteria,
        ordering: Sequence[OrderField],
        offset: int,
        limit: int,
    ) -> Tuple[List[ListingRecord], int]:
        queryset = self._filter(self._queryset(), criteria)
        total = queryset.count()
        if limit == 0 or offset >= total:
            return [], total
        # Never ask the database for more rows than remain; huge limits overflow SQL LIMIT
        limit = min(limit, total - offset)

        order_by = [f"-{order.field}" if order.descending else order.field for order in ordering]
        window = queryset.order_by(*order_by)[offset : offset + limit]
        return [to_record(listing) for listing in window], total

    @_database_call
    def increment_views(self, listing_id: str) -> Optional[int]:
        pk = _parse_uuid(listing_id)
        if pk is None:
            return None
        # The UPDATE holds the row lock until commit, so the read below sees our own increment
        with transaction.atomic():
            updated = Listing.objects.filter(pk=pk).update(view_count=F("view_count") + 1)
            if not updated:
                return None
            return Listing.objects.filter(pk=pk).values_list("view_count", flat=True).get()

    @_database_call
    def create(self, data: Mapping[str, Any]) -> ListingRecord:
        listing = Listing.objects.create(
            title=data["title"],
            description=data.get("description") or "",
            price=data["price"],
            original_price=data.get("original_price"),
            seller_id=data["seller_id"],
            category=self._find_category(data.get("category")),
            condition=ListingCondition.normalize(data.get("condition") or ListingCondition.GOOD),
            brand=data.get("brand") or "",
            size=data.get("size") or "",
            color=data.get("color") or "",
            material=data.get("material") or "",
            image_urls=list(data.get("image_urls") or []),
            is_featured=bool(data.get("is_featured", False)),
            status=ListingStatus.ACTIVE,
            view_count=0,
        )
        logger.info(f"Created listing {listing.id} for seller {listing.seller_id}")
        return self.get(listing.id)

    @_database_call
    def update(self, listing_id: str, changes: Mapping[str, Any]) -> Optional[ListingRecord]:
        pk = _parse_uuid(listing_id)
        if pk is None:
            return None
        listing = Listing.objects.filter(pk=pk).first()
        if listing is None:
            return None

        update_fields = ["updated_at"]
        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "category":
                listing.category = self._find_category(value)
            elif field == "condition":
                listing.condition = ListingCondition.normalize(value)
            elif field == "image_urls":
                listing.image_urls = list(value or [])
            elif field in ("brand", "size", "color", "material", "description"):
                setattr(listing, field, value or "")
            else:
                setattr(listing, field, value)
            update_fields.append(field)

        listing.save(update_fields=update_fields)
        return self.get(listing.id)

    @_database_call
    def set_status(self, listing_id: str, status: str, expected: Optional[str] = None) -> Optional[ListingRecord]:
        pk = _parse_uuid(listing_id)
        if pk is None:
            return None
        queryset = Listing.objects.filter(pk=pk)
        if expected is not None:
            queryset = queryset.filter(status=expected)
        if not queryset.update(status=status, updated_at=timezone.now()):
            return None
        logger.info(f"Listing {pk} status set to {status}")
        return self.get(pk)

    @_database_call
    def categories(self) -> List[CategoryRecord]:
        return [to_category_record(c) for c in Category.objects.filter(is_active=True).order_by("name")]

    @_database_call
    def get_category(self, key: str) -> Optional[CategoryRecord]:
        category = self._find_category(key)
        return to_category_record(category) if category else None
