"""
Parsing and validation of catalog query inputs.

Raw filter mappings coming from the API (or from other services) are turned
into a frozen ``ListingCriteria`` before any store is touched, so a bad value
aborts the whole query instead of silently dropping one predicate.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from .errors import InvalidFilterError
from .records import ListingCondition, ListingRecord, ListingStatus

DEFAULT_LIMIT = 20

# Alternate spellings accepted for filter keys
FILTER_ALIASES = {
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "seller_id": "seller",
    "sellerId": "seller",
    "search_text": "search",
    "searchText": "search",
}


class SortKey:
    NEWEST = "newest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    POPULAR = "popular"

    DEFAULT = NEWEST
    CHOICES = [
        (NEWEST, "Newest first"),
        (PRICE_LOW, "Price: low to high"),
        (PRICE_HIGH, "Price: high to low"),
        (POPULAR, "Most viewed"),
    ]


@dataclass(frozen=True)
class OrderField:
    field: str
    descending: bool = False


# Every ordering ends on id ascending so that pages never overlap or skip.
ORDERINGS = {
    SortKey.NEWEST: (OrderField("created_at", descending=True), OrderField("id")),
    SortKey.PRICE_LOW: (OrderField("price"), OrderField("id")),
    SortKey.PRICE_HIGH: (OrderField("price", descending=True), OrderField("id")),
    SortKey.POPULAR: (OrderField("view_count", descending=True), OrderField("id")),
}


def resolve_sort(sort: Optional[str]) -> str:
    """Return a known sort key, falling back to newest for anything else."""
    if isinstance(sort, str) and sort.strip().lower() in ORDERINGS:
        return sort.strip().lower()
    return SortKey.DEFAULT


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_price(name: str, value: Any) -> Optional[Decimal]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise InvalidFilterError(name, value)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidFilterError(name, value) from None
    else:
        raise InvalidFilterError(name, value)

    if not amount.is_finite():
        raise InvalidFilterError(name, value)
    return amount


def parse_count(name: str, value: Any, default: int) -> int:
    """Parse limit/offset. Negative numbers are clamped to zero."""
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        raise InvalidFilterError(name, value, "is not an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise InvalidFilterError(name, value, "is not an integer") from None
    else:
        raise InvalidFilterError(name, value, "is not an integer")
    return max(number, 0)


def parse_pagination(pagination: Optional[Mapping[str, Any]], default_limit: int = DEFAULT_LIMIT) -> Tuple[int, int]:
    pagination = pagination or {}
    limit = parse_count("limit", pagination.get("limit"), default_limit)
    offset = parse_count("offset", pagination.get("offset"), 0)
    return limit, offset


def canonical_filters(filters: Optional[Mapping[str, Any]]) -> dict:
    """Map aliased keys onto their canonical names. Canonical keys win."""
    canonical = {}
    for key, value in (filters or {}).items():
        target = FILTER_ALIASES.get(key, key)
        if target != key and target in (filters or {}):
            continue
        canonical[target] = value
    return canonical


@dataclass(frozen=True)
class ListingCriteria:
    """
    Validated predicate set handed to a listing store.

    ``statuses`` is the visibility set; ``None`` means every status is
    eligible (administrative context).
    """

    statuses: Optional[FrozenSet[str]] = None
    category: Optional[str] = None
    condition: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    seller: Optional[str] = None
    search: Optional[str] = None

    @classmethod
    def from_filters(
        cls,
        filters: Optional[Mapping[str, Any]],
        visible_statuses: Optional[FrozenSet[str]] = None,
    ) -> "ListingCriteria":
        """
        Build criteria from a raw filter mapping.

        Unknown keys are ignored. Blank values mean "no filter".

        Raises:
            InvalidFilterError: if a price bound is not a finite number.
        """
        values = canonical_filters(filters)

        min_price = parse_price("min_price", values.get("min_price"))
        max_price = parse_price("max_price", values.get("max_price"))

        statuses = visible_statuses
        status = values.get("status")
        if not _is_blank(status):
            requested = frozenset({ListingStatus.normalize(status)})
            statuses = requested if statuses is None else statuses & requested

        category = values.get("category")
        condition = values.get("condition")
        seller = values.get("seller")
        search = values.get("search")

        return cls(
            statuses=statuses,
            category=None if _is_blank(category) else str(category).strip(),
            condition=None if _is_blank(condition) else ListingCondition.normalize(condition),
            min_price=min_price,
            max_price=max_price,
            seller=None if _is_blank(seller) else str(seller).strip(),
            search=None if _is_blank(search) else str(search).strip(),
        )

    def matches(self, record: ListingRecord) -> bool:
        if self.statuses is not None and record.status not in self.statuses:
            return False
        if self.category is not None and self.category not in (record.category, record.category_name):
            return False
        if self.condition is not None and record.condition != self.condition:
            return False
        if self.min_price is not None and record.price < self.min_price:
            return False
        if self.max_price is not None and record.price > self.max_price:
            return False
        if self.seller is not None and str(record.seller_id) != self.seller:
            return False
        if self.search is not None:
            needle = self.search.lower()
            haystacks = (record.title, record.description, record.brand)
            if not any(needle in (text or "").lower() for text in haystacks):
                return False
        return True
