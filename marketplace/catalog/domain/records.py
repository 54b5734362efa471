"""
Store-independent listing records.

Every listing store adapter maps its native representation into these
dataclasses, and the catalog engine only ever sees them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple


class ListingStatus:
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    DELETED = "deleted"

    CHOICES = [
        (ACTIVE, "Active"),
        (PENDING, "Pending"),
        (SOLD, "Sold"),
        (DELETED, "Deleted"),
    ]
    ALL = frozenset({ACTIVE, PENDING, SOLD, DELETED})

    # Spellings used by older clients and imported data
    LEGACY_ALIASES = {"available": ACTIVE, "reserved": PENDING}

    @classmethod
    def normalize(cls, value: str) -> str:
        value = str(value).strip().lower()
        return cls.LEGACY_ALIASES.get(value, value)


class ListingCondition:
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    CHOICES = [
        (NEW, "New"),
        (LIKE_NEW, "Like New"),
        (GOOD, "Good"),
        (FAIR, "Fair"),
        (POOR, "Poor"),
    ]
    ALL = frozenset({NEW, LIKE_NEW, GOOD, FAIR, POOR})

    LEGACY_ALIASES = {"like-new": LIKE_NEW, "like new": LIKE_NEW}

    @classmethod
    def normalize(cls, value: str) -> str:
        value = str(value).strip().lower()
        return cls.LEGACY_ALIASES.get(value, value)


@dataclass(frozen=True)
class ListingRecord:
    id: str
    title: str
    price: Decimal
    seller_id: str
    condition: str
    status: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    original_price: Optional[Decimal] = None
    category: Optional[str] = None
    brand: str = ""
    size: str = ""
    color: str = ""
    material: str = ""
    image_urls: Tuple[str, ...] = field(default_factory=tuple)
    view_count: int = 0
    is_featured: bool = False
    # Display-only enrichment filled in by stores that can join cheaply
    category_name: Optional[str] = None
    seller_name: Optional[str] = None

    @property
    def is_visible_publicly(self) -> bool:
        return self.status == ListingStatus.ACTIVE


@dataclass(frozen=True)
class CategoryRecord:
    slug: str
    name: str
    description: str = ""
    is_active: bool = True


# Categories every fresh installation starts with
DEFAULT_CATEGORIES = (
    CategoryRecord(slug="tops", name="Tops", description="Shirts, blouses, sweaters"),
    CategoryRecord(slug="dresses", name="Dresses", description="Casual and formal dresses"),
    CategoryRecord(slug="pants", name="Pants", description="Jeans, trousers, leggings"),
    CategoryRecord(slug="shoes", name="Shoes", description="Sneakers, boots, heels"),
    CategoryRecord(slug="accessories", name="Accessories", description="Bags, jewelry, scarves"),
)
