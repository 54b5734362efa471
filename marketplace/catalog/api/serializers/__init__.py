from .category_serializers import CategorySerializer
from .listing_serializers import (
    CatalogQuerySerializer,
    ListingSerializer,
    ListingStatusSerializer,
    ListingWriteSerializer,
)

__all__ = [
    "CategorySerializer",
    "CatalogQuerySerializer",
    "ListingSerializer",
    "ListingStatusSerializer",
    "ListingWriteSerializer",
]
