from marketplace.catalog.domain.models import Category, Listing
from marketplace.ordering.domain.models import Order

__all__ = [
    "Category",
    "Listing",
    "Order",
]
