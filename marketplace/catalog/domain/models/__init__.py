from .category import Category
from .listing import Listing

__all__ = [
    "Category",
    "Listing",
]
