"""Exceptions raised by the catalog engine, the listing stores and the lifecycle."""


class CatalogError(Exception):
    """Base class for catalog failures."""


class InvalidFilterError(CatalogError):
    """A filter or pagination value could not be parsed."""

    def __init__(self, field: str, value, reason: str = "is not a valid number"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {value!r} {reason}")


class NotFoundError(CatalogError):
    """The id does not resolve to a listing the caller may see."""

    def __init__(self, listing_id):
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found")


class StoreUnavailableError(CatalogError):
    """The backing listing store failed. Never retried here."""


class InvalidTransitionError(CatalogError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move listing from '{current}' to '{target}'")
