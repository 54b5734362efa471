"""
CatalogService - Listing browsing and seller CRUD

Wraps the catalog query engine and the listing store behind ServiceResult
values. Browsing goes through the engine so that the visibility rule,
filters, ordering and the view counter behave identically for every caller;
writes go to the store after permission and lifecycle checks.
"""

from typing import Any, Dict, List, Optional

from authentication.infra.observability.tracing import add_span_attributes, tracer
from infrastructure.container import container
from infrastructure.storage.interface import UPDATABLE_FIELDS, ListingStoreInterface
from marketplace.catalog.domain import lifecycle
from marketplace.catalog.domain.engine import CatalogContext, CatalogPage, CatalogQueryEngine
from marketplace.catalog.domain.errors import (
    InvalidFilterError,
    InvalidTransitionError,
    NotFoundError,
    StoreUnavailableError,
)
from marketplace.catalog.domain.records import CategoryRecord, ListingRecord, ListingStatus
from marketplace.infra.observability.metrics import (
    catalog_listing_views_total,
    catalog_queries_total,
    catalog_query_duration,
    catalog_query_errors_total,
    listing_status_changes_total,
)
from marketplace.models import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import can_sell, is_admin, is_authenticated, is_owner


def build_context(user=None, track_view: bool = False, admin_view: bool = False) -> CatalogContext:
    """
    Translate a request user into a CatalogContext.

    The administrative capability is only granted when the caller asked for
    an admin view and actually holds the admin role.
    """
    identity = str(user.pk) if is_authenticated(user) else None
    return CatalogContext(identity=identity, is_admin=admin_view and is_admin(user), track_view=track_view)


class CatalogService(BaseService):
    """
    Service for listing catalog operations.

    Responsibilities:
    - Query listings with filters, sorting and pagination
    - Fetch single listings (recording detail views)
    - Create, update and soft delete listings (seller or admin)
    - Administrative status moderation
    - Category lookups

    All operations return ServiceResult.
    """

    def __init__(self, store: Optional[ListingStoreInterface] = None, engine: Optional[CatalogQueryEngine] = None):
        """
        Initialize CatalogService.

        Args:
            store: Listing store (injected via DI container)
            engine: Query engine over the same store
        """
        super().__init__()
        self.store = store or container.listing_store()
        self.engine = engine or CatalogQueryEngine(self.store)

    def _store_failure(self, operation: str, error: StoreUnavailableError) -> ServiceResult:
        self.logger.error(f"{operation} failed, listing store unavailable: {str(error)}")
        return service_err(ErrorCodes.STORE_UNAVAILABLE, "The listing store is temporarily unavailable")

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_listings(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
        limit: Any = None,
        offset: Any = None,
        context: Optional[CatalogContext] = None,
    ) -> ServiceResult[CatalogPage]:
        """
        Query the catalog.

        Args:
            filters: category, condition, min_price, max_price, seller,
                search, status (aliases accepted, unknown keys ignored)
            sort: newest | price_low | price_high | popular
            limit: Page size (default from settings)
            offset: Number of listings to skip
            context: Caller context; anonymous public context by default

        Returns:
            ServiceResult with a CatalogPage

        Example:
            >>> result = catalog_service.list_listings({"category": "tops"}, sort="price_low", limit=10)
            >>> if result.ok:
            ...     page = result.value
            ...     print(page.total, [listing.title for listing in page])
        """
        context = context or CatalogContext()
        scope = "admin" if context.is_admin else "public"

        with tracer.start_as_current_span("catalog.list_listings") as span:
            add_span_attributes(span, sort=sort, limit=limit, offset=offset, scope=scope)
            span.set_attribute("filters.count", len(filters or {}))

            try:
                with catalog_query_duration.time():
                    page = self.engine.query(filters, sort, {"limit": limit, "offset": offset}, context)
            except InvalidFilterError as e:
                catalog_query_errors_total.labels(reason="invalid_filter").inc()
                span.set_attribute("error", "invalid_filter")
                return service_err(ErrorCodes.INVALID_FILTER, str(e))
            except StoreUnavailableError as e:
                catalog_query_errors_total.labels(reason="store_unavailable").inc()
                return self._store_failure("list_listings", e)

            catalog_queries_total.labels(sort=page.sort, context=scope).inc()
            span.set_attribute("results.total", page.total)
            span.set_attribute("results.returned", len(page))
            return service_ok(page)

    @BaseService.log_performance
    def list_seller_listings(
        self,
        user,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
        limit: Any = None,
        offset: Any = None,
    ) -> ServiceResult[CatalogPage]:
        """
        The caller's own listings in every status.

        Only the ``seller`` filter is forced; everything else (including the
        ``status`` facet) is passed through.
        """
        if not is_authenticated(user):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Authentication required")

        filters = {
            key: value for key, value in (filters or {}).items() if key not in ("seller", "seller_id", "sellerId")
        }
        filters["seller"] = str(user.pk)
        context = CatalogContext(identity=str(user.pk), is_admin=True)
        return self.list_listings(filters, sort=sort, limit=limit, offset=offset, context=context)

    @BaseService.log_performance
    def get_listing(self, listing_id, context: Optional[CatalogContext] = None) -> ServiceResult[ListingRecord]:
        """
        Get one listing.

        With ``context.track_view`` the view counter is incremented and the
        returned record carries the new count.

        Returns:
            ServiceResult with the ListingRecord or listing_not_found
        """
        context = context or CatalogContext()

        with tracer.start_as_current_span("catalog.get_listing") as span:
            add_span_attributes(span, listing_id=listing_id, track_view=context.track_view, admin=context.is_admin)

            try:
                record = self.engine.get_by_id(listing_id, context)
            except NotFoundError:
                return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {listing_id} not found")
            except StoreUnavailableError as e:
                return self._store_failure("get_listing", e)

            if context.track_view:
                catalog_listing_views_total.inc()
            span.set_attribute("listing.view_count", record.view_count)
            return service_ok(record)

    # ------------------------------------------------------------------
    # Seller operations
    # ------------------------------------------------------------------

    def _check_category(self, data: Dict[str, Any]) -> Optional[ServiceResult]:
        key = data.get("category")
        if key in (None, ""):
            return None
        if self.store.get_category(key) is None:
            return service_err(ErrorCodes.CATEGORY_NOT_FOUND, f"Category '{key}' does not exist")
        return None

    def _load_for_write(self, listing_id, user):
        """Fetch a listing the user may modify, or a failed ServiceResult."""
        context = CatalogContext(identity=str(user.pk), is_admin=is_admin(user))
        try:
            record = self.engine.get_by_id(listing_id, context)
        except NotFoundError:
            return None, service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {listing_id} not found")

        if not (is_owner(user, record.seller_id) or context.is_admin):
            return None, service_err(ErrorCodes.NOT_LISTING_OWNER, "Only the seller or an administrator can do this")
        return record, None

    @BaseService.log_performance
    def create_listing(self, data: Dict[str, Any], user) -> ServiceResult[ListingRecord]:
        """
        Create a listing owned by ``user``.

        Any authenticated, active account may sell. The store assigns the
        id, ``status=active`` and ``view_count=0``.

        Args:
            data: Validated listing fields (title, price, condition, ...)
            user: Seller

        Returns:
            ServiceResult with the created ListingRecord
        """
        with tracer.start_as_current_span("catalog.create_listing") as span:
            if not can_sell(user):
                return service_err(ErrorCodes.PERMISSION_DENIED, "An active account is required to sell")

            span.set_attribute("seller.id", str(user.pk))

            if not str(data.get("title") or "").strip():
                return service_err(ErrorCodes.VALIDATION_ERROR, "Title is required")
            if data.get("price") is None or data["price"] < 0:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be zero or more")

            try:
                category_error = self._check_category(data)
                if category_error:
                    return category_error

                payload = {key: value for key, value in data.items() if key in UPDATABLE_FIELDS}
                payload["seller_id"] = str(user.pk)
                payload["seller_name"] = user.get_display_name() if hasattr(user, "get_display_name") else None
                record = self.store.create(payload)
            except StoreUnavailableError as e:
                return self._store_failure("create_listing", e)

            span.set_attribute("listing.id", record.id)
            self.logger.info(f"Listing {record.id} created by {user.pk}")
            return service_ok(record)

    @BaseService.log_performance
    def update_listing(self, listing_id, data: Dict[str, Any], user) -> ServiceResult[ListingRecord]:
        """
        Update seller-editable fields.

        ``status``, ``view_count`` and the seller cannot be changed here;
        deleted listings cannot be edited at all.
        """
        with tracer.start_as_current_span("catalog.update_listing") as span:
            span.set_attribute("listing.id", str(listing_id))

            if not is_authenticated(user):
                return service_err(ErrorCodes.PERMISSION_DENIED, "Authentication required")

            locked = sorted(set(data) - UPDATABLE_FIELDS)
            if locked:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Fields cannot be updated: {', '.join(locked)}")
            if "price" in data and (data["price"] is None or data["price"] < 0):
                return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be zero or more")

            try:
                record, error = self._load_for_write(listing_id, user)
                if error:
                    return error
                if record.status == ListingStatus.DELETED:
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Deleted listings cannot be edited")

                category_error = self._check_category(data)
                if category_error:
                    return category_error

                updated = self.store.update(record.id, data)
            except StoreUnavailableError as e:
                return self._store_failure("update_listing", e)

            if updated is None:
                return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {listing_id} not found")
            return service_ok(updated)

    def _transition(self, record: ListingRecord, target: str) -> ServiceResult[ListingRecord]:
        try:
            lifecycle.transition(record.status, target)
        except InvalidTransitionError as e:
            return service_err(ErrorCodes.INVALID_STATUS_TRANSITION, str(e))

        updated = self.store.set_status(record.id, target, expected=record.status)
        if updated is None:
            # Someone else moved the listing first
            return service_err(
                ErrorCodes.INVALID_STATUS_TRANSITION,
                f"Listing {record.id} is no longer '{record.status}'",
            )

        listing_status_changes_total.labels(from_status=record.status, to_status=target).inc()
        self.logger.info(f"Listing {record.id} moved from {record.status} to {target}")
        return service_ok(updated)

    @BaseService.log_performance
    def delete_listing(self, listing_id, user) -> ServiceResult[ListingRecord]:
        """
        Soft delete: the listing moves to ``deleted`` and is kept so that
        orders referencing it still resolve.
        """
        with tracer.start_as_current_span("catalog.delete_listing") as span:
            span.set_attribute("listing.id", str(listing_id))

            if not is_authenticated(user):
                return service_err(ErrorCodes.PERMISSION_DENIED, "Authentication required")

            try:
                record, error = self._load_for_write(listing_id, user)
                if error:
                    return error
                return self._transition(record, ListingStatus.DELETED)
            except StoreUnavailableError as e:
                return self._store_failure("delete_listing", e)

    @BaseService.log_performance
    def change_status(self, listing_id, status: str, user) -> ServiceResult[ListingRecord]:
        """
        Administrative moderation through the listing lifecycle.

        Args:
            listing_id: Listing to move
            status: Target status (legacy spellings accepted)
            user: Must be an administrator
        """
        with tracer.start_as_current_span("catalog.change_status") as span:
            add_span_attributes(span, listing_id=listing_id, target=status)

            if not is_admin(user):
                return service_err(ErrorCodes.PERMISSION_DENIED, "Administrator role required")

            target = ListingStatus.normalize(status or "")
            if target not in ListingStatus.ALL:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown status '{status}'")

            try:
                record = self.engine.get_by_id(listing_id, CatalogContext(identity=str(user.pk), is_admin=True))
                if record.status == ListingStatus.PENDING and target != ListingStatus.DELETED:
                    # A reservation is released or turned into a sale through its order
                    holder = Order.pending_for_listing(record.id)
                    if holder is not None:
                        return service_err(
                            ErrorCodes.INVALID_STATUS_TRANSITION,
                            f"Listing {record.id} is reserved by order {holder.order_number}; "
                            "complete or cancel the order instead",
                        )
                return self._transition(record, target)
            except NotFoundError:
                return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {listing_id} not found")
            except StoreUnavailableError as e:
                return self._store_failure("change_status", e)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_categories(self) -> ServiceResult[List[CategoryRecord]]:
        try:
            return service_ok(self.store.categories())
        except StoreUnavailableError as e:
            return self._store_failure("list_categories", e)

    @BaseService.log_performance
    def get_category(self, key: str) -> ServiceResult[CategoryRecord]:
        try:
            category = self.store.get_category(key)
        except StoreUnavailableError as e:
            return self._store_failure("get_category", e)

        if category is None:
            return service_err(ErrorCodes.CATEGORY_NOT_FOUND, f"Category '{key}' does not exist")
        return service_ok(category)
