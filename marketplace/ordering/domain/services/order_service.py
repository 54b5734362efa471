"""
OrderService - Order Lifecycle Management

A listing is a single garment, so an order is one buyer reserving one
listing. The order status and the listing status move together:

    order pending    <-> listing pending   (place_order: listing active -> pending)
    order completed  <-> listing sold      (complete_order)
    order cancelled  <-> listing active    (cancel_order)

Payment is out of scope; completion is confirmed by the seller.
"""

import uuid
from typing import Any, Dict, List, Optional

from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from authentication.infra.observability.tracing import tracer
from infrastructure.container import container
from infrastructure.storage.interface import ListingStoreInterface
from marketplace.catalog.domain import lifecycle
from marketplace.catalog.domain.errors import InvalidTransitionError, StoreUnavailableError
from marketplace.catalog.domain.records import ListingStatus
from marketplace.infra.observability.metrics import order_value, orders_placed_total
from marketplace.models import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import can_sell, is_admin, is_authenticated, is_owner


class OrderService(BaseService):
    """
    Service for managing order lifecycle.

    Responsibilities:
    - Place an order on an active listing
    - Complete or cancel pending orders
    - List and fetch orders for their participants

    Dependencies:
    - ListingStoreInterface: conditional status writes on the listing
    """

    def __init__(self, store: Optional[ListingStoreInterface] = None):
        super().__init__()
        self.store = store or container.listing_store()

    def _store_failure(self, operation: str, error: StoreUnavailableError) -> ServiceResult:
        self.logger.error(f"{operation} failed, listing store unavailable: {str(error)}")
        return service_err(ErrorCodes.STORE_UNAVAILABLE, "The listing store is temporarily unavailable")

    @staticmethod
    def _is_participant(order: Order, user) -> bool:
        return is_owner(user, order.buyer_id) or is_owner(user, order.seller_id) or is_admin(user)

    def _locked_order(self, order_id) -> Optional[Order]:
        try:
            pk = uuid.UUID(str(order_id))
        except ValueError:
            return None
        return Order.objects.select_for_update().filter(pk=pk).first()

    @BaseService.log_performance
    def place_order(
        self,
        listing_id,
        buyer,
        shipping_address: Optional[Dict[str, Any]] = None,
        notes: str = "",
    ) -> ServiceResult[Order]:
        """
        Reserve a listing for ``buyer``.

        The listing moves ``active -> pending`` with a conditional write, so
        of two buyers racing for the same garment exactly one gets an order.

        Args:
            listing_id: Listing to buy
            buyer: Authenticated, active user (not the seller)
            shipping_address: Free-form address mapping
            notes: Message to the seller

        Returns:
            ServiceResult with the pending Order
        """
        with tracer.start_as_current_span("orders.place_order") as span:
            span.set_attribute("listing.id", str(listing_id))

            if not can_sell(buyer):
                return service_err(ErrorCodes.PERMISSION_DENIED, "An active account is required to buy")

            try:
                record = self.store.get(str(listing_id))
                if record is None or record.status == ListingStatus.DELETED:
                    orders_placed_total.labels(status="failed").inc()
                    return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {listing_id} not found")

                if is_owner(buyer, record.seller_id):
                    orders_placed_total.labels(status="failed").inc()
                    return service_err(ErrorCodes.CANNOT_BUY_OWN_LISTING, "You cannot buy your own listing")

                try:
                    lifecycle.transition(record.status, ListingStatus.PENDING)
                except InvalidTransitionError:
                    orders_placed_total.labels(status="failed").inc()
                    return service_err(ErrorCodes.LISTING_NOT_AVAILABLE, f"Listing is {record.status}")

                with transaction.atomic():
                    holder = Order.pending_for_listing(record.id)
                    if holder is not None:
                        orders_placed_total.labels(status="failed").inc()
                        return service_err(
                            ErrorCodes.LISTING_NOT_AVAILABLE, f"Listing is reserved by order {holder.order_number}"
                        )

                    reserved = self.store.set_status(record.id, ListingStatus.PENDING, expected=ListingStatus.ACTIVE)
                    if reserved is None:
                        orders_placed_total.labels(status="failed").inc()
                        return service_err(
                            ErrorCodes.LISTING_NOT_AVAILABLE, "Listing was just reserved by someone else"
                        )

                    try:
                        order = Order.objects.create(
                            listing_id=record.id,
                            listing_title=record.title,
                            buyer=buyer,
                            seller_id=record.seller_id,
                            amount=record.price,
                            shipping_address=shipping_address or {},
                            buyer_notes=notes or "",
                        )
                    except DatabaseError:
                        # Stores outside the database do not roll back with the transaction
                        self.store.set_status(record.id, ListingStatus.ACTIVE, expected=ListingStatus.PENDING)
                        raise

            except StoreUnavailableError as e:
                orders_placed_total.labels(status="failed").inc()
                return self._store_failure("place_order", e)

            orders_placed_total.labels(status="success").inc()
            order_value.observe(float(order.amount))
            span.set_attribute("order.number", order.order_number)
            self.logger.info(f"Order {order.order_number} placed by {buyer.pk} for listing {record.id}")
            return service_ok(order)

    @BaseService.log_performance
    @transaction.atomic
    def complete_order(self, order_id, user) -> ServiceResult[Order]:
        """
        Seller (or admin) confirms the sale: order completed, listing sold.
        """
        with tracer.start_as_current_span("orders.complete_order") as span:
            span.set_attribute("order.id", str(order_id))

            order = self._locked_order(order_id)
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

            if not (is_owner(user, order.seller_id) or is_admin(user)):
                return service_err(ErrorCodes.NOT_ORDER_PARTICIPANT, "Only the seller can complete this order")

            if order.status != Order.STATUS_PENDING:
                return service_err(ErrorCodes.INVALID_ORDER_STATE, f"Cannot complete order in status '{order.status}'")

            try:
                sold = self.store.set_status(order.listing_id, ListingStatus.SOLD, expected=ListingStatus.PENDING)
            except StoreUnavailableError as e:
                return self._store_failure("complete_order", e)

            if sold is None:
                return service_err(
                    ErrorCodes.INVALID_STATUS_TRANSITION,
                    f"Listing {order.listing_id} is no longer reserved for this order",
                )

            order.status = Order.STATUS_COMPLETED
            order.completed_at = timezone.now()
            order.save(update_fields=["status", "completed_at", "updated_at"])

            self.logger.info(f"Completed order {order.order_number} by user {user.pk}")
            return service_ok(order)

    @BaseService.log_performance
    @transaction.atomic
    def cancel_order(self, order_id, user, reason: str = "") -> ServiceResult[Order]:
        """
        Cancel a pending order and put the listing back on sale.

        Buyer, seller or an administrator may cancel. If the listing was
        removed in the meantime it stays removed.

        Example:
            >>> result = order_service.cancel_order(order_id, user=buyer, reason="Changed my mind")
        """
        with tracer.start_as_current_span("orders.cancel_order") as span:
            span.set_attribute("order.id", str(order_id))

            order = self._locked_order(order_id)
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

            if not self._is_participant(order, user):
                return service_err(ErrorCodes.NOT_ORDER_PARTICIPANT, "You are not part of this order")

            if order.status != Order.STATUS_PENDING:
                return service_err(ErrorCodes.INVALID_ORDER_STATE, f"Cannot cancel order in status '{order.status}'")

            try:
                released = self.store.set_status(order.listing_id, ListingStatus.ACTIVE, expected=ListingStatus.PENDING)
            except StoreUnavailableError as e:
                return self._store_failure("cancel_order", e)

            if released is None:
                self.logger.warning(
                    f"Listing {order.listing_id} was not pending when order {order.order_number} was cancelled"
                )

            order.status = Order.STATUS_CANCELLED
            order.cancellation_reason = reason or ""
            order.cancelled_by = user
            order.cancelled_at = timezone.now()
            order.save(update_fields=["status", "cancellation_reason", "cancelled_by", "cancelled_at", "updated_at"])

            self.logger.info(f"Cancelled order {order.order_number} by user {user.pk}: {reason}")
            return service_ok(order)

    @BaseService.log_performance
    def get_order(self, order_id, user) -> ServiceResult[Order]:
        try:
            pk = uuid.UUID(str(order_id))
        except ValueError:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

        order = Order.objects.select_related("buyer", "seller").filter(pk=pk).first()
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        if not self._is_participant(order, user):
            # Do not reveal other people's orders
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        return service_ok(order)

    @BaseService.log_performance
    def list_orders(self, user, role: Optional[str] = None) -> ServiceResult[List[Order]]:
        """
        Orders where ``user`` is buyer or seller, newest first.

        Args:
            role: "buying" or "selling" to narrow the list
        """
        if not is_authenticated(user):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Authentication required")

        if role == "buying":
            condition = Q(buyer=user)
        elif role == "selling":
            condition = Q(seller=user)
        elif role in (None, ""):
            condition = Q(buyer=user) | Q(seller=user)
        else:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown role '{role}'")

        orders = Order.objects.select_related("buyer", "seller").filter(condition).order_by("-created_at")
        return service_ok(list(orders))
