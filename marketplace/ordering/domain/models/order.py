import uuid

from django.conf import settings
from django.db import models
from django.utils.crypto import get_random_string

ORDER_NUMBER_LENGTH = 10


def generate_order_number() -> str:
    return get_random_string(ORDER_NUMBER_LENGTH).upper()


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=16, unique=True, default=generate_order_number, editable=False)

    # The listing is referenced by id so orders work with any listing store;
    # title is a snapshot taken when the order was placed.
    listing_id = models.UUIDField(db_index=True)
    listing_title = models.CharField(max_length=200)

    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="purchases")
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sales")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    shipping_address = models.JSONField(default=dict, blank=True)
    buyer_notes = models.TextField(blank=True)

    cancellation_reason = models.TextField(blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="cancelled_orders"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["buyer", "-created_at"], name="order_buyer_created_idx"),
            models.Index(fields=["seller", "-created_at"], name="order_seller_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.order_number}"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    @classmethod
    def pending_for_listing(cls, listing_id):
        """The pending order holding the reservation on ``listing_id``, if any."""
        try:
            pk = uuid.UUID(str(listing_id))
        except ValueError:
            return None
        return cls.objects.filter(listing_id=pk, status=cls.STATUS_PENDING).first()
