import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from marketplace.catalog.domain.records import ListingCondition, ListingStatus

from .category import Category


class Listing(models.Model):
    CONDITION_CHOICES = ListingCondition.CHOICES
    STATUS_CHOICES = ListingStatus.CHOICES

    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Seller and Category
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="listings")
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="listings"
    )

    # Pricing; original_price is display only
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    original_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )

    # Garment details
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, default=ListingCondition.GOOD)
    brand = models.CharField(max_length=100, blank=True)
    size = models.CharField(max_length=20, blank=True)
    color = models.CharField(max_length=50, blank=True)
    material = models.CharField(max_length=100, blank=True)
    image_urls = models.JSONField(default=list, blank=True)

    # Status and Visibility
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ListingStatus.ACTIVE)
    is_featured = models.BooleanField(default=False)

    # Metrics
    view_count = models.PositiveIntegerField(default=0)

    # Timestamps; created_at stays writable so imported listings keep their dates
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["status", "-created_at"], name="listing_status_created_idx"),
            models.Index(fields=["status", "price"], name="listing_status_price_idx"),
            models.Index(fields=["status", "-view_count"], name="listing_status_views_idx"),
            models.Index(fields=["seller", "status"], name="listing_seller_status_idx"),
            models.Index(fields=["category", "status"], name="listing_category_status_idx"),
        ]

    def __str__(self):
        return self.title
