from decimal import Decimal, InvalidOperation

from rest_framework import serializers

from marketplace.catalog.domain.criteria import SortKey
from marketplace.catalog.domain.records import ListingCondition, ListingStatus


class ListingSerializer(serializers.Serializer):
    """Read-only representation of a ListingRecord."""

    id = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    original_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True, allow_null=True)
    discount_percentage = serializers.SerializerMethodField()
    condition = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True, allow_null=True)
    category_name = serializers.CharField(read_only=True, allow_null=True)
    seller_id = serializers.CharField(read_only=True)
    seller_name = serializers.CharField(read_only=True, allow_null=True)
    brand = serializers.CharField(read_only=True)
    size = serializers.CharField(read_only=True)
    color = serializers.CharField(read_only=True)
    material = serializers.CharField(read_only=True)
    image_urls = serializers.ListField(child=serializers.CharField(), read_only=True)
    status = serializers.CharField(read_only=True)
    view_count = serializers.IntegerField(read_only=True)
    is_featured = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def get_discount_percentage(self, obj) -> int:
        if not obj.original_price or obj.original_price <= obj.price:
            return 0
        return int(round((obj.original_price - obj.price) / obj.original_price * 100))


class ListingWriteSerializer(serializers.Serializer):
    """Fields a seller provides when creating or editing a listing."""

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    original_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    condition = serializers.CharField(required=False, default=ListingCondition.GOOD)
    category = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    size = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    color = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    material = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    image_urls = serializers.ListField(child=serializers.URLField(max_length=500), required=False, default=list)

    def validate_condition(self, value):
        condition = ListingCondition.normalize(value)
        if condition not in ListingCondition.ALL:
            raise serializers.ValidationError(
                f"Must be one of: {', '.join(choice for choice, _ in ListingCondition.CHOICES)}"
            )
        return condition

    def validate_category(self, value):
        return value or None


class ListingStatusSerializer(serializers.Serializer):
    status = serializers.CharField(help_text="Target status: " + ", ".join(c for c, _ in ListingStatus.CHOICES))
    reason = serializers.CharField(required=False, allow_blank=True, help_text="Moderation note for the log")


def coerce_number(value):
    """Turn numeric strings into Decimal; leave anything else for the engine to reject."""
    if value in (None, ""):
        return None
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return value


def coerce_integer(value):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return value


class CatalogQuerySerializer(serializers.Serializer):
    """
    Query-string parameters of catalog endpoints.

    Everything is accepted as text and coerced leniently; malformed numbers
    are passed through so the engine reports them as invalid filters.
    """

    category = serializers.CharField(required=False, allow_blank=True)
    condition = serializers.CharField(required=False, allow_blank=True)
    min_price = serializers.CharField(required=False, allow_blank=True)
    max_price = serializers.CharField(required=False, allow_blank=True)
    seller = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    status = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.CharField(required=False, allow_blank=True, default=SortKey.DEFAULT)
    limit = serializers.CharField(required=False, allow_blank=True)
    offset = serializers.CharField(required=False, allow_blank=True)

    FILTER_FIELDS = ("category", "condition", "seller", "search", "status")

    def to_query(self, max_limit=None, allow_status=False):
        """
        Returns:
            Tuple of (filters, sort, limit, offset) ready for CatalogService.list_listings
        """
        data = self.validated_data
        filters = {key: data[key] for key in self.FILTER_FIELDS if data.get(key) not in (None, "")}
        if not allow_status:
            filters.pop("status", None)
        for key in ("min_price", "max_price"):
            value = coerce_number(data.get(key))
            if value is not None:
                filters[key] = value

        limit = coerce_integer(data.get("limit"))
        if max_limit is not None and isinstance(limit, int) and limit > max_limit:
            limit = max_limit
        offset = coerce_integer(data.get("offset"))
        return filters, data.get("sort") or SortKey.DEFAULT, limit, offset
