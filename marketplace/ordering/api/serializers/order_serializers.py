from rest_framework import serializers

from authentication.api.serializers import PublicUserSerializer
from marketplace.ordering.domain.models.order import Order


class OrderSerializer(serializers.ModelSerializer):
    buyer = PublicUserSerializer(read_only=True)
    seller = PublicUserSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "listing_id",
            "listing_title",
            "buyer",
            "seller",
            "status",
            "amount",
            "shipping_address",
            "buyer_notes",
            "cancellation_reason",
            "created_at",
            "updated_at",
            "completed_at",
            "cancelled_at",
        ]
        read_only_fields = fields


class CreateOrderRequestSerializer(serializers.Serializer):
    listing_id = serializers.UUIDField(help_text="Listing to buy")
    shipping_address = serializers.DictField(
        child=serializers.CharField(allow_blank=True), required=False, default=dict, help_text="Delivery address"
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="", help_text="Message to the seller")


class CancelOrderRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
