"""
Response Serializers for Marketplace API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

# ===== Common Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    detail = serializers.CharField(help_text="Human-readable error message")


# ===== Listing Response Serializers =====


class ListingPageResponseSerializer(serializers.Serializer):
    """Paginated listing response"""

    count = serializers.IntegerField(help_text="Total number of matching listings")
    limit = serializers.IntegerField(help_text="Page size used")
    offset = serializers.IntegerField(help_text="Number of listings skipped")
    has_next = serializers.BooleanField(help_text="Whether there is a next page")
    results = serializers.ListField(
        child=serializers.DictField(), help_text="List of listings (see ListingSerializer schema)"
    )
