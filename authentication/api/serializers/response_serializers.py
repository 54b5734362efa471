"""
Response Serializers for API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    """Generic error response"""

    error = serializers.CharField(help_text="Error code")
    detail = serializers.CharField(help_text="Human readable message", required=False)


class UserModerationResponseSerializer(serializers.Serializer):
    """Response after activating or deactivating an account"""

    message = serializers.CharField()
    user_id = serializers.UUIDField()
    is_active = serializers.BooleanField()
