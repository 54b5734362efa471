from rest_framework import serializers

from authentication.domain.models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    """Account as seen by administrators."""

    class Meta:
        model = CustomUser
        fields = (
            "id",
            "username",
            "email",
            "display_name",
            "role",
            "rating",
            "review_count",
            "is_active",
            "date_joined",
        )
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """Seller card shown next to a listing."""

    display_name = serializers.CharField(source="get_display_name", read_only=True)

    class Meta:
        model = CustomUser
        fields = ("id", "display_name", "rating", "review_count")
        read_only_fields = fields


class UserListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
