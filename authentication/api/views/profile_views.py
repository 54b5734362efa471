from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response

from authentication.api.serializers import ErrorResponseSerializer, PublicUserSerializer
from authentication.domain.models import CustomUser


class PublicProfileDetailView(generics.RetrieveAPIView):
    """
    Get the public profile of a user.
    """

    queryset = CustomUser.objects.all()
    serializer_class = PublicUserSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "pk"

    @extend_schema(
        operation_id="profile_public_view",
        summary="View public user profile",
        description="""
        Public seller card shown next to listings.

        **Returns:**
        - Display name
        - Seller rating and number of reviews
        """,
        responses={
            200: OpenApiResponse(response=PublicUserSerializer, description="User profile retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Profile"],
    )
    def get(self, request, *args, **kwargs):
        user = self.get_queryset().filter(pk=kwargs[self.lookup_field]).first()
        if user is None:
            return Response({"error": "user_not_found", "detail": "User not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(self.get_serializer(user).data)
