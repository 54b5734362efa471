from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import (
    ErrorResponseSerializer,
    UserListQuerySerializer,
    UserModerationResponseSerializer,
    UserSerializer,
)
from authentication.domain.services import UserModerationService
from authentication.permissions import AdminRequired


class UserPagination(LimitOffsetPagination):
    default_limit = 50
    max_limit = 200


ERROR_STATUS = {
    "permission_denied": status.HTTP_403_FORBIDDEN,
    "cannot_moderate_self": status.HTTP_400_BAD_REQUEST,
    "user_not_found": status.HTTP_404_NOT_FOUND,
}


def get_moderation_service():
    return UserModerationService()


class AdminUserListView(APIView):
    """
    List accounts for moderation.
    """

    permission_classes = [AdminRequired]
    pagination_class = UserPagination

    @extend_schema(
        operation_id="admin_users_list",
        summary="List user accounts",
        description="Administrators only. Filter by free text (email, username, display name) and activity.",
        parameters=[
            OpenApiParameter("search", str, description="Substring of email, username or display name"),
            OpenApiParameter("is_active", bool, description="Only active or only inactive accounts"),
        ],
        responses={200: UserSerializer(many=True), 403: ErrorResponseSerializer},
        tags=["Admin - Users"],
    )
    def get(self, request):
        query = UserListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        users = get_moderation_service().list_users(
            search=query.validated_data.get("search") or None,
            is_active=query.validated_data.get("is_active"),
        )
        paginator = self.pagination_class()
        page = paginator.paginate_queryset(users, request, view=self)
        return paginator.get_paginated_response(UserSerializer(page, many=True).data)


class _UserActivationView(APIView):
    permission_classes = [AdminRequired]
    active = True

    def post(self, request, pk):
        result = get_moderation_service().set_active(request.user, pk, active=self.active)
        if not result.success:
            return Response(
                {"error": result.error, "detail": result.message},
                status=ERROR_STATUS.get(result.error, status.HTTP_400_BAD_REQUEST),
            )
        return Response({"message": result.message, **result.data}, status=status.HTTP_200_OK)


class AdminUserActivateView(_UserActivationView):
    active = True

    @extend_schema(
        operation_id="admin_users_activate",
        summary="Activate an account",
        request=None,
        responses={
            200: UserModerationResponseSerializer,
            403: ErrorResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown user"),
        },
        tags=["Admin - Users"],
    )
    def post(self, request, pk):
        return super().post(request, pk)


class AdminUserDeactivateView(_UserActivationView):
    active = False

    @extend_schema(
        operation_id="admin_users_deactivate",
        summary="Deactivate an account",
        description=(
            "Deactivated accounts can no longer sign in or create listings. "
            "Admins cannot deactivate themselves."
        ),
        request=None,
        responses={
            200: UserModerationResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Attempt to deactivate self"),
            403: ErrorResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown user"),
        },
        tags=["Admin - Users"],
    )
    def post(self, request, pk):
        return super().post(request, pk)
