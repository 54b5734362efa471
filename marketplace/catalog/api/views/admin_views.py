from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import service_error_response, validation_error_response
from marketplace.api.serializers import ErrorResponseSerializer, ListingPageResponseSerializer
from marketplace.catalog.api.serializers import ListingSerializer, ListingStatusSerializer
from marketplace.catalog.api.views.listing_views import CATALOG_QUERY_PARAMETERS, page_response, parse_catalog_query
from marketplace.catalog.domain.services.catalog_service import build_context
from marketplace.permissions import IsAdminUser
from marketplace.services import CatalogService


class AdminListingViewSet(viewsets.ViewSet):
    """
    Moderation endpoints. Administrators see listings in every status and
    may filter on ``status``; reading here never records a view.
    """

    permission_classes = [IsAuthenticated, IsAdminUser]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    @extend_schema(
        operation_id="admin_listings_list",
        summary="Browse all listings (admin)",
        parameters=CATALOG_QUERY_PARAMETERS
        + [OpenApiParameter(name="status", type=str, description="active, pending, sold or deleted")],
        responses={
            200: OpenApiResponse(response=ListingPageResponseSerializer, description="Listings retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter value"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Administrator role required"),
        },
        tags=["Marketplace - Admin"],
    )
    def list(self, request):
        query, error = parse_catalog_query(request, allow_status=True)
        if error:
            return error
        filters, sort, limit, offset = query

        result = self.get_service().list_listings(
            filters, sort=sort, limit=limit, offset=offset, context=build_context(request.user, admin_view=True)
        )
        if not result.ok:
            return service_error_response(result)
        return page_response(result.value)

    @extend_schema(
        operation_id="admin_listings_retrieve",
        summary="Get any listing (admin)",
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Listing retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
        },
        tags=["Marketplace - Admin"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_listing(pk, build_context(request.user, admin_view=True))
        if not result.ok:
            return service_error_response(result)
        return Response(ListingSerializer(result.value).data)

    @extend_schema(
        operation_id="admin_listings_status",
        summary="Change listing status (admin)",
        description="Moves a listing through its lifecycle, e.g. takes a listing down or restores it.",
        request=ListingStatusSerializer,
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Status changed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown status"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Transition not allowed"),
        },
        tags=["Marketplace - Admin"],
    )
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        serializer = ListingStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().change_status(pk, serializer.validated_data["status"], request.user)
        if not result.ok:
            return service_error_response(result)
        return Response(ListingSerializer(result.value).data)
