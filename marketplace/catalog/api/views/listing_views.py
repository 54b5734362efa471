import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import service_error_response, validation_error_response
from marketplace.api.serializers import ErrorResponseSerializer, ListingPageResponseSerializer
from marketplace.catalog.api.serializers import CatalogQuerySerializer, ListingSerializer, ListingWriteSerializer
from marketplace.catalog.domain.criteria import SortKey
from marketplace.catalog.domain.engine import CatalogPage
from marketplace.catalog.domain.services.catalog_service import build_context
from marketplace.permissions import CanSell
from marketplace.services import CatalogService

logger = logging.getLogger(__name__)

CATALOG_QUERY_PARAMETERS = [
    OpenApiParameter(name="category", type=str, description="Category slug or name"),
    OpenApiParameter(name="condition", type=str, description="new, like_new, good, fair or poor"),
    OpenApiParameter(name="min_price", type=str, description="Minimum price (inclusive)"),
    OpenApiParameter(name="max_price", type=str, description="Maximum price (inclusive)"),
    OpenApiParameter(name="seller", type=str, description="Seller ID"),
    OpenApiParameter(name="search", type=str, description="Case-insensitive text in title, description or brand"),
    OpenApiParameter(
        name="sort",
        type=str,
        description="newest (default), price_low, price_high or popular",
        enum=[choice for choice, _ in SortKey.CHOICES],
    ),
    OpenApiParameter(name="limit", type=int, description="Page size (default: 20)"),
    OpenApiParameter(name="offset", type=int, description="Listings to skip (default: 0)"),
]


def page_response(page: CatalogPage) -> Response:
    return Response(
        {
            "count": page.total,
            "limit": page.limit,
            "offset": page.offset,
            "has_next": page.has_next,
            "results": ListingSerializer(list(page), many=True).data,
        },
        status=status.HTTP_200_OK,
    )


def parse_catalog_query(request, allow_status=False):
    """
    Returns:
        (filters, sort, limit, offset), or a 400 Response when the query string is malformed
    """
    serializer = CatalogQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return None, validation_error_response(serializer.errors)
    max_limit = getattr(settings, "CATALOG_MAX_PAGE_SIZE", 100)
    return serializer.to_query(max_limit=max_limit, allow_status=allow_status), None


class ListingViewSet(viewsets.ViewSet):
    """
    ViewSet for listings using the Service Layer.

    Browsing is public and only shows active listings. Sellers manage their
    own listings; deleting is a soft delete.
    """

    permission_classes = [AllowAny]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), CanSell()]
        elif self.action in ["partial_update", "destroy", "mine"]:
            return [IsAuthenticated()]
        return super().get_permissions()

    @extend_schema(
        operation_id="listings_list",
        summary="Browse listings",
        description="""
        **What it receives:**
        - Optional filters: category, condition, min_price, max_price, seller, search
        - Optional sort and limit/offset pagination

        **What it returns:**
        - Active listings matching every filter, in a deterministic order
        - Total match count and whether another page exists
        """,
        parameters=CATALOG_QUERY_PARAMETERS,
        responses={
            200: OpenApiResponse(response=ListingPageResponseSerializer, description="Listings retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter value"),
            503: OpenApiResponse(response=ErrorResponseSerializer, description="Listing store unavailable"),
        },
        tags=["Marketplace - Listings"],
    )
    def list(self, request):
        query, error = parse_catalog_query(request)
        if error:
            return error
        filters, sort, limit, offset = query

        result = self.get_service().list_listings(
            filters, sort=sort, limit=limit, offset=offset, context=build_context(request.user)
        )
        if not result.ok:
            return service_error_response(result)
        return page_response(result.value)

    @extend_schema(
        operation_id="listings_retrieve",
        summary="Get listing details",
        description="Returns one listing and records the view. Removed listings are not found.",
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Listing retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
        },
        tags=["Marketplace - Listings"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_listing(pk, build_context(request.user, track_view=True))
        if not result.ok:
            return service_error_response(result)
        return Response(ListingSerializer(result.value).data)

    @extend_schema(
        operation_id="listings_create",
        summary="Create a listing",
        request=ListingWriteSerializer,
        responses={
            201: OpenApiResponse(response=ListingSerializer, description="Listing created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Account cannot sell"),
        },
        tags=["Marketplace - Listings"],
    )
    def create(self, request):
        serializer = ListingWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().create_listing(serializer.validated_data, request.user)
        if not result.ok:
            return service_error_response(result)
        return Response(ListingSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="listings_partial_update",
        summary="Edit a listing",
        description="Seller or administrator only. Status and view count cannot be edited here.",
        request=ListingWriteSerializer,
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Listing updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the listing owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
        },
        tags=["Marketplace - Listings"],
    )
    def partial_update(self, request, pk=None):
        serializer = ListingWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        # Partial validation still fills defaults; only pass what the client sent
        changes = {key: value for key, value in serializer.validated_data.items() if key in request.data}
        locked = sorted(set(request.data) - set(serializer.fields))
        if locked:
            changes.update({key: request.data[key] for key in locked})

        result = self.get_service().update_listing(pk, changes, request.user)
        if not result.ok:
            return service_error_response(result)
        return Response(ListingSerializer(result.value).data)

    @extend_schema(
        operation_id="listings_destroy",
        summary="Remove a listing",
        description="Soft delete. The listing disappears from the catalog but orders keep referencing it.",
        responses={
            204: OpenApiResponse(description="Listing removed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the listing owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Listing cannot be removed"),
        },
        tags=["Marketplace - Listings"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_listing(pk, request.user)
        if not result.ok:
            return service_error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="listings_mine",
        summary="My listings",
        description="The caller's own listings in every status. Accepts the same filters plus `status`.",
        parameters=CATALOG_QUERY_PARAMETERS + [OpenApiParameter(name="status", type=str, description="Listing status")],
        responses={
            200: OpenApiResponse(response=ListingPageResponseSerializer, description="Listings retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter value"),
        },
        tags=["Marketplace - Listings"],
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        query, error = parse_catalog_query(request, allow_status=True)
        if error:
            return error
        filters, sort, limit, offset = query

        result = self.get_service().list_seller_listings(request.user, filters, sort=sort, limit=limit, offset=offset)
        if not result.ok:
            return service_error_response(result)
        return page_response(result.value)
