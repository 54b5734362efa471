import logging

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import service_error_response
from marketplace.api.serializers import ListingPageResponseSerializer
from marketplace.catalog.api.serializers import CategorySerializer
from marketplace.catalog.api.views.listing_views import CATALOG_QUERY_PARAMETERS, page_response, parse_catalog_query
from marketplace.catalog.domain.services.catalog_service import build_context
from marketplace.services import CatalogService, ErrorCodes


logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List all categories",
        description="Retrieve a list of all active listing categories.",
        responses={200: CategorySerializer(many=True)},
        tags=["Marketplace - Categories"],
    ),
    retrieve=extend_schema(
        summary="Get category details",
        description="Retrieve details of a specific category by slug.",
        responses={200: CategorySerializer},
        tags=["Marketplace - Categories"],
    ),
)
class CategoryViewSet(viewsets.ViewSet):
    """
    ViewSet for categories - read-only operations using Service Layer
    """

    permission_classes = [AllowAny]
    lookup_field = "slug"

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    def list(self, request):
        result = self.get_service().list_categories()
        if not result.ok:
            return service_error_response(result)
        return Response(CategorySerializer(result.value, many=True).data)

    def retrieve(self, request, slug=None):
        result = self.get_service().get_category(slug)
        if not result.ok:
            if result.error == ErrorCodes.CATEGORY_NOT_FOUND:
                return Response(result.to_dict(), status=status.HTTP_404_NOT_FOUND)
            return service_error_response(result)
        return Response(CategorySerializer(result.value).data)

    @extend_schema(
        summary="Get listings from category",
        description="Browse active listings within the specified category.",
        parameters=CATALOG_QUERY_PARAMETERS,
        responses={200: ListingPageResponseSerializer},
        tags=["Marketplace - Categories"],
    )
    @action(detail=True, methods=["get"])
    def listings(self, request, slug=None):
        """Catalog query with the category filter fixed to this category"""
        cat_result = self.get_service().get_category(slug)
        if not cat_result.ok:
            if cat_result.error == ErrorCodes.CATEGORY_NOT_FOUND:
                return Response(cat_result.to_dict(), status=status.HTTP_404_NOT_FOUND)
            return service_error_response(cat_result)

        query, error = parse_catalog_query(request)
        if error:
            return error
        filters, sort, limit, offset = query
        filters["category"] = cat_result.value.slug

        result = self.get_service().list_listings(
            filters, sort=sort, limit=limit, offset=offset, context=build_context(request.user)
        )
        if not result.ok:
            return service_error_response(result)
        return page_response(result.value)
