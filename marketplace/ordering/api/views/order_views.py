from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import service_error_response, validation_error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.ordering.api.serializers import (
    CancelOrderRequestSerializer,
    CreateOrderRequestSerializer,
    OrderSerializer,
)
from marketplace.services import OrderService


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OrderService:
        return container.order_service()

    @extend_schema(
        operation_id="orders_list",
        summary="List user's orders",
        description="""
        **What it receives:**
        - Authentication token
        - Optional role filter: `buying` or `selling`

        **What it returns:**
        - Orders where the user is buyer or seller, newest first
        """,
        parameters=[
            OpenApiParameter(name="role", type=str, description="buying or selling", enum=["buying", "selling"]),
        ],
        responses={
            200: OpenApiResponse(response=OrderSerializer(many=True), description="Orders retrieved successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown role"),
        },
        tags=["Marketplace - Orders"],
    )
    def list(self, request):
        result = self.get_service().list_orders(request.user, request.query_params.get("role"))
        if not result.ok:
            return service_error_response(result)
        return Response(OrderSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        description="Only the buyer, the seller and administrators can see an order.",
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(pk, request.user)
        if not result.ok:
            return service_error_response(result)
        return Response(OrderSerializer(result.value).data)

    @extend_schema(
        operation_id="orders_create",
        summary="Buy a listing",
        description="""
        **What it receives:**
        - `listing_id` of an active listing you do not own
        - Optional shipping address and notes

        **What it returns:**
        - The pending order; the listing is reserved until the order completes or is cancelled
        """,
        request=CreateOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order placed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid request or own listing"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Listing no longer available"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().place_order(
            data["listing_id"], request.user, shipping_address=data["shipping_address"], notes=data["notes"]
        )
        if not result.ok:
            return service_error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_complete",
        summary="Complete an order",
        description="Seller confirms the sale. The listing becomes sold.",
        request=None,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order completed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Order is not pending"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        result = self.get_service().complete_order(pk, request.user)
        if not result.ok:
            return service_error_response(result)
        return Response(OrderSerializer(result.value).data)

    @extend_schema(
        operation_id="orders_cancel",
        summary="Cancel an order",
        description="Buyer or seller cancels a pending order. The listing goes back on sale.",
        request=CancelOrderRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order cancelled"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not part of this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Order is not pending"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        serializer = CancelOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().cancel_order(pk, request.user, reason=serializer.validated_data["reason"])
        if not result.ok:
            return service_error_response(result)
        return Response(OrderSerializer(result.value).data)
