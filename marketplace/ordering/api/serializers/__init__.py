from .order_serializers import CancelOrderRequestSerializer, CreateOrderRequestSerializer, OrderSerializer

__all__ = ["OrderSerializer", "CreateOrderRequestSerializer", "CancelOrderRequestSerializer"]
