from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCodes, ServiceResult

ERROR_STATUS = {
    ErrorCodes.INVALID_FILTER: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.CATEGORY_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.CANNOT_BUY_OWN_LISTING: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_LISTING_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_ORDER_PARTICIPANT: status.HTTP_403_FORBIDDEN,
    ErrorCodes.LISTING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.INVALID_STATUS_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCodes.LISTING_NOT_AVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCodes.INVALID_ORDER_STATE: status.HTTP_409_CONFLICT,
    ErrorCodes.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def service_error_response(result: ServiceResult) -> Response:
    """Map a failed ServiceResult to its HTTP response."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result.to_dict(), status=http_status)


def validation_error_response(errors) -> Response:
    return Response(
        {"error": ErrorCodes.VALIDATION_ERROR, "detail": "Invalid request data", "fields": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )
