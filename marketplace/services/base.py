"""
Base classes and utilities for the service layer.

Services never raise for expected failures; they return a ServiceResult
carrying either a value or an error code from ErrorCodes. Views translate
the code into an HTTP status.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)

    Examples:
        >>> result = catalog_service.get_listing(listing_id, context)
        >>> if result.ok:
        ...     return Response(ListingSerializer(result.value).data)
        >>> return service_error_response(result)
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def to_dict(self) -> dict:
        """
        Error body for API responses.

        Returns:
            ``{"error": code, "detail": message}``
        """
        return {"error": self.error, "detail": self.error_detail}


def service_ok(value: T) -> ServiceResult[T]:
    """Create a successful ServiceResult."""
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "listing_not_found", "invalid_filter")
        error_detail: Human-readable error message

    Example:
        >>> return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {listing_id} not found")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class CatalogService(BaseService):
            def __init__(self, store):
                super().__init__()
                self.store = store

            @BaseService.log_performance
            def list_listings(self, filters):
                ...
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log duration and outcome of service methods.

        Failed ServiceResults are logged as warnings; exceptions are logged
        with traceback and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

                if isinstance(result, ServiceResult) and not result.ok:
                    self.logger.warning(f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms")
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Standard error codes used across marketplace services."""

    # Catalog errors
    INVALID_FILTER = "invalid_filter"
    LISTING_NOT_FOUND = "listing_not_found"
    CATEGORY_NOT_FOUND = "category_not_found"
    INVALID_STATUS_TRANSITION = "invalid_status_transition"

    # Order errors
    ORDER_NOT_FOUND = "order_not_found"
    LISTING_NOT_AVAILABLE = "listing_not_available"
    CANNOT_BUY_OWN_LISTING = "cannot_buy_own_listing"
    INVALID_ORDER_STATE = "invalid_order_state"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"
    NOT_LISTING_OWNER = "not_listing_owner"
    NOT_ORDER_PARTICIPANT = "not_order_participant"

    # Validation errors
    VALIDATION_ERROR = "validation_error"

    # Infrastructure errors
    STORE_UNAVAILABLE = "store_unavailable"
    INTERNAL_ERROR = "internal_error"
