from .response_serializers import ErrorResponseSerializer, ListingPageResponseSerializer

__all__ = ["ErrorResponseSerializer", "ListingPageResponseSerializer"]
