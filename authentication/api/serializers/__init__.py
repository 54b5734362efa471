from .response_serializers import ErrorResponseSerializer, UserModerationResponseSerializer
from .user_serializers import PublicUserSerializer, UserListQuerySerializer, UserSerializer

__all__ = [
    "UserSerializer",
    "PublicUserSerializer",
    "UserListQuerySerializer",
    "ErrorResponseSerializer",
    "UserModerationResponseSerializer",
]
