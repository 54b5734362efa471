"""
Business logic services for authentication.
"""

from .moderation_service import UserModerationService
from .results import Result

__all__ = [
    "UserModerationService",
    "Result",
]
