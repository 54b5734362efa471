from .moderation_views import AdminUserActivateView, AdminUserDeactivateView, AdminUserListView
from .profile_views import PublicProfileDetailView

__all__ = [
    "AdminUserListView",
    "AdminUserActivateView",
    "AdminUserDeactivateView",
    "PublicProfileDetailView",
]
