from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.api.views import (
    AdminUserActivateView,
    AdminUserDeactivateView,
    AdminUserListView,
    PublicProfileDetailView,
)

app_name = "authentication"

urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("users/<uuid:pk>/", PublicProfileDetailView.as_view(), name="public-profile"),
    # User moderation (admins only)
    path("admin/users/", AdminUserListView.as_view(), name="admin-user-list"),
    path("admin/users/<uuid:pk>/activate/", AdminUserActivateView.as_view(), name="admin-user-activate"),
    path("admin/users/<uuid:pk>/deactivate/", AdminUserDeactivateView.as_view(), name="admin-user-deactivate"),
]
