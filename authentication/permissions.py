from rest_framework.permissions import BasePermission

from utils.rbac import is_admin


class AdminRequired(BasePermission):
    """Only administrators (superusers or role ``admin``) may pass."""

    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        return is_admin(getattr(request, "user", None))

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)
