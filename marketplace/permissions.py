from rest_framework import permissions

from utils.rbac import can_sell, is_admin


class CanSell(permissions.BasePermission):
    """
    Permission to check if user may publish listings.
    Any authenticated, active account can sell.
    """

    def has_permission(self, request, view):
        return can_sell(request.user)


class IsAdminUser(permissions.BasePermission):
    """
    Permission to check if user has admin role
    Only allows admins to access admin-only endpoints
    """

    def has_permission(self, request, view):
        # User must be authenticated
        if not request.user.is_authenticated:
            return False

        # Check if user is admin
        return is_admin(request.user)
