"""
UserModerationService - account moderation by administrators.

Administrators can list accounts and switch them between active and
inactive. Deactivated accounts keep their listings and orders; they simply
can no longer authenticate or create listings.
"""

import logging
from typing import Optional

from django.db.models import Q, QuerySet

from authentication.infra.observability.metrics import user_moderation_total
from authentication.infra.observability.tracing import tracer
from authentication.models import CustomUser
from utils.rbac import is_admin

from .results import Result

logger = logging.getLogger(__name__)


class UserModerationService:
    """
    Account moderation operations.

    Permission checks live here rather than in views so that management
    commands and the admin API share the same rules.
    """

    def list_users(self, search: Optional[str] = None, is_active: Optional[bool] = None) -> QuerySet:
        queryset = CustomUser.objects.all().order_by("-date_joined")
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) | Q(username__icontains=search) | Q(display_name__icontains=search)
            )
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)
        return queryset

    def set_active(self, actor, user_id, active: bool) -> Result:
        """
        Activate or deactivate an account.

        Args:
            actor: Administrator performing the change
            user_id: Target account id
            active: Desired state

        Returns:
            Result with the updated user id in ``data``
        """
        action = "activate" if active else "deactivate"

        with tracer.start_as_current_span(f"users.{action}") as span:
            span.set_attribute("user.id", str(user_id))

            if not is_admin(actor):
                user_moderation_total.labels(action=action, status="failed").inc()
                return Result(success=False, message="Administrator role required.", error="permission_denied")

            if not active and str(actor.pk) == str(user_id):
                user_moderation_total.labels(action=action, status="failed").inc()
                return Result(
                    success=False,
                    message="Administrators cannot deactivate their own account.",
                    error="cannot_moderate_self",
                )

            target = CustomUser.objects.filter(pk=user_id).first()
            if target is None:
                user_moderation_total.labels(action=action, status="failed").inc()
                return Result(success=False, message="User not found.", error="user_not_found")

            if target.is_active != active:
                target.is_active = active
                target.save(update_fields=["is_active"])
                logger.info(f"User {target.pk} {action}d by {actor.pk}")

            user_moderation_total.labels(action=action, status="success").inc()
            return Result(
                success=True,
                message=f"User {action}d.",
                data={"user_id": str(target.pk), "is_active": target.is_active},
            )
