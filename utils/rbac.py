# Canonical role names
ROLE_USER = "user"
ROLE_ADMIN = "admin"


def is_authenticated(user) -> bool:
    return bool(user is not None and getattr(user, "is_authenticated", False))


def is_admin(user) -> bool:
    """Consistent admin check across the codebase.

    Superusers are always administrators; everyone else needs the admin role.
    """
    if not is_authenticated(user):
        return False
    return bool(getattr(user, "is_superuser", False) or getattr(user, "role", None) == ROLE_ADMIN)


def can_sell(user) -> bool:
    """Any signed-in, active account may list garments."""
    return is_authenticated(user) and bool(getattr(user, "is_active", False))


def is_owner(user, seller_id) -> bool:
    if not is_authenticated(user) or seller_id is None:
        return False
    return str(getattr(user, "pk", None)) == str(seller_id)
