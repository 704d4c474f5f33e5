"""
Actor roles.

Identity is owned by Django auth; this module only reads the fact of which
role the current user holds. Nothing here authenticates anybody.
"""
ADMIN = 'admin'
STYLIST = 'stylist'
CUSTOMER = 'customer'
GUEST = 'guest'

STAFF_ROLES = (ADMIN, STYLIST)


def actor_role(user) -> str:
    if user is None or not user.is_authenticated:
        return GUEST
    if user.is_staff or user.is_superuser:
        return ADMIN
    if hasattr(user, 'stylist_profile'):
        return STYLIST
    return CUSTOMER


def actor_label(user) -> str:
    """Name written to audit logs as `changed_by`."""
    if user is None or not user.is_authenticated:
        return 'guest'
    return user.get_username()
