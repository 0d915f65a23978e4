"""Role and permission evaluation shared by every route and service.

A user carries a role (``master``, ``entry`` or ``view``) and a permissions map
keyed by functional area with values ``none``, ``read`` or ``write``. The
``master`` role bypasses the map entirely.
"""

from collections.abc import Mapping
from typing import Any

ROLES = ("master", "entry", "view")
PERMISSION_LEVELS = ("none", "read", "write")
PERMISSION_AREAS = (
    "material",
    "labor",
    "equipment",
    "subcontractor",
    "others",
    "capLeases",
    "consumable",
    "invoices",
    "projects",
    "users",
)

# Cost categories whose permission area name differs from the category name
_CATEGORY_AREAS = {"cap_leases": "capLeases"}


def _field(user: Any, name: str) -> Any:
    if isinstance(user, Mapping):
        return user.get(name)
    return getattr(user, name, None)


def has_permission(user: Any, area: str, level: str = "read") -> bool:
    """
    Check whether a user may access a functional area at a given level.

    Args:
        user: User ORM object, tenancy context or mapping with ``role`` and
            ``permissions``; ``None`` for an anonymous caller
        area: Functional area, e.g. ``material`` or ``users``
        level: ``read`` or ``write``

    Returns:
        True if access is granted
    """
    if user is None:
        return False

    if _field(user, "role") == "master":
        return True

    permissions = _field(user, "permissions")
    if not isinstance(permissions, Mapping):
        return False

    granted = permissions.get(area)
    if not granted or granted == "none":
        return False

    if level == "read":
        return granted in ("read", "write")
    if level == "write":
        return granted == "write"

    return False


def category_area(category: str) -> str:
    """Map a cost category to the permission area that guards it."""
    return _CATEGORY_AREAS.get(category, category)


def full_permissions() -> dict[str, str]:
    """Permissions map granted to the founder of a tenant."""
    return {area: "write" for area in PERMISSION_AREAS}


def default_permissions() -> dict[str, str]:
    """Permissions map for a self-registered account."""
    permissions = {area: "read" for area in PERMISSION_AREAS}
    permissions["users"] = "none"
    return permissions
