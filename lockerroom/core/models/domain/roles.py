"""
Platform roles and the permission hierarchy.

Roles are ordered by an integer level; a user satisfies a required role
when their level is at least the required level. ``system_admin`` sits at
the top and therefore satisfies every check.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Role(str, Enum):
    """Account roles."""

    system_admin = "system_admin"
    moderator = "moderator"
    scout_admin = "scout_admin"
    xen_scout = "xen_scout"
    finance = "finance"
    support = "support"
    coach = "coach"
    analyst = "analyst"
    school_admin = "school_admin"
    student = "student"
    viewer = "viewer"


ROLE_HIERARCHY: dict[Role, int] = {
    Role.system_admin: 10,
    Role.moderator: 8,
    Role.scout_admin: 7,
    Role.xen_scout: 6,
    Role.finance: 5,
    Role.support: 5,
    Role.coach: 5,
    Role.analyst: 5,
    Role.school_admin: 4,
    Role.student: 2,
    Role.viewer: 1,
}

SCOUT_ROLES = frozenset({Role.xen_scout, Role.scout_admin})

# Roles that see staff-scoped announcements
STAFF_ROLES = frozenset(
    {
        Role.system_admin,
        Role.moderator,
        Role.scout_admin,
        Role.xen_scout,
        Role.finance,
        Role.support,
        Role.coach,
        Role.analyst,
    }
)

_DISPLAY_NAMES = {
    Role.school_admin: "Academy Admin",
    Role.student: "Player",
    Role.xen_scout: "XEN Scout",
}


RoleLike = Union[Role, str]


def _coerce(role: RoleLike) -> Role | None:
    try:
        return Role(role)
    except ValueError:
        return None


def role_level(role: RoleLike) -> int:
    """Level of a role in the hierarchy; unknown roles rank at 0."""
    coerced = _coerce(role)
    return ROLE_HIERARCHY[coerced] if coerced is not None else 0


def has_role_permission(user_role: RoleLike, required_role: RoleLike) -> bool:
    """
    Check whether ``user_role`` ranks at least as high as ``required_role``.

    Args:
        user_role: The role held by the caller.
        required_role: The minimum role required.

    Returns:
        True when the caller's level is greater than or equal to the required level.
    """
    if _coerce(user_role) is None:
        return False
    return role_level(user_role) >= role_level(required_role)


def is_system_admin(role: RoleLike) -> bool:
    return _coerce(role) is Role.system_admin


def is_scout_role(role: RoleLike) -> bool:
    return _coerce(role) in SCOUT_ROLES


def is_staff_role(role: RoleLike) -> bool:
    return _coerce(role) in STAFF_ROLES


def role_display_name(role: RoleLike) -> str:
    """Human readable name for a role, as shown in the client."""
    coerced = _coerce(role)
    if coerced in _DISPLAY_NAMES:
        return _DISPLAY_NAMES[coerced]
    value = coerced.value if coerced is not None else str(role)
    return value.replace("_", " ").title()
