"""Unit tests for the role hierarchy helpers."""

import pytest

from lockerroom.core.models.domain.roles import (
    ROLE_HIERARCHY,
    Role,
    has_role_permission,
    is_scout_role,
    is_staff_role,
    is_system_admin,
    role_display_name,
    role_level,
)


class TestRoleHierarchy:
    def test_system_admin_is_highest(self):
        assert ROLE_HIERARCHY[Role.system_admin] == max(ROLE_HIERARCHY.values())

    def test_viewer_is_lowest(self):
        assert ROLE_HIERARCHY[Role.viewer] == min(ROLE_HIERARCHY.values())

    @pytest.mark.parametrize(
        "user_role,required,expected",
        [
            ("system_admin", "student", True),
            ("scout_admin", "xen_scout", True),
            ("xen_scout", "scout_admin", False),
            ("school_admin", "school_admin", True),
            ("student", "school_admin", False),
            ("finance", "coach", True),
            ("viewer", "student", False),
        ],
    )
    def test_has_role_permission(self, user_role, required, expected):
        assert has_role_permission(user_role, required) is expected

    def test_unknown_role_has_no_permission(self):
        assert has_role_permission("janitor", "viewer") is False
        assert role_level("janitor") == 0


class TestRolePredicates:
    def test_is_system_admin(self):
        assert is_system_admin("system_admin")
        assert is_system_admin(Role.system_admin)
        assert not is_system_admin("scout_admin")

    def test_is_scout_role(self):
        assert is_scout_role("xen_scout")
        assert is_scout_role("scout_admin")
        assert not is_scout_role("student")
        assert not is_scout_role("nonsense")

    def test_is_staff_role_excludes_schools_and_public(self):
        assert is_staff_role("analyst")
        assert not is_staff_role("school_admin")
        assert not is_staff_role("student")
        assert not is_staff_role("viewer")


class TestRoleDisplayName:
    @pytest.mark.parametrize(
        "role,expected",
        [
            ("school_admin", "Academy Admin"),
            ("student", "Player"),
            ("xen_scout", "XEN Scout"),
            ("scout_admin", "Scout Admin"),
            ("system_admin", "System Admin"),
            ("viewer", "Viewer"),
        ],
    )
    def test_display_names(self, role, expected):
        assert role_display_name(role) == expected

    def test_unknown_role_is_title_cased(self):
        assert role_display_name("head_coach") == "Head Coach"
