"""Unit tests for the permission evaluator."""

import pytest

from api.tenancy import TenancyContext
from services.permissions import (
    PERMISSION_AREAS,
    category_area,
    default_permissions,
    full_permissions,
    has_permission,
)


def test_no_user_has_no_access():
    assert has_permission(None, "projects") is False
    assert has_permission(None, "projects", "write") is False


@pytest.mark.parametrize("permissions", [{}, None, "garbage", {"projects": "none"}])
def test_master_bypasses_permission_map(permissions):
    user = {"role": "master", "permissions": permissions}
    for area in PERMISSION_AREAS:
        assert has_permission(user, area, "read") is True
        assert has_permission(user, area, "write") is True


def test_missing_area_or_none_denies():
    user = {"role": "entry", "permissions": {"labor": "none"}}
    assert has_permission(user, "labor") is False
    assert has_permission(user, "material") is False


def test_read_grant_allows_only_read():
    user = {"role": "view", "permissions": {"invoices": "read"}}
    assert has_permission(user, "invoices", "read") is True
    assert has_permission(user, "invoices", "write") is False


def test_write_implies_read():
    user = {"role": "entry", "permissions": {area: "write" for area in PERMISSION_AREAS}}
    for area in PERMISSION_AREAS:
        assert has_permission(user, area, "write") is True
        assert has_permission(user, area, "read") is True


def test_unknown_level_denies():
    user = {"role": "entry", "permissions": {"projects": "write"}}
    assert has_permission(user, "projects", "admin") is False


def test_malformed_permissions_deny_non_master():
    assert has_permission({"role": "entry", "permissions": "write"}, "projects") is False
    assert has_permission({"role": "entry"}, "projects") is False


def test_works_with_tenancy_context():
    ctx = TenancyContext(tenant_id=None, user_id=None, role="entry", permissions={"labor": "write"})
    assert has_permission(ctx, "labor", "write") is True
    assert has_permission(ctx, "material", "read") is False


def test_category_area_maps_cap_leases():
    assert category_area("cap_leases") == "capLeases"
    assert category_area("labor") == "labor"


def test_default_permission_maps():
    assert set(full_permissions().values()) == {"write"}
    defaults = default_permissions()
    assert defaults["users"] == "none"
    assert defaults["projects"] == "read"
    assert set(defaults) == set(PERMISSION_AREAS)
