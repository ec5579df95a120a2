import pytest

from tms_rbac.models.enums import Role
from tms_rbac.rbac.hierarchy import DEFAULT_ROLE_ORDER, RoleHierarchy

def test_subordinates_follow_the_order():
    h = RoleHierarchy(DEFAULT_ROLE_ORDER)

    assert list(h.subordinates_of(Role.OWNER)) == [Role.ADMIN, Role.VIEWER]
    assert list(h.subordinates_of(Role.ADMIN)) == [Role.VIEWER]
    assert list(h.subordinates_of(Role.VIEWER)) == []

def test_outranks_is_strict():
    h = RoleHierarchy(DEFAULT_ROLE_ORDER)

    assert h.outranks(Role.OWNER, Role.VIEWER)
    assert h.outranks(Role.ADMIN, Role.VIEWER)
    assert not h.outranks(Role.ADMIN, Role.ADMIN)
    assert not h.outranks(Role.VIEWER, Role.OWNER)

def test_order_is_injected_not_hardcoded():
    # an inverted order is odd but legal; the table follows it
    h = RoleHierarchy([Role.VIEWER, Role.ADMIN, Role.OWNER])
    assert list(h.subordinates_of(Role.VIEWER)) == [Role.ADMIN, Role.OWNER]
    assert list(h.subordinates_of(Role.OWNER)) == []

def test_accepts_plain_strings():
    h = RoleHierarchy(["OWNER", "ADMIN", "VIEWER"])
    assert h.order == DEFAULT_ROLE_ORDER

def test_rejects_duplicates():
    with pytest.raises(ValueError, match="more than once"):
        RoleHierarchy([Role.OWNER, Role.ADMIN, Role.ADMIN, Role.VIEWER])

def test_rejects_missing_roles():
    with pytest.raises(ValueError, match="missing"):
        RoleHierarchy([Role.OWNER, Role.ADMIN])

def test_rejects_unknown_role_names():
    with pytest.raises(ValueError):
        RoleHierarchy(["OWNER", "ADMIN", "MEMBER"])
