import pytest
from sqlalchemy.orm import Session

from conftest import add_member, make_org, make_user
from tms_rbac.errors import OrganizationCycleError
from tms_rbac.models.enums import Role
from tms_rbac.orgs.service import OrganizationService

@pytest.fixture()
def tree(db_session: Session):
    # acme -> eng -> platform, acme -> sales, other (root)
    acme = make_org(db_session, "acme")
    eng = make_org(db_session, "eng", parent=acme)
    sales = make_org(db_session, "sales", parent=acme)
    platform = make_org(db_session, "platform", parent=eng)
    other = make_org(db_session, "other")
    return {"acme": acme, "eng": eng, "sales": sales, "platform": platform, "other": other}

def ids(orgs) -> set[int]:
    return {o.id for o in orgs}

def test_find_all_and_by_id(db_session: Session, tree):
    orgs = OrganizationService(db_session)

    assert ids(orgs.find_all()) == ids(tree.values())

    eng = orgs.find_by_id(tree["eng"].id)
    assert eng.name == "eng"
    assert eng.parent is not None and eng.parent.name == "acme"
    assert orgs.find_by_id(9999) is None

def test_top_level_is_exactly_the_roots(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    assert ids(orgs.find_top_level()) == {tree["acme"].id, tree["other"].id}

def test_children_are_one_level_deep(db_session: Session, tree):
    orgs = OrganizationService(db_session)

    assert ids(orgs.find_children(tree["acme"].id)) == {tree["eng"].id, tree["sales"].id}
    assert ids(orgs.find_by_parent_id(tree["eng"].id)) == {tree["platform"].id}
    assert orgs.find_children(tree["platform"].id) == []
    assert orgs.find_children(9999) == []

def test_ancestors_nearest_first(db_session: Session, tree):
    orgs = OrganizationService(db_session)

    assert [o.name for o in orgs.find_ancestors(tree["platform"].id)] == ["eng", "acme"]
    assert orgs.find_ancestors(tree["acme"].id) == []
    assert orgs.find_ancestors(9999) == []

def test_descendants_cover_every_level(db_session: Session, tree):
    orgs = OrganizationService(db_session)

    assert [o.name for o in orgs.find_descendants(tree["acme"].id)] == ["eng", "sales", "platform"]
    assert orgs.find_descendants(tree["other"].id) == []

def test_find_by_user(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    alice = make_user(db_session, "alice@example.com")
    bob = make_user(db_session, "bob@example.com")
    add_member(db_session, alice, tree["acme"], Role.ADMIN)
    add_member(db_session, alice, tree["platform"], Role.VIEWER)

    found = orgs.find_by_user(alice.id)
    assert [o.name for o in found] == ["acme", "platform"]
    platform = found[1]
    assert platform.parent.name == "eng"

    assert orgs.find_by_user(bob.id) == []

def test_find_all_with_users_keeps_empty_orgs(db_session: Session):
    orgs = OrganizationService(db_session)
    a = make_org(db_session, "A")
    b = make_org(db_session, "B", parent=a)
    owner = make_user(db_session, "owner@example.com")
    viewer = make_user(db_session, "viewer@example.com")
    add_member(db_session, owner, a, Role.OWNER)
    add_member(db_session, viewer, a, Role.VIEWER)

    rows = {o.id: o for o in orgs.find_all_with_users()}

    assert set(rows) == {a.id, b.id}
    assert rows[b.id].users == []
    assert rows[b.id].parent_org_id == a.id
    assert [(m.email, m.role) for m in rows[a.id].users] == [
        ("owner@example.com", Role.OWNER),
        ("viewer@example.com", Role.VIEWER),
    ]

def test_create_under_unknown_parent_is_absent(db_session: Session):
    orgs = OrganizationService(db_session)
    assert orgs.create("orphan", parent_org_id=9999) is None

def test_create_child(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    ops = orgs.create("ops", parent_org_id=tree["eng"].id)
    db_session.commit()

    assert ops.parent_org_id == tree["eng"].id
    assert [o.name for o in orgs.find_ancestors(ops.id)] == ["eng", "acme"]

def test_set_parent_moves_subtree(db_session: Session, tree):
    orgs = OrganizationService(db_session)

    moved = orgs.set_parent(tree["eng"].id, tree["other"].id)
    assert moved.parent_org_id == tree["other"].id
    assert [o.name for o in orgs.find_ancestors(tree["platform"].id)] == ["eng", "other"]

    orgs.set_parent(tree["eng"].id, None)
    assert tree["eng"].id in ids(orgs.find_top_level())

def test_set_parent_rejects_self(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    with pytest.raises(OrganizationCycleError):
        orgs.set_parent(tree["acme"].id, tree["acme"].id)

def test_set_parent_rejects_descendant(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    with pytest.raises(OrganizationCycleError):
        orgs.set_parent(tree["acme"].id, tree["platform"].id)
    # nothing changed
    assert orgs.find_by_id(tree["acme"].id).parent_org_id is None

def test_set_parent_unknown_ids(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    assert orgs.set_parent(9999, tree["acme"].id) is None
    assert orgs.set_parent(tree["eng"].id, 9999) is None

def test_ancestor_walk_detects_stored_cycle(db_session: Session):
    orgs = OrganizationService(db_session)
    a = make_org(db_session, "a")
    b = make_org(db_session, "b", parent=a)
    # corrupt the data behind the service's back
    a.parent_org_id = b.id
    db_session.commit()

    with pytest.raises(OrganizationCycleError):
        orgs.find_ancestors(b.id)
    # descendants terminate even on a cycle
    assert [o.name for o in orgs.find_descendants(a.id)] == ["b"]

def test_resolve_membership_falls_back_to_nearest_ancestor(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    u = make_user(db_session, "u@example.com")
    add_member(db_session, u, tree["acme"], Role.OWNER)
    add_member(db_session, u, tree["eng"], Role.VIEWER)

    assert orgs.resolve_membership(tree["platform"].id, u.id).role == Role.VIEWER
    assert orgs.resolve_membership(tree["sales"].id, u.id).role == Role.OWNER
    assert orgs.resolve_membership(tree["other"].id, u.id) is None

def test_assign_role_upserts(db_session: Session, tree):
    orgs = OrganizationService(db_session)
    u = make_user(db_session, "u@example.com")

    orgs.assign_role(tree["acme"].id, u.id, Role.VIEWER)
    orgs.assign_role(tree["acme"].id, u.id, Role.ADMIN)
    db_session.commit()

    assert orgs.get_membership(tree["acme"].id, u.id).role == Role.ADMIN
    assert len(orgs.find_by_user(u.id)) == 1
