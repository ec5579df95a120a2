import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from tms_rbac.auth.passwords import hash_password
from tms_rbac.db import SessionLocal
from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.membership import OrgUserRole
from tms_rbac.models.org import Organization
from tms_rbac.models.permission import Permission
from tms_rbac.models.user import User
from tms_rbac.rbac.perms import iter_default_grants

SEED_PASSWORD = "password123"

@dataclass
class SeedResult:
    owner_email: str
    admin_email: str
    viewer_email: str
    root_org_id: int
    child_org_id: int
    grants: int

def get_or_create_user(db: Session, email: str, name: str, password: str) -> User:
    email = email.lower().strip()
    u = db.scalar(select(User).where(User.email == email))
    if u is None:
        u = User(email=email, name=name, password_hash=hash_password(password))
        db.add(u)
        db.flush()
    return u

def get_or_create_org(db: Session, name: str, parent_org_id: int | None = None) -> Organization:
    o = db.scalar(select(Organization).where(Organization.name == name))
    if o is None:
        o = Organization(name=name, parent_org_id=parent_org_id)
        db.add(o)
        db.flush()
    return o

def get_or_create_membership(db: Session, user_id: uuid.UUID, org_id: int, role: Role) -> OrgUserRole:
    m = db.get(OrgUserRole, {"org_id": org_id, "user_id": user_id})
    if m is None:
        m = OrgUserRole(user_id=user_id, org_id=org_id, role=role)
        db.add(m)
        db.flush()
    elif m.role != role:
        m.role = role
        db.flush()
    return m

def get_or_create_grant(db: Session, role: Role, feature: str, action: PermissionAction) -> Permission:
    p = db.scalar(
        select(Permission).where(
            Permission.role == role,
            Permission.feature == feature,
            Permission.action == action,
        )
    )
    if p is None:
        p = Permission(role=role, feature=feature, action=action)
        db.add(p)
        db.flush()
    return p

def seed() -> SeedResult:
    db = SessionLocal()
    try:
        owner = get_or_create_user(db, "owner@example.com", "Olivia Owner", SEED_PASSWORD)
        admin = get_or_create_user(db, "admin@example.com", "Adam Admin", SEED_PASSWORD)
        viewer = get_or_create_user(db, "viewer@example.com", "Vera Viewer", SEED_PASSWORD)

        root = get_or_create_org(db, "Acme Corp")
        child = get_or_create_org(db, "Acme Engineering", parent_org_id=root.id)

        get_or_create_membership(db, owner.id, root.id, Role.OWNER)
        get_or_create_membership(db, admin.id, child.id, Role.ADMIN)
        get_or_create_membership(db, viewer.id, child.id, Role.VIEWER)

        grants = [get_or_create_grant(db, r, f, a) for r, f, a in iter_default_grants()]

        db.commit()

        return SeedResult(
            owner_email=owner.email,
            admin_email=admin.email,
            viewer_email=viewer.email,
            root_org_id=root.id,
            child_org_id=child.id,
            grants=len(grants),
        )
    finally:
        db.close()

if __name__ == "__main__":
    r = seed()
    print("seed complete")
    print(f"root_org_id={r.root_org_id}")
    print(f"child_org_id={r.child_org_id}")
    print(f"grants={r.grants}")
    print(f"users (password: {SEED_PASSWORD}):")
    print(f"  owner:  {r.owner_email}")
    print(f"  admin:  {r.admin_email}")
    print(f"  viewer: {r.viewer_email}")
