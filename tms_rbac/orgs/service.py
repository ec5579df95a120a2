import uuid
from collections import deque
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from tms_rbac.errors import OrganizationCycleError
from tms_rbac.logging_config import get_logger
from tms_rbac.models.enums import Role
from tms_rbac.models.membership import OrgUserRole
from tms_rbac.models.org import Organization
from tms_rbac.models.user import User

log = get_logger(__name__)

@dataclass
class OrgMember:
    email: str
    role: Role

@dataclass
class OrganizationWithUsers:
    id: int
    name: str
    parent_org_id: int | None
    users: list[OrgMember] = field(default_factory=list)

class OrganizationService:
    """Queries and writes over the organization tree.

    Lookups that miss return None or an empty list; turning that into an
    HTTP error is up to the caller. Every write that touches a parent link
    goes through the acyclicity check.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        # parent populated one level up, no further
        return select(Organization).options(joinedload(Organization.parent)).order_by(Organization.id)

    def find_all(self) -> list[Organization]:
        return list(self.db.scalars(self._query()).all())

    def find_by_id(self, org_id: int) -> Organization | None:
        return self.db.scalar(self._query().where(Organization.id == org_id))

    def find_top_level(self) -> list[Organization]:
        return list(self.db.scalars(self._query().where(Organization.parent_org_id.is_(None))).all())

    def find_by_parent_id(self, parent_org_id: int) -> list[Organization]:
        return list(self.db.scalars(self._query().where(Organization.parent_org_id == parent_org_id)).all())

    def find_children(self, org_id: int) -> list[Organization]:
        return self.find_by_parent_id(org_id)

    def find_by_user(self, user_id: uuid.UUID) -> list[Organization]:
        q = (
            select(OrgUserRole)
            .options(joinedload(OrgUserRole.organization).joinedload(Organization.parent))
            .where(OrgUserRole.user_id == user_id)
            .order_by(OrgUserRole.org_id)
        )
        return [row.organization for row in self.db.scalars(q).all()]

    def find_all_with_users(self) -> list[OrganizationWithUsers]:
        q = (
            select(
                Organization.id,
                Organization.name,
                Organization.parent_org_id,
                User.email,
                OrgUserRole.role,
            )
            .outerjoin(OrgUserRole, OrgUserRole.org_id == Organization.id)
            .outerjoin(User, User.id == OrgUserRole.user_id)
            .order_by(Organization.id, User.email)
        )

        grouped: dict[int, OrganizationWithUsers] = {}
        for org_id, name, parent_org_id, email, role in self.db.execute(q).all():
            org = grouped.get(org_id)
            if org is None:
                org = OrganizationWithUsers(id=org_id, name=name, parent_org_id=parent_org_id)
                grouped[org_id] = org
            # outer join row for an org with no members
            if email is not None:
                org.users.append(OrgMember(email=email, role=role))
        return list(grouped.values())

    def find_ancestors(self, org_id: int) -> list[Organization]:
        """Parent, grandparent, ... up to the root. Empty for a root or unknown id."""
        org = self.db.get(Organization, org_id)
        if org is None:
            return []

        ancestors: list[Organization] = []
        seen = {org.id}
        parent_id = org.parent_org_id
        while parent_id is not None:
            if parent_id in seen:
                raise OrganizationCycleError(org_id)
            seen.add(parent_id)
            parent = self.db.get(Organization, parent_id)
            if parent is None:
                break
            ancestors.append(parent)
            parent_id = parent.parent_org_id
        return ancestors

    def find_descendants(self, org_id: int) -> list[Organization]:
        """Every org below `org_id`, breadth first, each at most once."""
        found: list[Organization] = []
        seen = {org_id}
        frontier = deque([org_id])
        while frontier:
            current = frontier.popleft()
            for child in self.find_children(current):
                if child.id in seen:
                    continue
                seen.add(child.id)
                found.append(child)
                frontier.append(child.id)
        return found

    def _check_parent(self, org_id: int | None, parent_org_id: int) -> Organization | None:
        parent = self.db.get(Organization, parent_org_id)
        if parent is None:
            return None
        if org_id is None:
            return parent
        if parent_org_id == org_id or any(a.id == org_id for a in self.find_ancestors(parent_org_id)):
            log.warning("rejected parent link %s -> %s: cycle", org_id, parent_org_id)
            raise OrganizationCycleError(org_id, parent_org_id)
        return parent

    def create(self, name: str, parent_org_id: int | None = None) -> Organization | None:
        """Add an org. Returns None when the named parent does not exist."""
        if parent_org_id is not None and self._check_parent(None, parent_org_id) is None:
            return None
        org = Organization(name=name, parent_org_id=parent_org_id)
        self.db.add(org)
        self.db.flush()
        return org

    def set_parent(self, org_id: int, parent_org_id: int | None) -> Organization | None:
        """Move an org under a new parent (or to the top level with None)."""
        org = self.db.get(Organization, org_id)
        if org is None:
            return None
        if parent_org_id is not None and self._check_parent(org_id, parent_org_id) is None:
            return None
        org.parent_org_id = parent_org_id
        self.db.flush()
        self.db.refresh(org)
        return org

    def get_membership(self, org_id: int, user_id: uuid.UUID) -> OrgUserRole | None:
        return self.db.get(OrgUserRole, {"org_id": org_id, "user_id": user_id})

    def resolve_membership(self, org_id: int, user_id: uuid.UUID) -> OrgUserRole | None:
        """Direct membership, else the one on the nearest ancestor."""
        membership = self.get_membership(org_id, user_id)
        if membership is not None:
            return membership
        for ancestor in self.find_ancestors(org_id):
            membership = self.get_membership(ancestor.id, user_id)
            if membership is not None:
                return membership
        return None

    def assign_role(self, org_id: int, user_id: uuid.UUID, role: Role) -> OrgUserRole:
        membership = self.get_membership(org_id, user_id)
        if membership is None:
            membership = OrgUserRole(org_id=org_id, user_id=user_id, role=role)
            self.db.add(membership)
        else:
            membership.role = role
        self.db.flush()
        return membership
