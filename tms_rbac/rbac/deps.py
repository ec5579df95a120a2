from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from tms_rbac.auth.deps import get_current_user
from tms_rbac.config import settings
from tms_rbac.db import get_db
from tms_rbac.logging_config import get_logger
from tms_rbac.models.enums import PermissionAction
from tms_rbac.models.membership import OrgUserRole
from tms_rbac.models.org import Organization
from tms_rbac.models.user import User
from tms_rbac.orgs.service import OrganizationService
from tms_rbac.rbac.hierarchy import RoleHierarchy
from tms_rbac.rbac.resolver import PermissionResolver
from tms_rbac.rbac.service import PermissionService
from tms_rbac.rbac.store import SqlPermissionStore

log = get_logger(__name__)

role_hierarchy = RoleHierarchy(settings.role_hierarchy)

class OrgContext:
    def __init__(self, org: Organization, membership: OrgUserRole, user: User):
        self.org = org
        self.membership = membership
        self.user = user

def get_org_service(db: Session = Depends(get_db)) -> OrganizationService:
    return OrganizationService(db)

def get_permission_resolver(db: Session = Depends(get_db)) -> PermissionResolver:
    return PermissionResolver(SqlPermissionStore(db), role_hierarchy)

def get_permission_service(
    db: Session = Depends(get_db),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> PermissionService:
    return PermissionService(SqlPermissionStore(db), resolver)

def get_org_context(
    org_id: int,
    user: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> OrgContext:
    org = orgs.find_by_id(org_id)
    if org is None:
        raise HTTPException(status_code=404, detail="org not found")

    membership = orgs.resolve_membership(org_id, user.id)
    if membership is None:
        raise HTTPException(status_code=403, detail="not a member of this org")

    return OrgContext(org=org, membership=membership, user=user)

def require_perm(feature: str, action: PermissionAction):
    action = PermissionAction(action)

    def _checker(
        org_id: int,
        ctx: OrgContext = Depends(get_org_context),
        resolver: PermissionResolver = Depends(get_permission_resolver),
    ) -> OrgContext:
        if not resolver.has_permission(ctx.membership.role, feature, action):
            log.debug(
                "denied %s:%s to user %s (%s) in org %s",
                feature, action.value, ctx.user.id, ctx.membership.role.value, org_id,
            )
            raise HTTPException(status_code=403, detail="forbidden")
        return ctx

    return _checker
