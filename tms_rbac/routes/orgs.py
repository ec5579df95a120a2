from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tms_rbac.auth.deps import get_current_user
from tms_rbac.auth.store import SqlUserStore
from tms_rbac.db import get_db
from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.user import User
from tms_rbac.orgs.service import OrganizationService
from tms_rbac.rbac.deps import (
    OrgContext,
    get_org_service,
    get_permission_resolver,
    require_perm,
    role_hierarchy,
)
from tms_rbac.rbac.perms import FEATURE_MEMBERS, FEATURE_ORGANIZATIONS
from tms_rbac.rbac.resolver import PermissionResolver
from tms_rbac.schemas.orgs import (
    MemberIn,
    MemberOut,
    OrgCreateIn,
    OrgOut,
    OrgParentIn,
    OrgRef,
    OrgWithUsersOut,
)

router = APIRouter(prefix="/organizations", tags=["organizations"])

def _ensure_can_attach_under(
    orgs: OrganizationService,
    resolver: PermissionResolver,
    user: User,
    parent_org_id: int,
) -> None:
    if orgs.find_by_id(parent_org_id) is None:
        raise HTTPException(status_code=404, detail="parent org not found")
    membership = orgs.resolve_membership(parent_org_id, user.id)
    if membership is None or not resolver.has_permission(
        membership.role, FEATURE_ORGANIZATIONS, PermissionAction.create
    ):
        raise HTTPException(status_code=403, detail="forbidden")

@router.get("", response_model=list[OrgOut])
def list_orgs(
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgOut]:
    return [OrgOut.model_validate(o) for o in orgs.find_all()]

@router.get("/top-level", response_model=list[OrgOut])
def list_top_level(
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgOut]:
    return [OrgOut.model_validate(o) for o in orgs.find_top_level()]

@router.get("/with-users", response_model=list[OrgWithUsersOut])
def list_with_users(
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgWithUsersOut]:
    return [OrgWithUsersOut.model_validate(o) for o in orgs.find_all_with_users()]

@router.get("/my-organizations", response_model=list[OrgOut])
def my_orgs(
    user: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgOut]:
    return [OrgOut.model_validate(o) for o in orgs.find_by_user(user.id)]

@router.post("", response_model=OrgOut)
def create_org(
    payload: OrgCreateIn,
    user: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: Session = Depends(get_db),
) -> OrgOut:
    if payload.parent_org_id is not None:
        _ensure_can_attach_under(orgs, resolver, user, payload.parent_org_id)

    org = orgs.create(payload.name, parent_org_id=payload.parent_org_id)
    if org is None:
        raise HTTPException(status_code=404, detail="parent org not found")

    orgs.assign_role(org.id, user.id, Role.OWNER)
    db.commit()

    return OrgOut.model_validate(orgs.find_by_id(org.id))

@router.get("/{org_id}", response_model=OrgOut)
def get_org(
    org_id: int,
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> OrgOut:
    org = orgs.find_by_id(org_id)
    if org is None:
        raise HTTPException(status_code=404, detail="org not found")
    return OrgOut.model_validate(org)

@router.get("/{org_id}/children", response_model=list[OrgOut])
def list_children(
    org_id: int,
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgOut]:
    return [OrgOut.model_validate(o) for o in orgs.find_children(org_id)]

@router.get("/{org_id}/ancestors", response_model=list[OrgRef])
def list_ancestors(
    org_id: int,
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgRef]:
    if orgs.find_by_id(org_id) is None:
        raise HTTPException(status_code=404, detail="org not found")
    return [OrgRef.model_validate(o) for o in orgs.find_ancestors(org_id)]

@router.get("/{org_id}/descendants", response_model=list[OrgRef])
def list_descendants(
    org_id: int,
    _: User = Depends(get_current_user),
    orgs: OrganizationService = Depends(get_org_service),
) -> list[OrgRef]:
    if orgs.find_by_id(org_id) is None:
        raise HTTPException(status_code=404, detail="org not found")
    return [OrgRef.model_validate(o) for o in orgs.find_descendants(org_id)]

@router.patch("/{org_id}/parent", response_model=OrgOut)
def move_org(
    org_id: int,
    payload: OrgParentIn,
    ctx: OrgContext = Depends(require_perm(FEATURE_ORGANIZATIONS, PermissionAction.edit)),
    orgs: OrganizationService = Depends(get_org_service),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: Session = Depends(get_db),
) -> OrgOut:
    if payload.parent_org_id is not None:
        _ensure_can_attach_under(orgs, resolver, ctx.user, payload.parent_org_id)

    # OrganizationCycleError is mapped to 409 by the app
    org = orgs.set_parent(org_id, payload.parent_org_id)
    if org is None:
        raise HTTPException(status_code=404, detail="org not found")
    db.commit()
    return OrgOut.model_validate(orgs.find_by_id(org_id))

@router.post("/{org_id}/members", response_model=MemberOut)
def add_member(
    org_id: int,
    payload: MemberIn,
    ctx: OrgContext = Depends(require_perm(FEATURE_MEMBERS, PermissionAction.create)),
    orgs: OrganizationService = Depends(get_org_service),
    db: Session = Depends(get_db),
) -> MemberOut:
    # only roles strictly below the inviter can be handed out
    inviter = ctx.membership.role
    if not role_hierarchy.outranks(inviter, payload.role):
        raise HTTPException(status_code=403, detail="forbidden")

    invited = SqlUserStore(db).find_by_email(payload.email)
    if invited is None:
        raise HTTPException(status_code=404, detail="user not found")

    # no demoting someone the inviter could not have granted
    existing = orgs.get_membership(org_id, invited.id)
    if existing is not None and not role_hierarchy.outranks(inviter, existing.role):
        raise HTTPException(status_code=403, detail="forbidden")

    m = orgs.assign_role(org_id, invited.id, payload.role)
    db.commit()
    return MemberOut(user_id=m.user_id, org_id=m.org_id, role=m.role)
