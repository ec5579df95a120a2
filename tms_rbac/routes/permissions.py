from fastapi import APIRouter, Depends, HTTPException

from tms_rbac.auth.deps import get_current_user
from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.user import User
from tms_rbac.rbac.deps import get_permission_service
from tms_rbac.rbac.service import PermissionService
from tms_rbac.schemas.permissions import EffectivePermissionsOut, PermissionCheckOut, PermissionOut

router = APIRouter(prefix="/permissions", tags=["permissions"])

@router.get("", response_model=list[PermissionOut])
def list_permissions(
    role: Role | None = None,
    feature: str | None = None,
    _: User = Depends(get_current_user),
    perms: PermissionService = Depends(get_permission_service),
) -> list[PermissionOut]:
    if role is not None and feature is not None:
        rows = perms.find_by_role_and_feature(role, feature)
    elif role is not None:
        rows = perms.find_by_role(role)
    elif feature is not None:
        rows = perms.find_by_feature(feature)
    else:
        rows = perms.find_all()
    return [PermissionOut.model_validate(p) for p in rows]

@router.get("/effective", response_model=EffectivePermissionsOut)
def effective_permissions(
    role: Role,
    feature: str,
    _: User = Depends(get_current_user),
    perms: PermissionService = Depends(get_permission_service),
) -> EffectivePermissionsOut:
    effective = perms.get_effective_permissions(role, feature)
    return EffectivePermissionsOut(role=role, feature=feature, **effective.as_dict())

@router.get("/check", response_model=PermissionCheckOut)
def check_permission(
    role: Role,
    feature: str,
    action: PermissionAction,
    _: User = Depends(get_current_user),
    perms: PermissionService = Depends(get_permission_service),
) -> PermissionCheckOut:
    allowed = perms.has_permission(role, feature, action)
    return PermissionCheckOut(role=role, feature=feature, action=action, allowed=allowed)

@router.get("/roles", response_model=list[Role])
def roles_with_permission(
    feature: str,
    action: PermissionAction,
    _: User = Depends(get_current_user),
    perms: PermissionService = Depends(get_permission_service),
) -> list[Role]:
    return perms.find_roles_with_permission(feature, action)

@router.get("/{permission_id}", response_model=PermissionOut)
def get_permission(
    permission_id: int,
    _: User = Depends(get_current_user),
    perms: PermissionService = Depends(get_permission_service),
) -> PermissionOut:
    p = perms.find_by_id(permission_id)
    if p is None:
        raise HTTPException(status_code=404, detail="permission not found")
    return PermissionOut.model_validate(p)
