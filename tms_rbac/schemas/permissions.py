from pydantic import BaseModel, ConfigDict

from tms_rbac.models.enums import PermissionAction, Role

class PermissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: Role
    feature: str
    action: PermissionAction

class EffectivePermissionsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role: Role
    feature: str
    create: bool
    delete: bool
    edit: bool
    view: bool

class PermissionCheckOut(BaseModel):
    role: Role
    feature: str
    action: PermissionAction
    allowed: bool
