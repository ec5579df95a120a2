from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr

from tms_rbac.models.enums import Role

class OrgRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    parent_org_id: int | None = None

class OrgOut(OrgRef):
    parent: OrgRef | None = None

class OrgCreateIn(BaseModel):
    name: str
    parent_org_id: int | None = None

class OrgParentIn(BaseModel):
    parent_org_id: int | None = None

class OrgMemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    role: Role

class OrgWithUsersOut(OrgRef):
    users: list[OrgMemberOut]

class MemberIn(BaseModel):
    email: EmailStr
    role: Role = Role.VIEWER

class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    org_id: int
    role: Role
