from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.permission import Permission

class PermissionStore(Protocol):
    def find_by_role_and_feature(self, role: Role, feature: str) -> list[Permission]: ...

class SqlPermissionStore:
    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> list[Permission]:
        return list(self.db.scalars(select(Permission).order_by(Permission.id)).all())

    def find_by_id(self, permission_id: int) -> Permission | None:
        return self.db.get(Permission, permission_id)

    def find_by_role(self, role: Role) -> list[Permission]:
        q = select(Permission).where(Permission.role == role).order_by(Permission.id)
        return list(self.db.scalars(q).all())

    def find_by_feature(self, feature: str) -> list[Permission]:
        q = select(Permission).where(Permission.feature == feature).order_by(Permission.id)
        return list(self.db.scalars(q).all())

    def find_by_role_and_feature(self, role: Role, feature: str) -> list[Permission]:
        q = (
            select(Permission)
            .where(Permission.role == role, Permission.feature == feature)
            .order_by(Permission.id)
        )
        return list(self.db.scalars(q).all())

    def find_by_role_feature_and_action(
        self, role: Role, feature: str, action: PermissionAction
    ) -> Permission | None:
        return self.db.scalar(
            select(Permission).where(
                Permission.role == role,
                Permission.feature == feature,
                Permission.action == action,
            )
        )

    def find_roles_with_permission(self, feature: str, action: PermissionAction) -> list[Role]:
        q = (
            select(Permission)
            .where(Permission.feature == feature, Permission.action == action)
            .order_by(Permission.id)
        )
        return [p.role for p in self.db.scalars(q).all()]
