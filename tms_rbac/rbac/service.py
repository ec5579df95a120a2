from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.permission import Permission
from tms_rbac.rbac.resolver import EffectivePermissions, PermissionResolver
from tms_rbac.rbac.store import SqlPermissionStore

class PermissionService:
    """Catalogue queries over stored grants plus the resolver's checks."""

    def __init__(self, store: SqlPermissionStore, resolver: PermissionResolver):
        self.store = store
        self.resolver = resolver

    def find_all(self) -> list[Permission]:
        return self.store.find_all()

    def find_by_id(self, permission_id: int) -> Permission | None:
        return self.store.find_by_id(permission_id)

    def find_by_role(self, role: Role) -> list[Permission]:
        return self.store.find_by_role(role)

    def find_by_feature(self, feature: str) -> list[Permission]:
        return self.store.find_by_feature(feature)

    def find_by_role_and_feature(self, role: Role, feature: str) -> list[Permission]:
        return self.store.find_by_role_and_feature(role, feature)

    def find_by_role_feature_and_action(
        self, role: Role, feature: str, action: PermissionAction
    ) -> Permission | None:
        return self.store.find_by_role_feature_and_action(role, feature, action)

    def find_roles_with_permission(self, feature: str, action: PermissionAction) -> list[Role]:
        return self.store.find_roles_with_permission(feature, action)

    def get_effective_permissions(self, role: Role, feature: str) -> EffectivePermissions:
        return self.resolver.get_effective_permissions(role, feature)

    def has_permission(self, role: Role, feature: str, action: PermissionAction) -> bool:
        return self.resolver.has_permission(role, feature, action)
