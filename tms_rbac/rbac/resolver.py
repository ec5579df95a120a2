from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tms_rbac.logging_config import get_logger
from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.permission import Permission
from tms_rbac.rbac.hierarchy import RoleHierarchy
from tms_rbac.rbac.store import PermissionStore

log = get_logger(__name__)

@dataclass(frozen=True)
class EffectivePermissions:
    create: bool = False
    delete: bool = False
    edit: bool = False
    view: bool = False

    @classmethod
    def from_grants(cls, grants: Iterable[Permission]) -> EffectivePermissions:
        # repeated grants for one action collapse to a single True
        actions = {PermissionAction(g.action) for g in grants}
        return cls(
            create=PermissionAction.create in actions,
            delete=PermissionAction.delete in actions,
            edit=PermissionAction.edit in actions,
            view=PermissionAction.view in actions,
        )

    def allows(self, action: PermissionAction) -> bool:
        action = PermissionAction(action)
        if action is PermissionAction.create:
            return self.create
        if action is PermissionAction.delete:
            return self.delete
        if action is PermissionAction.edit:
            return self.edit
        if action is PermissionAction.view:
            return self.view
        raise ValueError(f"unknown permission action: {action!r}")

    def __or__(self, other: EffectivePermissions) -> EffectivePermissions:
        return EffectivePermissions(
            create=self.create or other.create,
            delete=self.delete or other.delete,
            edit=self.edit or other.edit,
            view=self.view or other.view,
        )

    def as_dict(self) -> dict[str, bool]:
        return {"create": self.create, "delete": self.delete, "edit": self.edit, "view": self.view}

NO_PERMISSIONS = EffectivePermissions()

class PermissionResolver:
    """Computes what a role may do on a feature.

    A role's effective permissions are its direct grants OR'ed with the
    direct grants of every role below it in the hierarchy, so a higher role
    never holds less than a lower one. Nothing is cached: every call reads
    the store.
    """

    def __init__(self, store: PermissionStore, hierarchy: RoleHierarchy):
        self.store = store
        self.hierarchy = hierarchy

    def get_effective_permissions(self, role: Role, feature: str) -> EffectivePermissions:
        role = Role(role)
        direct = self._direct_permissions(role, feature)
        inherited = self._inherited_permissions(role, feature)
        return direct | inherited

    def has_permission(self, role: Role, feature: str, action: PermissionAction) -> bool:
        return self.get_effective_permissions(role, feature).allows(action)

    def _direct_permissions(self, role: Role, feature: str) -> EffectivePermissions:
        return EffectivePermissions.from_grants(self.store.find_by_role_and_feature(role, feature))

    def _inherited_permissions(self, role: Role, feature: str) -> EffectivePermissions:
        inherited = NO_PERMISSIONS
        for lower in self.hierarchy.subordinates_of(role):
            inherited = inherited | EffectivePermissions.from_grants(
                self.store.find_by_role_and_feature(lower, feature)
            )
        if inherited != NO_PERMISSIONS:
            log.debug("role %s inherits %s on %s", role.value, inherited.as_dict(), feature)
        return inherited
