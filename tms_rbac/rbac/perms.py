from tms_rbac.models.enums import PermissionAction, Role

FEATURE_TASKS = "tasks"
FEATURE_ORGANIZATIONS = "organizations"
FEATURE_MEMBERS = "members"

# direct grants only; higher roles pick up everything below them
DEFAULT_GRANTS: dict[Role, dict[str, set[PermissionAction]]] = {
    Role.VIEWER: {
        FEATURE_TASKS: {PermissionAction.view},
        FEATURE_ORGANIZATIONS: {PermissionAction.view},
        FEATURE_MEMBERS: {PermissionAction.view},
    },
    Role.ADMIN: {
        FEATURE_TASKS: {PermissionAction.create, PermissionAction.edit, PermissionAction.delete},
        FEATURE_MEMBERS: {PermissionAction.create},
    },
    Role.OWNER: {
        FEATURE_ORGANIZATIONS: {PermissionAction.create, PermissionAction.edit, PermissionAction.delete},
        FEATURE_MEMBERS: {PermissionAction.edit, PermissionAction.delete},
    },
}

def iter_default_grants():
    for role, features in DEFAULT_GRANTS.items():
        for feature, actions in features.items():
            for action in sorted(actions, key=lambda a: a.value):
                yield role, feature, action
