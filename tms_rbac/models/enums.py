from enum import Enum

class Role(str, Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    VIEWER = "VIEWER"

class PermissionAction(str, Enum):
    create = "create"
    delete = "delete"
    edit = "edit"
    view = "view"
