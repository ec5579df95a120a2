from tms_rbac.models.membership import OrgUserRole
from tms_rbac.models.org import Organization
from tms_rbac.models.permission import Permission
from tms_rbac.models.task import Task
from tms_rbac.models.user import User

__all__ = ["User", "Organization", "OrgUserRole", "Permission", "Task"]
