from sqlalchemy import Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tms_rbac.models.base import Base
from tms_rbac.models.enums import PermissionAction, Role

class Permission(Base):
    """A direct grant: `role` may perform `action` on `feature`."""

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("role", "feature", "action", name="uq_permission_role_feature_action"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role: Mapped[Role] = mapped_column(Enum(Role, name="role"), index=True, nullable=False)
    feature: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[PermissionAction] = mapped_column(
        Enum(PermissionAction, name="permission_action"), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Permission(role={self.role.value}, feature={self.feature!r}, action={self.action.value})>"
