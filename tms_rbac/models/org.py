from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tms_rbac.models.base import Base

class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # null => top-level
    parent_org_id: Mapped[int | None] = mapped_column(
        ForeignKey("organizations.id"), index=True, nullable=True
    )

    parent: Mapped[Organization | None] = relationship(
        remote_side="Organization.id",
        foreign_keys=[parent_org_id],
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r}, parent_org_id={self.parent_org_id})>"
