"""init schema

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    # enums
    role_create = postgresql.ENUM("OWNER", "ADMIN", "VIEWER", name="role")
    action_create = postgresql.ENUM("create", "delete", "edit", "view", name="permission_action")

    role_create.create(op.get_bind(), checkfirst=True)
    action_create.create(op.get_bind(), checkfirst=True)

    role = postgresql.ENUM("OWNER", "ADMIN", "VIEWER", name="role", create_type=False)
    action = postgresql.ENUM("create", "delete", "edit", "view", name="permission_action", create_type=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("parent_org_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=True),
    )
    op.create_index("ix_organizations_parent_org_id", "organizations", ["parent_org_id"])

    op.create_table(
        "org_user_roles",
        sa.Column("org_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role", role, nullable=False, server_default="VIEWER"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_org_user_roles_user_id", "org_user_roles", ["user_id"])

    op.create_table(
        "permissions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("role", role, nullable=False),
        sa.Column("feature", sa.String(length=255), nullable=False),
        sa.Column("action", action, nullable=False),
        sa.UniqueConstraint("role", "feature", "action", name="uq_permission_role_feature_action"),
    )
    op.create_index("ix_permissions_role", "permissions", ["role"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("org_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_tasks_org_id", "tasks", ["org_id"])

def downgrade() -> None:
    op.drop_index("ix_tasks_org_id", table_name="tasks")
    op.drop_table("tasks")

    op.drop_index("ix_permissions_role", table_name="permissions")
    op.drop_table("permissions")

    op.drop_index("ix_org_user_roles_user_id", table_name="org_user_roles")
    op.drop_table("org_user_roles")

    op.drop_index("ix_organizations_parent_org_id", table_name="organizations")
    op.drop_table("organizations")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    postgresql.ENUM(name="permission_action").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="role").drop(op.get_bind(), checkfirst=True)
