"""create users and audit tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:01:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=32), nullable=False, unique=True),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=64), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )

    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"]),
        sa.PrimaryKeyConstraint("user_id", "role_id"),
    )

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("call_name", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_user_profiles_user_id", "user_profiles", ["user_id"])

    op.create_table(
        "user_devices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("browser_name", sa.String(length=100), nullable=True),
        sa.Column("browser_family", sa.String(length=100), nullable=True),
        sa.Column("os_name", sa.String(length=100), nullable=True),
        sa.Column("os_family", sa.String(length=100), nullable=True),
        sa.Column("ipaddress", sa.String(length=45), nullable=True),
        sa.Column(
            "signed_in_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_user_devices_user_id", "user_devices", ["user_id"])

    op.create_table(
        "audit",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("user_name", sa.String(length=64), nullable=True),
        sa.Column("user_detail", sa.String(length=255), nullable=True),
        sa.Column("user_permission", sa.String(length=255), nullable=True),
        sa.Column("user_ipaddress", sa.String(length=45), nullable=True),
        sa.Column("module_id", sa.String(length=100), nullable=True),
        sa.Column("module_name", sa.String(length=255), nullable=True),
        sa.Column("controller_name", sa.String(length=100), nullable=True),
        sa.Column("controller_action", sa.String(length=100), nullable=True),
        sa.Column("controller_event", sa.String(length=255), nullable=True),
        sa.Column("meta_browser_name", sa.String(length=100), nullable=True),
        sa.Column("meta_browser_family", sa.String(length=100), nullable=True),
        sa.Column("meta_os_name", sa.String(length=100), nullable=True),
        sa.Column("meta_os_family", sa.String(length=100), nullable=True),
        sa.Column("request_url", sa.String(length=255), nullable=True),
        sa.Column("request_method", sa.String(length=10), nullable=True),
        sa.Column("request_code", sa.Integer(), nullable=True),
        sa.Column("query_sql", sa.Text(), nullable=True),
        sa.Column("query_id", sa.String(length=100), nullable=True),
        sa.Column("query_params", sa.Text(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("error_code", sa.Integer(), nullable=True),
        sa.Column("error_params", sa.JSON(), nullable=True),
        sa.Column("success", sa.SmallInteger(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("date", sa.String(length=19), nullable=True),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_audit_user_id", "audit", ["user_id"])
    op.create_index("ix_audit_date", "audit", ["date"])


def downgrade() -> None:
    op.drop_index("ix_audit_date", table_name="audit")
    op.drop_index("ix_audit_user_id", table_name="audit")
    op.drop_table("audit")
    op.drop_index("ix_user_devices_user_id", table_name="user_devices")
    op.drop_table("user_devices")
    op.drop_index("ix_user_profiles_user_id", table_name="user_profiles")
    op.drop_table("user_profiles")
    op.drop_table("user_roles")
    op.drop_table("users")
    op.drop_table("roles")
