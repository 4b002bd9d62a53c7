"""initial tenant provisioning schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17 09:12:41.204515

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - tenant, provisioning_ledger, password_setup_link, admin_user."""
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("contact_email", sa.String(320), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("website", sa.String(2048), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.JSON(), nullable=True),
        sa.Column("owner_email", sa.String(320), nullable=True),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'suspended', 'archived')",
            name="tenant_status_check",
        ),
        sa.CheckConstraint(
            "owner_email IS NULL OR owner_email = lower(owner_email)",
            name="tenant_owner_email_lower_check",
        ),
    )
    op.create_index("ix_tenant_owner_id", "tenant", ["owner_id"])
    op.create_index("ix_tenant_status", "tenant", ["status"])
    # Archived tenants release their slug and owner email.
    op.create_index(
        "uq_tenant_slug_live",
        "tenant",
        ["slug"],
        unique=True,
        postgresql_where=sa.text("status <> 'archived'"),
    )
    op.create_index(
        "uq_tenant_owner_email_live",
        "tenant",
        ["owner_email"],
        unique=True,
        postgresql_where=sa.text("status <> 'archived' AND owner_email IS NOT NULL"),
    )

    op.create_table(
        "provisioning_ledger",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("idempotency_key", sa.String(128), nullable=False),
        sa.Column("admin_user_id", sa.String(64), nullable=False),
        sa.Column("requested_slug", sa.String(50), nullable=False),
        sa.Column("owner_email", sa.String(320), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("planned_owner_id", sa.String(64), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("claim_token", sa.String(64), nullable=True),
        sa.Column("claimed_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("request_data", sa.JSON(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="RESTRICT"),
        sa.CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name="provisioning_ledger_status_check",
        ),
    )
    op.create_index(
        "ix_provisioning_ledger_admin_user_id", "provisioning_ledger", ["admin_user_id"]
    )
    op.create_index("ix_provisioning_ledger_tenant_id", "provisioning_ledger", ["tenant_id"])
    op.create_index(
        "uq_provisioning_ledger_key_live",
        "provisioning_ledger",
        ["idempotency_key"],
        unique=True,
        postgresql_where=sa.text("status <> 'failed'"),
    )

    op.create_table(
        "password_setup_link",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("mode", sa.String(16), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("token_hash", name="uq_password_setup_link_token_hash"),
        sa.CheckConstraint(
            "mode IN ('invite', 'recovery')", name="password_setup_link_mode_check"
        ),
    )
    op.create_index(
        "ix_password_setup_link_tenant_created",
        "password_setup_link",
        ["tenant_id", "created_at"],
    )
    op.create_index(
        "ix_password_setup_link_creator_created",
        "password_setup_link",
        ["created_by", "created_at"],
    )

    op.create_table(
        "admin_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", name="uq_admin_user_user_id"),
        sa.CheckConstraint(
            "role IN ('SUPER_ADMIN', 'ADMIN', 'SUPPORT')", name="admin_user_role_check"
        ),
    )


def downgrade() -> None:
    """Downgrade schema - drop all provisioning tables."""
    op.drop_table("admin_user")
    op.drop_index("ix_password_setup_link_creator_created", "password_setup_link")
    op.drop_index("ix_password_setup_link_tenant_created", "password_setup_link")
    op.drop_table("password_setup_link")
    op.drop_index("uq_provisioning_ledger_key_live", "provisioning_ledger")
    op.drop_index("ix_provisioning_ledger_tenant_id", "provisioning_ledger")
    op.drop_index("ix_provisioning_ledger_admin_user_id", "provisioning_ledger")
    op.drop_table("provisioning_ledger")
    op.drop_index("uq_tenant_owner_email_live", "tenant")
    op.drop_index("uq_tenant_slug_live", "tenant")
    op.drop_index("ix_tenant_status", "tenant")
    op.drop_index("ix_tenant_owner_id", "tenant")
    op.drop_table("tenant")
