"""Create users, groups, memberships, expenses and payments."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_create_ledger_tables"
down_revision = None
branch_labels = None
depends_on = None


group_role_enum = sa.Enum("admin", "member", name="group_role")
payment_status_enum = sa.Enum(
    "pending", "completed", "cancelled", name="payment_status"
)


def upgrade() -> None:
    """Apply schema upgrades."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "group_members",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column(
            "group_id", sa.String(length=64), sa.ForeignKey("groups.id"), nullable=False
        ),
        sa.Column(
            "user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("role", group_role_enum, nullable=False, server_default="member"),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column(
            "group_id", sa.String(length=64), sa.ForeignKey("groups.id"), nullable=False
        ),
        sa.Column(
            "user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(length=60), nullable=True),
        sa.Column("description", sa.String(length=280), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint("amount >= 0", name="ck_expenses_amount_non_negative"),
    )
    op.create_index(
        "ix_expenses_group_occurred_at", "expenses", ["group_id", "occurred_at"]
    )
    op.create_index("ix_expenses_group_category", "expenses", ["group_id", "category"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column(
            "group_id", sa.String(length=64), sa.ForeignKey("groups.id"), nullable=False
        ),
        sa.Column(
            "from_user_id",
            sa.String(length=64),
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        sa.Column(
            "to_user_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status", payment_status_enum, nullable=False, server_default="pending"
        ),
        sa.Column("description", sa.String(length=280), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        sa.CheckConstraint(
            "from_user_id <> to_user_id", name="ck_payments_distinct_parties"
        ),
    )
    op.create_index("ix_payments_group_status", "payments", ["group_id", "status"])


def downgrade() -> None:
    """Revert schema upgrades."""
    op.drop_index("ix_payments_group_status", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_expenses_group_category", table_name="expenses")
    op.drop_index("ix_expenses_group_occurred_at", table_name="expenses")
    op.drop_table("expenses")
    op.drop_table("group_members")
    op.drop_table("groups")
    op.drop_table("users")
    bind = op.get_bind()
    payment_status_enum.drop(bind, checkfirst=True)
    group_role_enum.drop(bind, checkfirst=True)
