"""initial schema - companies, employees, activities, users, audit log

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Company notes and tags are JSON stored in TEXT columns (see
dfscrm/utils/json_types.py). users.employee_id replaces the legacy
by-name login link; populate it once with `python migrate_link_employees.py`.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(100)),
        sa.Column("contact_name", sa.String(255)),
        sa.Column("address", sa.String(500)),
        sa.Column("city", sa.String(255)),
        sa.Column("state", sa.String(100)),
        sa.Column("zip", sa.String(20)),
        sa.Column("phone", sa.String(100)),
        sa.Column("email", sa.String(255)),
        sa.Column("website", sa.String(500)),
        sa.Column("notes", sa.Text),
        sa.Column("tags", sa.Text),
        sa.Column("is_customer", sa.Boolean, server_default=sa.false()),
        sa.Column("follow_up_date", sa.Date),
        sa.Column("follow_up_note", sa.Text),
        sa.Column("last_order_date", sa.Date),
        sa.Column("last_estimate_date", sa.Date),
        sa.Column("external_customer_id", sa.String(100)),
        sa.Column("created_at", sa.DateTime),
        sa.Column("updated_at", sa.DateTime),
    )
    op.create_index("ix_companies_name", "companies", ["name"])
    op.create_index("ix_companies_external_customer", "companies", ["external_customer_id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(100)),
        sa.Column("active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime),
        sa.Column("updated_at", sa.DateTime),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), server_default="user"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column(
            "employee_id", sa.String(64),
            sa.ForeignKey("employees.id", ondelete="SET NULL"),
        ),
        sa.Column("created_at", sa.DateTime),
    )
    op.create_index("ix_users_employee", "users", ["employee_id"], unique=True)

    op.create_table(
        "activities",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "company_id", sa.String(64),
            sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "employee_id", sa.String(64),
            sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("answered", sa.Boolean, server_default=sa.false()),
        sa.Column("interested", sa.Boolean, server_default=sa.false()),
        sa.Column("follow_up", sa.Boolean, server_default=sa.false()),
        sa.Column("notes", sa.Text),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime),
    )
    op.create_index("ix_activities_company", "activities", ["company_id"])
    op.create_index("ix_activities_employee_date", "activities", ["employee_id", "date"])
    op.create_index("ix_activities_date", "activities", ["date"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("action_type", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(64)),
        sa.Column("details", sa.JSON),
        sa.Column("created_at", sa.DateTime),
    )
    op.create_index("ix_audit_entity", "audit_logs", ["entity_type", "entity_id"])


def downgrade() -> None:
    """Drop all tables. ⚠️ DESTRUCTIVE — only for dev/test environments."""
    op.drop_table("audit_logs")
    op.drop_table("activities")
    op.drop_table("users")
    op.drop_table("employees")
    op.drop_table("companies")
