"""settings table - admin-editable key/value store, seeded with the call script

Revision ID: 002_settings
Revises: 001_initial
Create Date: 2026-10-19

Values are JSON text. The seeded call_script is the same default the
service falls back to (dfscrm/services/settings_service.py).
"""
import json
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from dfscrm.services.settings_service import DEFAULT_SETTINGS

revision: str = "002_settings"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    settings = op.create_table(
        "settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("updated_by", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.bulk_insert(
        settings,
        [{"key": k, "value": json.dumps(v)} for k, v in DEFAULT_SETTINGS.items()],
    )


def downgrade() -> None:
    op.drop_table("settings")
