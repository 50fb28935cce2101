"""add analytics snapshots and educational tips"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_analytics_and_tips"
down_revision = "0001_create_core_tables"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "analytics_snapshots",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False, unique=True),
        sa.Column("tasks_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tasks_created", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hours_worked", sa.Float(), nullable=False, server_default="0"),
        sa.Column("productivity_score", sa.Float(), nullable=False, server_default="0"),
    )
    op.create_table(
        "educational_tips",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=40), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_educational_tips_category", "educational_tips", ["category"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_educational_tips_category", table_name="educational_tips")
    op.drop_table("educational_tips")
    op.drop_table("analytics_snapshots")
