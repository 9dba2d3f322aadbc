"""Scheduled notifications."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261017_02_scheduled_notifications"
down_revision = "20261017_01_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "scheduled_notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("send_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("audience", sa.JSON(), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(128), nullable=False),
    )
    op.execute(
        "CREATE INDEX idx_scheduled_created ON scheduled_notifications (created_at DESC, id DESC)"
    )


def downgrade() -> None:
    op.drop_table("scheduled_notifications")
