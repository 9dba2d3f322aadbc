"""Initial schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261017_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default="member"),
        sa.Column("push_tokens", sa.JSON(), nullable=False),
        sa.Column("last_token_update", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notification_preferences", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="uq_members_email"),
    )

    op.create_table(
        "notification_subscriptions",
        sa.Column("token", sa.String(512), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(128),
            sa.ForeignKey("members.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("subscribed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
    )
    op.create_index(
        "idx_subscriptions_user",
        "notification_subscriptions",
        ["user_id", "active"],
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.String(128),
            sa.ForeignKey("members.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("icon", sa.Text(), nullable=True),
        sa.Column("tag", sa.String(64), nullable=True),
        sa.Column("category", sa.String(32), nullable=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("schema_version", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "(read AND read_at IS NOT NULL) OR (NOT read AND read_at IS NULL)",
            name="ck_notifications_read_at",
        ),
    )
    op.execute(
        "CREATE INDEX idx_notifications_user ON notifications (user_id, created_at DESC, id DESC)"
    )
    op.execute(
        """
        CREATE INDEX idx_notifications_unread
        ON notifications (user_id, created_at DESC)
        WHERE NOT read
        """
    )


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("notification_subscriptions")
    op.drop_table("members")
