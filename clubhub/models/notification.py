"""Notification model for the inbox system."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from clubhub.config import settings
from clubhub.database import Base

NOTIFICATION_SCHEMA_VERSION = 1


class Notification(Base):
    """Inbox notification record; ``read_at`` is set iff ``read`` is true."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(128),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=False)
    url = Column(Text, nullable=False, default="/")
    icon = Column(Text)
    tag = Column(String(64))
    category = Column(String(32))  # "events", "projects" or "admin"
    data = Column(JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    read_at = Column(DateTime(timezone=True))
    schema_version = Column(Integer, nullable=False, default=NOTIFICATION_SCHEMA_VERSION)

    __table_args__ = (
        CheckConstraint(
            "(read AND read_at IS NOT NULL) OR (NOT read AND read_at IS NULL)",
            name="ck_notifications_read_at",
        ),
        Index("idx_notifications_user", user_id, created_at.desc(), id.desc()),
        Index(
            "idx_notifications_unread",
            user_id,
            created_at.desc(),
            postgresql_where=(read.is_(False)),
        ),
    )

    member = relationship("Member", foreign_keys=[user_id])


def build_notification(
    user_id: str,
    title: str,
    body: str,
    *,
    url: str | None = None,
    icon: str | None = None,
    tag: str | None = None,
    category: str | None = None,
    data: dict[str, Any] | None = None,
    created_at: datetime | None = None,
) -> Notification:
    """Construct a new unread record with every optional field defaulted."""
    return Notification(
        user_id=user_id,
        title=title,
        body=body,
        url=url or settings.default_notification_url,
        icon=icon or settings.default_notification_icon,
        tag=tag,
        category=category,
        data=dict(data or {}),
        read=False,
        read_at=None,
        created_at=created_at or datetime.now(timezone.utc),
        schema_version=NOTIFICATION_SCHEMA_VERSION,
    )
