"""Scheduled push notifications awaiting delivery."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String

from clubhub.database import Base

SCHEDULE_STATUS_PENDING = "pending"


class ScheduledNotification(Base):
    """A push queued for ``send_at``; ``audience`` is "all", "subscribed" or a filter object."""

    __tablename__ = "scheduled_notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    send_at = Column(DateTime(timezone=True), nullable=False)
    payload = Column(JSON, nullable=False)
    audience = Column(JSON, nullable=False, default="subscribed")
    meta = Column(JSON, nullable=False, default=dict)
    status = Column(String(16), nullable=False, default=SCHEDULE_STATUS_PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(String(128), nullable=False)

    __table_args__ = (Index("idx_scheduled_created", created_at.desc(), id.desc()),)
