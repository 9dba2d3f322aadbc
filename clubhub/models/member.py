"""Member and DeviceToken models."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from clubhub.database import Base


class Member(Base):
    """Portal member.

    ``push_tokens`` mirrors the active rows in ``notification_subscriptions``;
    both are written together by the token registry.
    """

    __tablename__ = "members"

    id = Column(String(128), primary_key=True)
    email = Column(String, unique=True)
    display_name = Column(Text)
    role = Column(String(16), nullable=False, default="member", server_default="member")
    push_tokens = Column(JSON, nullable=False, default=list)
    last_token_update = Column(DateTime(timezone=True))
    notification_preferences = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True))

    subscriptions = relationship(
        "DeviceToken",
        back_populates="member",
        cascade="all, delete-orphan",
    )


class DeviceToken(Base):
    """Token -> member mapping for a push-capable device."""

    __tablename__ = "notification_subscriptions"

    token = Column(String(512), primary_key=True)
    user_id = Column(
        String(128),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    subscribed_at = Column(DateTime(timezone=True), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_subscriptions_user", user_id, active),)

    member = relationship("Member", back_populates="subscriptions")
