"""Inbox-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, Field

from clubhub.models.notification import Notification


class InboxSummaryResponse(BaseModel):
    """Response for inbox summary."""

    unread_count: int
    total_count: int


class NotificationItem(BaseModel):
    """Single notification item."""

    id: str
    user_id: str
    title: str
    body: str
    url: str
    icon: str | None
    tag: str | None
    category: str | None
    data: dict[str, Any]
    read: bool
    created_at: str
    read_at: str | None

    @classmethod
    def from_model(cls, notification: Notification) -> "NotificationItem":
        return cls(
            id=str(notification.id),
            user_id=notification.user_id,
            title=notification.title,
            body=notification.body,
            url=notification.url,
            icon=notification.icon,
            tag=notification.tag,
            category=notification.category,
            data=notification.data or {},
            read=notification.read,
            created_at=notification.created_at.isoformat(),
            read_at=notification.read_at.isoformat() if notification.read_at else None,
        )


class ListNotificationsResponse(BaseModel):
    """Response for listing notifications."""

    notifications: list[NotificationItem]
    unread_count: int
    total: int = Field(..., description="Number of notifications in this page")


class MarkReadRequest(BaseModel):
    """Request to mark specific notifications, or all of them, as read."""

    user_id: str = Field(..., min_length=1)
    notification_ids: list[str] | None = None
    mark_all_as_read: bool = False


class MarkReadResponse(BaseModel):
    """Response for marking notifications as read."""

    updated: int
