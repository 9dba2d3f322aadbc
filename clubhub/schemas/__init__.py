"""Pydantic schemas for request/response validation."""

from clubhub.schemas.inbox import (
    InboxSummaryResponse,
    ListNotificationsResponse,
    MarkReadRequest,
    MarkReadResponse,
    NotificationItem,
)
from clubhub.schemas.preferences import (
    NotificationPreferences,
    PreferencesPatch,
    UpdatePreferencesRequest,
    UpdatePreferencesResponse,
)
from clubhub.schemas.schedule import (
    ScheduleCreatedResponse,
    ScheduledNotificationItem,
    ScheduleListResponse,
    ScheduleNotificationRequest,
)
from clubhub.schemas.send import SendNotificationRequest, SendNotificationResponse
from clubhub.schemas.subscriptions import (
    SubscribeRequest,
    SubscriptionResponse,
    UnsubscribeRequest,
)

__all__ = [
    "InboxSummaryResponse",
    "ListNotificationsResponse",
    "MarkReadRequest",
    "MarkReadResponse",
    "NotificationItem",
    "NotificationPreferences",
    "PreferencesPatch",
    "UpdatePreferencesRequest",
    "UpdatePreferencesResponse",
    "ScheduleCreatedResponse",
    "ScheduledNotificationItem",
    "ScheduleListResponse",
    "ScheduleNotificationRequest",
    "SendNotificationRequest",
    "SendNotificationResponse",
    "SubscribeRequest",
    "UnsubscribeRequest",
    "SubscriptionResponse",
]
