"""Database models for the club portal notification service."""

from clubhub.models.member import DeviceToken, Member
from clubhub.models.notification import Notification, build_notification
from clubhub.models.schedule import ScheduledNotification

__all__ = [
    "Member",
    "DeviceToken",
    "Notification",
    "build_notification",
    "ScheduledNotification",
]
