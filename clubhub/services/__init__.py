"""Services for the club portal notification API."""

from clubhub.services.cache import InboxCache, InboxCacheKey, get_inbox_cache
from clubhub.services.dispatch import DeliveryFailure, DispatchResult, DispatchService, PushMessage
from clubhub.services.preferences import PreferenceService
from clubhub.services.push import FirebasePushProvider, PushProvider, get_push_provider
from clubhub.services.schedule import ScheduleService
from clubhub.services.store import InboxPage, NotificationStore
from clubhub.services.tokens import TokenRegistry

__all__ = [
    "InboxCache",
    "InboxCacheKey",
    "get_inbox_cache",
    "DeliveryFailure",
    "DispatchResult",
    "DispatchService",
    "PushMessage",
    "PreferenceService",
    "FirebasePushProvider",
    "PushProvider",
    "get_push_provider",
    "ScheduleService",
    "InboxPage",
    "NotificationStore",
    "TokenRegistry",
]
