"""Inbox router for notifications."""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.database import get_db
from clubhub.schemas.inbox import (
    InboxSummaryResponse,
    ListNotificationsResponse,
    MarkReadRequest,
    MarkReadResponse,
    NotificationItem,
)
from clubhub.services.cache import InboxCache, InboxCacheKey, get_inbox_cache
from clubhub.services.store import NotificationStore

router = APIRouter(prefix="/api/v1/notifications", tags=["Inbox"])


# --- List Notifications ---


@router.get(
    "",
    response_model=ListNotificationsResponse,
    status_code=status.HTTP_200_OK,
)
async def list_notifications(
    user_id: str = Query(..., min_length=1, description="Recipient member id"),
    limit: int = Query(default=20, ge=1, description="Items to return (capped server-side)"),
    unread_only: bool = Query(default=False, description="Show only unread notifications"),
    db: AsyncSession = Depends(get_db),
    cache: InboxCache = Depends(get_inbox_cache),
) -> Any:
    """
    List a member's notifications, newest first.

    Results are cached briefly per query shape and dropped on any write
    for the member.
    """
    store = NotificationStore(db, cache)
    key = InboxCacheKey(user_id=user_id, limit=store.clamp_limit(limit), unread_only=unread_only)

    cached = cache.get(key)
    if cached is not None:
        return cached

    page = await store.list_notifications(user_id, limit=key.limit, unread_only=unread_only)
    response = ListNotificationsResponse(
        notifications=[NotificationItem.from_model(n) for n in page.notifications],
        unread_count=page.unread_count,
        total=len(page.notifications),
    )
    cache.put(key, response.model_dump())
    return response


# --- Inbox Summary ---


@router.get(
    "/summary",
    response_model=InboxSummaryResponse,
    status_code=status.HTTP_200_OK,
)
async def get_inbox_summary(
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
) -> InboxSummaryResponse:
    """Unread and total counts for the notification bell."""
    unread_count, total_count = await NotificationStore(db).summary(user_id)
    return InboxSummaryResponse(unread_count=unread_count, total_count=total_count)


# --- Mark Notifications as Read ---


@router.patch(
    "",
    response_model=MarkReadResponse,
    status_code=status.HTTP_200_OK,
)
async def mark_notifications_read(
    body: MarkReadRequest,
    db: AsyncSession = Depends(get_db),
    cache: InboxCache = Depends(get_inbox_cache),
) -> MarkReadResponse:
    """Mark the given notifications, or all unread ones, as read."""
    updated = await NotificationStore(db, cache).mark_read(
        body.user_id,
        notification_ids=body.notification_ids,
        mark_all=body.mark_all_as_read,
    )
    return MarkReadResponse(updated=updated)
