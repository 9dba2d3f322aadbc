"""Notification store: append-only inbox records with read-state transitions."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.config import settings
from clubhub.database import store_guard
from clubhub.exceptions import ValidationError
from clubhub.models.notification import Notification
from clubhub.services.cache import InboxCache

logger = logging.getLogger(__name__)


@dataclass
class InboxPage:
    notifications: list[Notification]
    unread_count: int


def _parse_ids(notification_ids: list[str]) -> list[int]:
    """Keep only ids that can name a record; anything else cannot match."""
    parsed = []
    for raw in notification_ids:
        try:
            parsed.append(int(raw))
        except (TypeError, ValueError):
            continue
    return parsed


class NotificationStore:
    """Reads and writes notification records for one request.

    Every write commits before returning and then drops the member's inbox
    cache entries.
    """

    def __init__(self, db: AsyncSession, cache: InboxCache | None = None):
        self.db = db
        self.cache = cache

    @staticmethod
    def clamp_limit(limit: int) -> int:
        return max(1, min(limit, settings.inbox_max_limit))

    async def append(self, record: Notification) -> Notification:
        """Persist a new record. Id and creation time are assigned here if absent."""
        for field in ("user_id", "title", "body"):
            if not getattr(record, field, None):
                raise ValidationError(field, "Field required")
        if record.created_at is None:
            record.created_at = datetime.now(timezone.utc)
        record.read = False
        record.read_at = None

        async with store_guard("append"):
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)

        self._invalidate(record.user_id)
        return record

    async def list_notifications(
        self,
        user_id: str,
        limit: int = 20,
        unread_only: bool = False,
    ) -> InboxPage:
        """Newest-first page of a member's notifications plus their true unread count."""
        if not user_id:
            raise ValidationError("user_id", "Field required")
        limit = self.clamp_limit(limit)

        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)

        async with store_guard("list"):
            result = await self.db.execute(query)
            notifications = list(result.scalars().all())
            unread_count = await self._count(user_id, unread_only=True)

        return InboxPage(notifications=notifications, unread_count=unread_count)

    async def summary(self, user_id: str) -> tuple[int, int]:
        """Return ``(unread_count, total_count)`` for a member."""
        async with store_guard("summary"):
            unread_count = await self._count(user_id, unread_only=True)
            total_count = await self._count(user_id, unread_only=False)
        return unread_count, total_count

    async def mark_read(
        self,
        user_id: str,
        notification_ids: list[str] | None = None,
        mark_all: bool = False,
    ) -> int:
        """
        Transition records to read in a single commit.

        With ``mark_all`` every unread record of the member is marked and the
        count of newly read records is returned. With ids, every id owned by
        the member is counted, but records that are already read keep their
        original ``read_at``.
        """
        if not user_id:
            raise ValidationError("user_id", "Field required")
        if not mark_all and notification_ids is None:
            raise ValidationError("notification_ids", "Provide notification_ids or mark_all_as_read")
        if not mark_all and len(notification_ids) > settings.max_batch_size:
            raise ValidationError(
                "notification_ids",
                f"At most {settings.max_batch_size} ids can be marked at once",
            )

        now = datetime.now(timezone.utc)
        async with store_guard("mark_read"):
            if mark_all:
                updated = await self._mark_all(user_id, now)
            else:
                updated = await self._mark_ids(user_id, _parse_ids(notification_ids), now)
            await self.db.commit()

        self._invalidate(user_id)
        return updated

    async def _mark_all(self, user_id: str, now: datetime) -> int:
        result = await self.db.execute(
            select(Notification).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        )
        unread = list(result.scalars().all())
        for notification in unread:
            notification.read = True
            notification.read_at = now
        return len(unread)

    async def _mark_ids(self, user_id: str, ids: list[int], now: datetime) -> int:
        if not ids:
            return 0
        result = await self.db.execute(
            select(Notification).where(
                Notification.user_id == user_id,
                Notification.id.in_(ids),
            )
        )
        found = list(result.scalars().all())
        for notification in found:
            if not notification.read:
                notification.read = True
                notification.read_at = now
        return len(found)

    async def _count(self, user_id: str, unread_only: bool) -> int:
        query = select(func.count(Notification.id)).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        result = await self.db.execute(query)
        return result.scalar() or 0

    def _invalidate(self, user_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate(user_id)
