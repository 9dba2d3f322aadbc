"""Store for pushes queued for later delivery."""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.auth.session import Principal
from clubhub.database import store_guard
from clubhub.exceptions import PermissionDenied
from clubhub.models.schedule import SCHEDULE_STATUS_PENDING, ScheduledNotification

logger = logging.getLogger(__name__)

SCHEDULE_LIST_LIMIT = 200


class ScheduleService:
    """Creates and lists scheduled notifications for a sending principal."""

    def __init__(self, db: AsyncSession, principal: Principal):
        if not principal.can_send:
            raise PermissionDenied("Scheduling notifications requires an admin or mentor role")
        self.db = db
        self.principal = principal

    async def create(
        self,
        send_at: datetime,
        payload: dict[str, Any],
        audience: str | dict[str, Any] = "subscribed",
        meta: dict[str, Any] | None = None,
    ) -> ScheduledNotification:
        """Queue ``payload`` for ``send_at`` with status pending."""
        record = ScheduledNotification(
            send_at=send_at,
            payload=dict(payload),
            audience=audience,
            meta=dict(meta or {}),
            status=SCHEDULE_STATUS_PENDING,
            created_at=datetime.now(timezone.utc),
            created_by=self.principal.user_id,
        )
        async with store_guard("schedule"):
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        logger.info(
            "%s scheduled notification %d for %s",
            self.principal.user_id,
            record.id,
            send_at.isoformat(),
        )
        return record

    async def list_recent(self, limit: int = SCHEDULE_LIST_LIMIT) -> list[ScheduledNotification]:
        """Newest first by creation time."""
        stmt = (
            select(ScheduledNotification)
            .order_by(ScheduledNotification.created_at.desc(), ScheduledNotification.id.desc())
            .limit(limit)
        )
        async with store_guard("list_schedules"):
            result = await self.db.execute(stmt)
        return list(result.scalars().all())
