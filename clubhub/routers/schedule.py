"""Router for scheduling pushes (admins and mentors only)."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.auth.session import Principal, require_sender
from clubhub.config import settings
from clubhub.database import get_db
from clubhub.middleware.rate_limit import limiter
from clubhub.schemas.schedule import (
    ScheduleCreatedResponse,
    ScheduledNotificationItem,
    ScheduleListResponse,
    ScheduleNotificationRequest,
)
from clubhub.services.schedule import ScheduleService

router = APIRouter(prefix="/api/v1/notifications/schedule", tags=["Schedule"])


@router.post(
    "",
    response_model=ScheduleCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.send_rate_limit)
async def schedule_notification(
    request: Request,  # noqa: ARG001 - required by slowapi
    body: ScheduleNotificationRequest,
    principal: Principal = Depends(require_sender),
    db: AsyncSession = Depends(get_db),
) -> ScheduleCreatedResponse:
    """Queue a push for delivery at ``sendAt``."""
    record = await ScheduleService(db, principal).create(
        body.send_at, body.payload, audience=body.audience, meta=body.meta
    )
    return ScheduleCreatedResponse(ok=True, id=record.id)


@router.get("", response_model=ScheduleListResponse)
async def list_scheduled_notifications(
    principal: Principal = Depends(require_sender),
    db: AsyncSession = Depends(get_db),
) -> ScheduleListResponse:
    """The 200 most recently created schedules."""
    records = await ScheduleService(db, principal).list_recent()
    return ScheduleListResponse(
        items=[ScheduledNotificationItem.model_validate(record) for record in records]
    )
