"""Router for sending push notifications (admins and mentors only)."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.auth.session import Principal, require_sender
from clubhub.config import settings
from clubhub.database import get_db
from clubhub.middleware.rate_limit import limiter
from clubhub.schemas.send import SendNotificationRequest, SendNotificationResponse
from clubhub.services.cache import InboxCache, get_inbox_cache
from clubhub.services.dispatch import DispatchService, PushMessage
from clubhub.services.push import PushProvider, get_push_provider

router = APIRouter(prefix="/api/v1/notifications", tags=["Send"])


@router.post(
    "/send",
    response_model=SendNotificationResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.send_rate_limit)
async def send_notification(
    request: Request,  # noqa: ARG001 - required by slowapi
    body: SendNotificationRequest,
    principal: Principal = Depends(require_sender),
    db: AsyncSession = Depends(get_db),
    provider: PushProvider = Depends(get_push_provider),
    cache: InboxCache = Depends(get_inbox_cache),
) -> SendNotificationResponse:
    """
    Push a notification to members and/or a topic.

    Per-device failures are reported in the response rather than failing
    the request.
    """
    message = PushMessage(
        title=body.title,
        body=body.body,
        url=body.url,
        icon=body.icon,
        tag=body.tag,
        category=body.category,
        data=body.data,
    )
    service = DispatchService(db, provider, principal, cache)
    result = await service.send(message, user_ids=body.target_user_ids(), topic=body.topic)
    return SendNotificationResponse(**result.to_summary())
