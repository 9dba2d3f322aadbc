"""Device subscription router."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.config import settings
from clubhub.database import get_db
from clubhub.middleware.rate_limit import limiter
from clubhub.schemas.subscriptions import (
    SubscribeRequest,
    SubscriptionResponse,
    UnsubscribeRequest,
)
from clubhub.services.tokens import TokenRegistry

router = APIRouter(prefix="/api/v1/notifications", tags=["Subscriptions"])


@router.post(
    "/subscribe",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.subscribe_rate_limit)
async def subscribe(
    request: Request,  # noqa: ARG001 - required by slowapi
    body: SubscribeRequest,
    db: AsyncSession = Depends(get_db),
) -> SubscriptionResponse:
    """
    Register a device token for the member.

    Idempotent: subscribing the same token twice keeps a single entry.
    """
    await TokenRegistry(db).subscribe(body.user_id, body.token)
    return SubscriptionResponse(ok=True)


@router.post(
    "/unsubscribe",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_200_OK,
)
async def unsubscribe(
    body: UnsubscribeRequest,
    db: AsyncSession = Depends(get_db),
) -> SubscriptionResponse:
    """Remove one device token, or every token when none is given."""
    await TokenRegistry(db).unsubscribe(body.user_id, body.token)
    return SubscriptionResponse(ok=True)
