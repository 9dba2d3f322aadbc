"""Device subscription schemas."""

from pydantic import BaseModel, Field


class SubscribeRequest(BaseModel):
    """Request to register a device push token."""

    user_id: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1, max_length=512, description="FCM registration token")


class UnsubscribeRequest(BaseModel):
    """Request to remove one device token, or all of them when token is omitted."""

    user_id: str = Field(..., min_length=1)
    token: str | None = Field(default=None, min_length=1, max_length=512)


class SubscriptionResponse(BaseModel):
    """Response for subscribe/unsubscribe."""

    ok: bool
