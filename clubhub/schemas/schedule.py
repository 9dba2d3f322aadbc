"""Schemas for scheduled notifications."""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScheduleNotificationRequest(BaseModel):
    """Request to queue a push for later delivery."""

    model_config = ConfigDict(populate_by_name=True)

    send_at: datetime = Field(..., alias="sendAt", description="ISO 8601 delivery time")
    payload: dict[str, Any] = Field(..., min_length=1)
    audience: Literal["all", "subscribed"] | dict[str, Any] = "subscribed"
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("send_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ScheduleCreatedResponse(BaseModel):
    ok: bool
    id: int


class ScheduledNotificationItem(BaseModel):
    """A queued push as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    send_at: datetime
    payload: dict[str, Any]
    audience: str | dict[str, Any]
    meta: dict[str, Any]
    status: str
    created_at: datetime
    created_by: str


class ScheduleListResponse(BaseModel):
    """Most recently created schedules first."""

    items: list[ScheduledNotificationItem]
