"""Schemas for sending notifications."""

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

Category = Literal["events", "projects", "admin"]


class SendNotificationRequest(BaseModel):
    """Request to push a notification to members and/or a topic."""

    user_id: str | None = Field(default=None, min_length=1)
    user_ids: list[str] | None = Field(default=None, max_length=500)
    topic: str | None = Field(default=None, min_length=1, pattern=r"^[a-zA-Z0-9\-_.~%]+$")
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=2000)
    url: str | None = None
    icon: str | None = None
    tag: str | None = Field(default=None, max_length=64)
    category: Category | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_target(self) -> "SendNotificationRequest":
        if not (self.user_id or self.user_ids or self.topic):
            raise ValueError("Provide user_id, user_ids or topic")
        return self

    def target_user_ids(self) -> list[str]:
        """``user_id`` followed by ``user_ids``, duplicates removed."""
        targets = [self.user_id] if self.user_id else []
        return list(dict.fromkeys([*targets, *(self.user_ids or [])]))


class SendNotificationResponse(BaseModel):
    """Aggregate delivery result."""

    success: int
    failed: int
    errors: list[str]
