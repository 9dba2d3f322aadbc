"""Notification preference schemas."""

from pydantic import BaseModel, ConfigDict, Field


class NotificationPreferences(BaseModel):
    """Full set of preference flags."""

    push: bool = True
    events: bool = True
    projects: bool = True
    admin: bool = True
    email: bool = True


class PreferencesPatch(BaseModel):
    """Subset of flags to change; omitted flags keep their stored value."""

    model_config = ConfigDict(extra="forbid")

    push: bool | None = None
    events: bool | None = None
    projects: bool | None = None
    admin: bool | None = None
    email: bool | None = None


class UpdatePreferencesRequest(BaseModel):
    """Request to update preferences."""

    user_id: str = Field(..., min_length=1)
    preferences: PreferencesPatch


class UpdatePreferencesResponse(BaseModel):
    """Response for preference updates."""

    ok: bool
    preferences: NotificationPreferences
