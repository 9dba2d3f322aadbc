"""Notification preferences router."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.database import get_db
from clubhub.schemas.preferences import (
    NotificationPreferences,
    UpdatePreferencesRequest,
    UpdatePreferencesResponse,
)
from clubhub.services.preferences import PreferenceService

router = APIRouter(prefix="/api/v1/notifications/preferences", tags=["Preferences"])


@router.get(
    "",
    response_model=NotificationPreferences,
    status_code=status.HTTP_200_OK,
)
async def get_preferences(
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
) -> NotificationPreferences:
    """Get a member's preferences; unset flags default to enabled."""
    preferences = await PreferenceService(db).get(user_id)
    return NotificationPreferences(**preferences)


@router.patch(
    "",
    response_model=UpdatePreferencesResponse,
    status_code=status.HTTP_200_OK,
)
async def update_preferences(
    body: UpdatePreferencesRequest,
    db: AsyncSession = Depends(get_db),
) -> UpdatePreferencesResponse:
    """Merge the given flags into the member's stored preferences."""
    changes = body.preferences.model_dump(exclude_none=True)
    preferences = await PreferenceService(db).update(body.user_id, changes)
    return UpdatePreferencesResponse(ok=True, preferences=NotificationPreferences(**preferences))
