"""Per-member notification preferences."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.database import store_guard
from clubhub.exceptions import NotFound, ValidationError
from clubhub.models.member import Member

DEFAULT_PREFERENCES: dict[str, bool] = {
    "push": True,
    "events": True,
    "projects": True,
    "admin": True,
    "email": True,
}


def resolve_preferences(stored: dict[str, Any] | None) -> dict[str, bool]:
    """Stored flags layered over the defaults."""
    return {**DEFAULT_PREFERENCES, **(stored or {})}


def allows(preferences: dict[str, Any], category: str | None) -> bool:
    """Whether a message of ``category`` may be delivered under ``preferences``.

    ``push`` is a master switch: when it is off nothing is delivered.
    """
    if preferences.get("push") is False:
        return False
    if category is None:
        return True
    return preferences.get(category) is not False


class PreferenceService:
    """Read and shallow-merge member preferences."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> dict[str, bool]:
        async with store_guard("get_preferences"):
            member = await self.db.get(Member, user_id)
        if member is None:
            raise NotFound(f"User '{user_id}' not found")
        return resolve_preferences(member.notification_preferences)

    async def update(self, user_id: str, changes: dict[str, bool]) -> dict[str, bool]:
        """Merge ``changes`` over the current preferences; unspecified keys keep their value."""
        if not changes:
            raise ValidationError("preferences", "At least one preference is required")

        async with store_guard("update_preferences"):
            member = await self.db.get(Member, user_id)
            if member is None:
                raise NotFound(f"User '{user_id}' not found")

            merged = {**resolve_preferences(member.notification_preferences), **changes}
            member.notification_preferences = merged
            member.updated_at = datetime.now(timezone.utc)
            await self.db.commit()

        return merged
