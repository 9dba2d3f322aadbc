"""Token registry: which device push-tokens belong to which member."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.database import store_guard
from clubhub.exceptions import NotFound, ValidationError
from clubhub.models.member import DeviceToken, Member

logger = logging.getLogger(__name__)


class TokenRegistry:
    """Keeps ``Member.push_tokens`` and the subscription rows in step."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def subscribe(self, user_id: str, token: str) -> bool:
        """
        Register ``token`` for ``user_id``.

        Returns True if the token was newly added to the member's list. A token
        owned by another member is moved, since a device belongs to one member
        at a time.

        Raises:
            ValidationError: if the token is empty
            NotFound: if the member does not exist
        """
        if not token:
            raise ValidationError("token", "Field required")

        now = datetime.now(timezone.utc)
        async with store_guard("subscribe"):
            member = await self.db.get(Member, user_id)
            if member is None:
                raise NotFound(f"User '{user_id}' not found")

            mapping = await self.db.get(DeviceToken, token)
            if mapping is not None and mapping.user_id != user_id:
                await self._strip_from_previous_owner(mapping.user_id, token)

            tokens = list(member.push_tokens or [])
            added = token not in tokens
            if added:
                member.push_tokens = [*tokens, token]
                member.last_token_update = now

            if mapping is None:
                self.db.add(DeviceToken(token=token, user_id=user_id, subscribed_at=now, active=True))
            else:
                mapping.user_id = user_id
                mapping.active = True
                if added:
                    mapping.subscribed_at = now

            await self.db.commit()

        if added:
            logger.info("Subscribed new device for %s", user_id)
        return added

    async def unsubscribe(self, user_id: str, token: str | None = None) -> int:
        """
        Remove one token, or every token when ``token`` is None.

        Unknown members and members without tokens are a no-op. Returns the
        number of tokens removed from the member's list.
        """
        async with store_guard("unsubscribe"):
            member = await self.db.get(Member, user_id)
            if member is None:
                return 0

            tokens = list(member.push_tokens or [])
            if token is not None:
                removed = [t for t in tokens if t == token]
                if removed:
                    member.push_tokens = [t for t in tokens if t != token]
                mapping = await self.db.get(DeviceToken, token)
                if mapping is not None and mapping.user_id == user_id:
                    mapping.active = False
            else:
                removed = tokens
                member.push_tokens = []
                await self.db.execute(
                    update(DeviceToken)
                    .where(DeviceToken.user_id == user_id)
                    .values(active=False)
                    .execution_options(synchronize_session="fetch")
                )

            await self.db.commit()

        if removed:
            logger.info("Unsubscribed %d device(s) for %s", len(removed), user_id)
        return len(removed)

    async def active_tokens(self, user_id: str) -> list[str]:
        """Tokens in the member's list whose subscription is active, in subscription order."""
        async with store_guard("active_tokens"):
            member = await self.db.get(Member, user_id)
            if member is None:
                return []
            result = await self.db.execute(
                select(DeviceToken.token).where(
                    DeviceToken.user_id == user_id,
                    DeviceToken.active.is_(True),
                )
            )
            active = set(result.scalars().all())
        return [t for t in (member.push_tokens or []) if t in active]

    async def _strip_from_previous_owner(self, owner_id: str, token: str) -> None:
        previous = await self.db.get(Member, owner_id)
        if previous is not None:
            previous.push_tokens = [t for t in (previous.push_tokens or []) if t != token]
