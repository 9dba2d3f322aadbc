"""
Dispatch service: fan a message out to members' devices or a provider topic.

Delivery is best-effort per device. A failing token is recorded in the result
and never stops delivery to the remaining tokens or members. Each targeted
member gets exactly one inbox record, written after every push attempt for
that member has finished.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from clubhub.auth.session import Principal
from clubhub.config import settings
from clubhub.database import store_guard
from clubhub.exceptions import (
    NotFound,
    PermissionDenied,
    ProviderError,
    TokenUnregistered,
    ValidationError,
)
from clubhub.models.member import Member
from clubhub.models.notification import build_notification
from clubhub.services.cache import InboxCache
from clubhub.services.preferences import allows, resolve_preferences
from clubhub.services.push import PushProvider
from clubhub.services.store import NotificationStore
from clubhub.services.tokens import TokenRegistry

logger = logging.getLogger(__name__)


@dataclass
class PushMessage:
    title: str
    body: str
    url: str | None = None
    icon: str | None = None
    tag: str | None = None
    category: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def notification_payload(self) -> dict[str, str]:
        return {
            "title": self.title,
            "body": self.body,
            "icon": self.icon or settings.default_notification_icon,
        }

    def data_payload(self) -> dict[str, str]:
        # FCM data values must be strings
        payload = {key: str(value) for key, value in self.data.items()}
        payload["url"] = self.url or settings.default_notification_url
        if self.tag:
            payload["tag"] = self.tag
        return payload


@dataclass(frozen=True)
class DeliveryFailure:
    item: str
    reason: str


@dataclass
class DispatchResult:
    """Per-target outcome of a dispatch; partial failure is the normal case."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[DeliveryFailure] = field(default_factory=list)

    def merge(self, other: "DispatchResult") -> "DispatchResult":
        self.succeeded.extend(other.succeeded)
        self.failed.extend(other.failed)
        return self

    def to_summary(self) -> dict[str, Any]:
        return {
            "success": len(self.succeeded),
            "failed": len(self.failed),
            "errors": [f"{failure.item}: {failure.reason}" for failure in self.failed],
        }


class DispatchService:
    """Sends notifications on behalf of an already-authorized principal."""

    def __init__(
        self,
        db: AsyncSession,
        provider: PushProvider,
        principal: Principal,
        cache: InboxCache | None = None,
    ):
        if not principal.can_send:
            raise PermissionDenied("Sending notifications requires an admin or mentor role")
        self.db = db
        self.provider = provider
        self.principal = principal
        self.registry = TokenRegistry(db)
        self.store = NotificationStore(db, cache)

    async def send_to_users(self, user_ids: list[str], message: PushMessage) -> DispatchResult:
        """Push to every active device of each member and record one inbox entry per member."""
        _validate(message)
        result = DispatchResult()
        for user_id in dict.fromkeys(user_ids):
            try:
                result.merge(await self._send_to_user(user_id, message))
            except NotFound:
                logger.info("Skipping notification for unknown user %s", user_id)
        logger.info(
            "%s sent '%s' to %d user(s): %d delivered, %d failed",
            self.principal.user_id,
            message.title,
            len(user_ids),
            len(result.succeeded),
            len(result.failed),
        )
        return result

    async def send_to_topic(self, topic: str, message: PushMessage) -> DispatchResult:
        """Broadcast to a provider topic. No inbox record is written."""
        _validate(message)
        result = DispatchResult()
        item = f"topic {topic}"
        try:
            await self.provider.send_to_topic(
                topic, message.notification_payload(), message.data_payload()
            )
            result.succeeded.append(item)
        except ProviderError as e:
            logger.warning("Topic push to %s failed: %s", topic, e)
            result.failed.append(DeliveryFailure(item=item, reason=e.message))
        except Exception as e:
            logger.exception("Unexpected error pushing to topic %s", topic)
            result.failed.append(DeliveryFailure(item=item, reason=str(e) or type(e).__name__))
        return result

    async def send(
        self,
        message: PushMessage,
        user_ids: list[str] | None = None,
        topic: str | None = None,
    ) -> DispatchResult:
        """Route to member and/or topic delivery; both may be requested at once."""
        _validate(message)
        if not user_ids and not topic:
            raise ValidationError("user_ids", "Provide user_id, user_ids or topic")
        result = DispatchResult()
        if user_ids:
            result.merge(await self.send_to_users(user_ids, message))
        if topic:
            result.merge(await self.send_to_topic(topic, message))
        return result

    async def _send_to_user(self, user_id: str, message: PushMessage) -> DispatchResult:
        async with store_guard("load_member"):
            member = await self.db.get(Member, user_id)
        if member is None:
            raise NotFound(f"User '{user_id}' not found")

        if not allows(resolve_preferences(member.notification_preferences), message.category):
            logger.info(
                "User %s has disabled %s notifications", user_id, message.category or "push"
            )
            return DispatchResult()

        tokens = await self.registry.active_tokens(user_id)
        outcomes = await asyncio.gather(*(self._push(token, message) for token in tokens))

        result = DispatchResult()
        unregistered = []
        for token, error in zip(tokens, outcomes):
            if error is None:
                result.succeeded.append(token)
                continue
            result.failed.append(DeliveryFailure(item=token, reason=error.message))
            if isinstance(error, TokenUnregistered):
                unregistered.append(token)

        if settings.prune_unregistered_tokens:
            for token in unregistered:
                await self.registry.unsubscribe(user_id, token)

        await self.store.append(
            build_notification(
                user_id,
                message.title,
                message.body,
                url=message.url,
                icon=message.icon,
                tag=message.tag,
                category=message.category,
                data=message.data,
            )
        )
        return result

    async def _push(self, token: str, message: PushMessage) -> ProviderError | None:
        try:
            await self.provider.send(token, message.notification_payload(), message.data_payload())
        except ProviderError as e:
            logger.warning("Push to token %s... failed: %s", token[:12], e)
            return e
        except Exception as e:
            logger.exception("Unexpected error pushing to token %s...", token[:12])
            return ProviderError(str(e) or type(e).__name__)
        return None


def _validate(message: PushMessage) -> None:
    if not message.title:
        raise ValidationError("title", "Field required")
    if not message.body:
        raise ValidationError("body", "Field required")
