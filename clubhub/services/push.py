"""
Push delivery through Firebase Cloud Messaging.

Credentials come from FIREBASE_CREDENTIALS_JSON (service account JSON) or
FIREBASE_CREDENTIALS_PATH. Without either, every send raises ProviderError so
dispatch records the failure instead of silently dropping it.
"""

import asyncio
import json
import logging
from functools import lru_cache
from typing import Any, Protocol
from urllib.parse import urljoin

import firebase_admin
import requests
from firebase_admin import credentials, exceptions, messaging
from google.auth import exceptions as auth_exceptions

from clubhub.config import Settings, settings
from clubhub.exceptions import ProviderError, TokenUnregistered

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "clubhub"


class PushProvider(Protocol):
    """External push service contract used by the dispatch service."""

    async def send(self, token: str, notification: dict[str, str], data: dict[str, str]) -> str:
        """Deliver to one device token and return the provider message id."""
        ...

    async def send_to_topic(
        self, topic: str, notification: dict[str, str], data: dict[str, str]
    ) -> str:
        """Deliver to every device subscribed to ``topic``."""
        ...


def _load_credentials(config: Settings) -> credentials.Certificate | None:
    if config.firebase_credentials_json:
        info = json.loads(config.firebase_credentials_json)
        # Keys pasted into env vars usually carry escaped newlines
        if isinstance(info.get("private_key"), str):
            info["private_key"] = info["private_key"].replace("\\n", "\n")
        return credentials.Certificate(info)
    if config.firebase_credentials_path:
        return credentials.Certificate(config.firebase_credentials_path)
    return None


class FirebasePushProvider:
    """PushProvider backed by firebase-admin's messaging client."""

    def __init__(self, app: firebase_admin.App | None, base_url: str = "http://localhost:3000"):
        self.app = app
        self.base_url = base_url

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "FirebasePushProvider":
        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            try:
                cred = _load_credentials(config)
            except (ValueError, OSError) as e:
                logger.warning("Failed to load Firebase credentials: %s", e)
                cred = None
            app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME) if cred else None
        if app is None:
            logger.warning("Firebase credentials not configured; push delivery disabled")
        return cls(app, base_url=config.portal_base_url)

    def _build_message(
        self, notification: dict[str, str], data: dict[str, str], **target: Any
    ) -> messaging.Message:
        link = urljoin(self.base_url, data.get("url", "/"))
        return messaging.Message(
            notification=messaging.Notification(
                title=notification["title"],
                body=notification["body"],
            ),
            data=data,
            webpush=messaging.WebpushConfig(
                notification=messaging.WebpushNotification(icon=notification.get("icon")),
                fcm_options=messaging.WebpushFCMOptions(link=link),
            ),
            **target,
        )

    async def _dispatch(self, message: messaging.Message) -> str:
        if self.app is None:
            raise ProviderError("Push provider is not configured")
        try:
            return await asyncio.to_thread(messaging.send, message, app=self.app)
        except (messaging.UnregisteredError, exceptions.InvalidArgumentError, exceptions.NotFoundError) as e:
            raise TokenUnregistered(str(e)) from e
        except (exceptions.FirebaseError, ValueError) as e:
            raise ProviderError(str(e)) from e
        except auth_exceptions.GoogleAuthError as e:
            # Bad or revoked service account credentials fail every token alike
            raise ProviderError(f"Push provider authentication failed: {e}") from e
        except requests.RequestException as e:
            raise ProviderError(f"Push provider unreachable: {e}") from e

    async def send(self, token: str, notification: dict[str, str], data: dict[str, str]) -> str:
        return await self._dispatch(self._build_message(notification, data, token=token))

    async def send_to_topic(
        self, topic: str, notification: dict[str, str], data: dict[str, str]
    ) -> str:
        return await self._dispatch(self._build_message(notification, data, topic=topic))


@lru_cache
def get_push_provider() -> PushProvider:
    """Get the process-wide push provider."""
    return FirebasePushProvider.from_settings(settings)
