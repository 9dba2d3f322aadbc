"""
Tests for session tokens and sender authorization.
"""

from datetime import datetime, timedelta

from freezegun import freeze_time
from httpx import AsyncClient
from jose import jwt

from clubhub.auth.session import (
    Principal,
    create_session_token,
    decode_session_token,
)
from clubhub.config import settings


class TestSessionToken:
    def test_round_trip(self):
        principal = decode_session_token(create_session_token("u1", "mentor"))
        assert principal == Principal(user_id="u1", role="mentor")
        assert principal.can_send is True

    def test_expired_token_is_rejected(self):
        with freeze_time(datetime.now() - timedelta(days=settings.session_expire_days + 1)):
            token = create_session_token("u1", "admin")
        assert decode_session_token(token) is None

    def test_tampered_token_is_rejected(self):
        token = create_session_token("u1", "member")
        forged = jwt.encode(
            {**jwt.get_unverified_claims(token), "role": "admin"},
            "not-the-secret",
            algorithm="HS256",
        )
        assert decode_session_token(forged) is None

    def test_token_of_other_type_is_rejected(self):
        token = jwt.encode(
            {"sub": "u1", "role": "admin", "type": "refresh"},
            settings.session_secret,
            algorithm="HS256",
        )
        assert decode_session_token(token) is None

    def test_missing_role_defaults_to_member(self):
        token = jwt.encode(
            {"sub": "u1", "type": "session"},
            settings.session_secret,
            algorithm="HS256",
        )
        principal = decode_session_token(token)
        assert principal.role == "member"
        assert principal.can_send is False


class TestSenderAuthorization:
    """Authorization on POST /api/v1/notifications/send."""

    async def test_garbage_cookie_returns_401(self, async_client: AsyncClient, test_member: dict):
        response = await async_client.post(
            "/api/v1/notifications/send",
            json={"user_id": test_member["user_id"], "title": "T", "body": "B"},
            cookies={settings.session_cookie_name: "not-a-token"},
        )
        assert response.status_code == 401
        assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"

    async def test_wrong_push_secret_returns_401(
        self, async_client: AsyncClient, test_member: dict, monkeypatch
    ):
        monkeypatch.setattr(settings, "push_send_secret", "automation-secret-value")
        response = await async_client.post(
            "/api/v1/notifications/send",
            json={"user_id": test_member["user_id"], "title": "T", "body": "B"},
            headers={"X-Push-Secret": "wrong-secret"},
        )
        assert response.status_code == 401

    async def test_push_secret_ignored_when_unset(
        self, async_client: AsyncClient, test_member: dict, monkeypatch
    ):
        monkeypatch.setattr(settings, "push_send_secret", "")
        response = await async_client.post(
            "/api/v1/notifications/send",
            json={"user_id": test_member["user_id"], "title": "T", "body": "B"},
            headers={"X-Push-Secret": ""},
        )
        assert response.status_code == 401

    async def test_member_error_has_correct_format(
        self, async_client: AsyncClient, test_member: dict, session_cookies
    ):
        response = await async_client.post(
            "/api/v1/notifications/send",
            json={"user_id": test_member["user_id"], "title": "T", "body": "B"},
            cookies=session_cookies(test_member),
        )
        data = response.json()
        assert response.status_code == 403
        assert data["detail"]["error"]["code"] == "FORBIDDEN"
