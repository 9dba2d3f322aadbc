"""
Tests for inbox endpoints:
- GET /api/v1/notifications
- GET /api/v1/notifications/summary
- PATCH /api/v1/notifications
"""

from datetime import timedelta

from httpx import AsyncClient

from clubhub.services.cache import InboxCache, InboxCacheKey
from tests.factories import BASE_TIME, create_notifications


class TestListNotifications:
    """GET /api/v1/notifications tests."""

    async def test_list_returns_200(self, async_client: AsyncClient, test_member: dict):
        """A member can list their notifications."""
        response = await async_client.get(
            "/api/v1/notifications", params={"user_id": test_member["user_id"]}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["notifications"] == []
        assert data["unread_count"] == 0
        assert data["total"] == 0

    async def test_list_requires_user_id(self, async_client: AsyncClient):
        """Missing user_id is a validation error."""
        response = await async_client.get("/api/v1/notifications")
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_list_newest_first(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """Notifications are ordered by created_at descending."""
        await create_notifications(db_session, test_member["user_id"], 3)

        response = await async_client.get(
            "/api/v1/notifications", params={"user_id": test_member["user_id"]}
        )
        titles = [n["title"] for n in response.json()["notifications"]]
        assert titles == ["Notice 2", "Notice 1", "Notice 0"]

    async def test_list_respects_limit(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """Page is truncated to limit but unread_count is the true total."""
        await create_notifications(db_session, test_member["user_id"], 6)

        response = await async_client.get(
            "/api/v1/notifications",
            params={"user_id": test_member["user_id"], "limit": 4},
        )
        data = response.json()
        assert len(data["notifications"]) == 4
        assert data["unread_count"] == 6
        assert data["total"] == 4

    async def test_list_caps_limit_server_side(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """A limit above the server maximum is clamped instead of rejected."""
        await create_notifications(db_session, test_member["user_id"], 45)

        response = await async_client.get(
            "/api/v1/notifications",
            params={"user_id": test_member["user_id"], "limit": 500},
        )
        assert response.status_code == 200
        assert len(response.json()["notifications"]) == 40

    async def test_unread_only_filters_before_truncation(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """3 unread among 10 newer read notifications are all returned with limit=5."""
        user_id = test_member["user_id"]
        await create_notifications(db_session, user_id, 3, title_prefix="Unread")
        await create_notifications(
            db_session, user_id, 10, read=True, start=BASE_TIME + timedelta(hours=1)
        )

        response = await async_client.get(
            "/api/v1/notifications",
            params={"user_id": user_id, "limit": 5, "unread_only": "true"},
        )
        data = response.json()
        titles = [n["title"] for n in data["notifications"]]
        assert titles == ["Unread 2", "Unread 1", "Unread 0"]
        assert data["unread_count"] == 3

    async def test_list_only_returns_own_notifications(
        self, async_client: AsyncClient, test_member: dict, second_member: dict, db_session
    ):
        await create_notifications(db_session, second_member["user_id"], 2)

        response = await async_client.get(
            "/api/v1/notifications", params={"user_id": test_member["user_id"]}
        )
        assert response.json()["notifications"] == []

    async def test_list_item_defaults(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """Stored records expose defaulted url/icon and null read_at."""
        await create_notifications(db_session, test_member["user_id"], 1)

        response = await async_client.get(
            "/api/v1/notifications", params={"user_id": test_member["user_id"]}
        )
        item = response.json()["notifications"][0]
        assert item["url"] == "/"
        assert item["icon"] == "/icon-192x192.png"
        assert item["read"] is False
        assert item["read_at"] is None
        assert item["data"] == {}

    async def test_list_populates_cache(
        self,
        async_client: AsyncClient,
        test_member: dict,
        inbox_cache: InboxCache,
    ):
        user_id = test_member["user_id"]
        await async_client.get(
            "/api/v1/notifications", params={"user_id": user_id, "limit": 10}
        )
        assert InboxCacheKey(user_id, 10, False) in inbox_cache

    async def test_cached_page_served_until_write(
        self,
        async_client: AsyncClient,
        test_member: dict,
        inbox_cache: InboxCache,
    ):
        """A cached page is returned as-is while fresh."""
        user_id = test_member["user_id"]
        sentinel = {"notifications": [], "unread_count": 99, "total": 0}
        inbox_cache.put(InboxCacheKey(user_id, 20, False), sentinel)

        response = await async_client.get("/api/v1/notifications", params={"user_id": user_id})
        assert response.json()["unread_count"] == 99


class TestInboxSummary:
    """GET /api/v1/notifications/summary tests."""

    async def test_summary_counts(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        await create_notifications(db_session, test_member["user_id"], 2)
        await create_notifications(db_session, test_member["user_id"], 3, read=True)

        response = await async_client.get(
            "/api/v1/notifications/summary", params={"user_id": test_member["user_id"]}
        )
        assert response.status_code == 200
        assert response.json() == {"unread_count": 2, "total_count": 5}


class TestMarkRead:
    """PATCH /api/v1/notifications tests."""

    async def test_mark_specific_ids(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        records = await create_notifications(db_session, test_member["user_id"], 3)

        response = await async_client.patch(
            "/api/v1/notifications",
            json={
                "user_id": test_member["user_id"],
                "notification_ids": [str(records[0].id), str(records[1].id)],
            },
        )
        assert response.status_code == 200
        assert response.json() == {"updated": 2}

        listing = await async_client.get(
            "/api/v1/notifications", params={"user_id": test_member["user_id"]}
        )
        data = listing.json()
        assert data["unread_count"] == 1
        by_id = {n["id"]: n for n in data["notifications"]}
        assert by_id[str(records[0].id)]["read"] is True
        assert by_id[str(records[0].id)]["read_at"] is not None
        assert by_id[str(records[2].id)]["read_at"] is None

    async def test_mark_all_as_read(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """After mark_all_as_read, an unread-only listing is empty."""
        await create_notifications(db_session, test_member["user_id"], 4)
        await create_notifications(db_session, test_member["user_id"], 2, read=True)

        response = await async_client.patch(
            "/api/v1/notifications",
            json={"user_id": test_member["user_id"], "mark_all_as_read": True},
        )
        assert response.json() == {"updated": 4}

        listing = await async_client.get(
            "/api/v1/notifications",
            params={"user_id": test_member["user_id"], "unread_only": "true"},
        )
        assert listing.json()["notifications"] == []
        assert listing.json()["unread_count"] == 0

    async def test_mark_read_requires_ids_or_all(
        self, async_client: AsyncClient, test_member: dict
    ):
        response = await async_client.patch(
            "/api/v1/notifications", json={"user_id": test_member["user_id"]}
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["field"] == "notification_ids"

    async def test_mark_read_requires_user_id(self, async_client: AsyncClient):
        response = await async_client.patch(
            "/api/v1/notifications", json={"mark_all_as_read": True}
        )
        assert response.status_code == 422

    async def test_mark_read_ignores_other_members_ids(
        self, async_client: AsyncClient, test_member: dict, second_member: dict, db_session
    ):
        others = await create_notifications(db_session, second_member["user_id"], 1)

        response = await async_client.patch(
            "/api/v1/notifications",
            json={"user_id": test_member["user_id"], "notification_ids": [str(others[0].id)]},
        )
        assert response.json() == {"updated": 0}

        summary = await async_client.get(
            "/api/v1/notifications/summary", params={"user_id": second_member["user_id"]}
        )
        assert summary.json()["unread_count"] == 1

    async def test_mark_read_invalidates_cached_listing(
        self, async_client: AsyncClient, test_member: dict, db_session
    ):
        """A listing right after a write never reflects pre-write state."""
        user_id = test_member["user_id"]
        await create_notifications(db_session, user_id, 2)

        before = await async_client.get("/api/v1/notifications", params={"user_id": user_id})
        assert before.json()["unread_count"] == 2

        await async_client.patch(
            "/api/v1/notifications", json={"user_id": user_id, "mark_all_as_read": True}
        )

        after = await async_client.get("/api/v1/notifications", params={"user_id": user_id})
        assert after.json()["unread_count"] == 0
        assert all(n["read"] for n in after.json()["notifications"])
