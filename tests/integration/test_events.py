"""
Integration tests for events endpoints.
Tests event creation, listing, lookup by slug and partial updates.
"""
import pytest
from httpx import AsyncClient

from app.main import app
from app.db.session import get_session, database
from app.api.routes.events import get_event_service


@pytest.mark.integration
@pytest.mark.asyncio
class TestGetEventBySlug:
    """Test GET /api/events/{slug}."""

    async def test_existing_slug_returns_event(self, client: AsyncClient, test_event):
        event_id = str(test_event.id)

        response = await client.get("/api/events/my-talk")

        assert response.status_code == 200
        event = response.json()["event"]
        assert event["id"] == event_id
        assert event["slug"] == "my-talk"
        assert event["title"] == "My Talk"
        assert event["date"] == "2025-11-07"
        assert event["time"] == "09:00-18:00"
        assert event["agenda"] == ["Registration", "Keynote", "Workshops"]
        assert event["tags"] == ["python", "async"]
        assert "createdAt" in event and "updatedAt" in event

    async def test_slug_is_decoded_trimmed_and_lowercased(self, client: AsyncClient, test_event):
        response = await client.get("/api/events/%20My-Talk%20")

        assert response.status_code == 200
        assert response.json()["event"]["slug"] == "my-talk"

    async def test_unknown_slug_returns_404(self, client: AsyncClient):
        response = await client.get("/api/events/no-such-event")

        assert response.status_code == 404
        assert response.json() == {"message": "Event not found for slug: no-such-event"}

    @pytest.mark.parametrize("raw", ["My%20Talk!", "my_talk", "my--talk", "-my-talk"])
    async def test_malformed_slug_returns_400_without_touching_store(self, client: AsyncClient, db_session, raw):
        sessions_opened = []

        async def tracking_session():
            sessions_opened.append(True)
            yield db_session

        app.dependency_overrides[get_session] = tracking_session

        response = await client.get(f"/api/events/{raw}")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid slug format"}
        assert sessions_opened == []

    async def test_blank_slug_returns_400(self, client: AsyncClient):
        response = await client.get("/api/events/%20%20")

        assert response.status_code == 400
        assert response.json() == {"message": "Missing required route parameter: slug"}

    async def test_unexpected_failure_returns_500(self, client: AsyncClient):
        class BrokenService:
            async def get_event_by_slug(self, slug):
                raise RuntimeError("connection refused")

        app.dependency_overrides[get_event_service] = lambda: BrokenService()

        response = await client.get("/api/events/my-talk")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Unexpected error while fetching event",
            "error": "connection refused",
        }

    async def test_slug_is_decoded_only_once(self, client: AsyncClient, test_event):
        # %2574 decodes to the literal "%74", not to "t"
        response = await client.get("/api/events/my-%2574alk")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid slug format"}

    async def test_unreachable_database_returns_500(self, client: AsyncClient, tmp_path, monkeypatch):
        monkeypatch.setattr(database, "url", f"sqlite+aiosqlite:///{tmp_path}/missing/events.db")
        app.dependency_overrides.pop(get_session, None)

        response = await client.get("/api/events/my-talk")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Unexpected error while fetching event"
        assert "unable to open database file" in body["error"]
        assert database.is_connected is False

    async def test_unreachable_database_still_rejects_bad_slug_first(self, client: AsyncClient, tmp_path, monkeypatch):
        monkeypatch.setattr(database, "url", f"sqlite+aiosqlite:///{tmp_path}/missing/events.db")
        app.dependency_overrides.pop(get_session, None)

        response = await client.get("/api/events/my_talk")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid slug format"}


@pytest.mark.integration
@pytest.mark.asyncio
class TestCreateEvent:
    """Test POST /api/events."""

    async def test_create_event(self, client: AsyncClient, event_payload):
        response = await client.post("/api/events", json=event_payload)

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["slug"] == "my-talk"
        assert event["time"] == "09:00-18:00"
        assert event["mode"] == "hybrid"
        assert "id" in event

    async def test_second_event_with_same_title_gets_suffix(self, client: AsyncClient, event_payload):
        await client.post("/api/events", json=event_payload)
        response = await client.post("/api/events", json=dict(event_payload, title="My Talk"))

        assert response.status_code == 201
        assert response.json()["event"]["slug"] == "my-talk-1"

    async def test_loose_date_and_time_are_normalized(self, client: AsyncClient, event_payload):
        response = await client.post(
            "/api/events",
            json=dict(event_payload, date="2024-1-5", time="12:00 AM"),
        )

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["date"] == "2024-01-05"
        assert event["time"] == "00:00"

    @pytest.mark.parametrize(
        "changes,message",
        [
            ({"time": "25:00"}, "Invalid time. Use HH:mm, h:mm AM/PM, or a range like '09:00-17:00'."),
            ({"date": "not-a-date"}, "Invalid date. Provide a valid date string."),
            ({"organizer": "  "}, "organizer is required"),
            ({"tags": []}, "tags must be a non-empty array of strings"),
            ({"venue": "v" * 256}, "venue is too long (max 255 characters)"),
        ],
    )
    async def test_invalid_event_returns_400(self, client: AsyncClient, event_payload, changes, message):
        response = await client.post("/api/events", json=dict(event_payload, **changes))

        assert response.status_code == 400
        assert response.json() == {"message": message}

        listing = await client.get("/api/events")
        assert listing.json()["total"] == 0

    async def test_missing_field_returns_400(self, client: AsyncClient, event_payload):
        payload = dict(event_payload)
        del payload["venue"]

        response = await client.post("/api/events", json=payload)

        assert response.status_code == 400
        assert response.json() == {"message": "venue is required"}

    async def test_wrong_type_returns_400(self, client: AsyncClient, event_payload):
        response = await client.post("/api/events", json=dict(event_payload, agenda="Keynote"))

        assert response.status_code == 400
        assert response.json()["message"].startswith("agenda")


@pytest.mark.integration
@pytest.mark.asyncio
class TestListEvents:
    """Test GET /api/events."""

    async def test_list_events(self, client: AsyncClient, test_events):
        response = await client.get("/api/events")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert len(data["events"]) == 5
        # Fields the listing pages render
        for event in data["events"]:
            assert {"title", "image", "slug", "location", "date", "time"} <= set(event)

    async def test_list_events_pagination(self, client: AsyncClient, test_events):
        page1 = (await client.get("/api/events?page=1&per_page=2")).json()["events"]
        page3 = (await client.get("/api/events?page=3&per_page=2")).json()["events"]

        assert len(page1) == 2
        assert len(page3) == 1
        assert page1[0]["id"] != page3[0]["id"]

    async def test_invalid_pagination_returns_400(self, client: AsyncClient):
        response = await client.get("/api/events?per_page=500")

        assert response.status_code == 400
        assert "per_page" in response.json()["message"]


@pytest.mark.integration
@pytest.mark.asyncio
class TestUpdateEvent:
    """Test PATCH /api/events/{slug}."""

    async def test_title_change_moves_slug(self, client: AsyncClient, test_event):
        response = await client.patch("/api/events/my-talk", json={"title": "Async Python Deep Dive"})

        assert response.status_code == 200
        event = response.json()["event"]
        assert event["slug"] == "async-python-deep-dive"
        assert event["date"] == "2025-11-07"

        assert (await client.get("/api/events/my-talk")).status_code == 404
        assert (await client.get("/api/events/async-python-deep-dive")).status_code == 200

    async def test_time_change_is_normalized(self, client: AsyncClient, test_event):
        response = await client.patch("/api/events/my-talk", json={"time": "1:30 PM"})

        assert response.status_code == 200
        assert response.json()["event"]["time"] == "13:30"
        assert response.json()["event"]["slug"] == "my-talk"

    async def test_update_unknown_slug_returns_404(self, client: AsyncClient):
        response = await client.patch("/api/events/no-such-event", json={"venue": "Main Hall"})

        assert response.status_code == 404

    async def test_invalid_update_returns_400_and_keeps_event(self, client: AsyncClient, test_event):
        response = await client.patch("/api/events/my-talk", json={"title": "Renamed", "time": "noon"})

        assert response.status_code == 400
        stored = (await client.get("/api/events/my-talk")).json()["event"]
        assert stored["title"] == "My Talk"
        assert stored["time"] == "09:00-18:00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
