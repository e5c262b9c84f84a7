from datetime import datetime, timedelta, timezone

import pytest

from app.errors import MissingRequiredField, NotFound, PermissionDenied
from app.policies import SERVICE
from app.schemas.event import EventCreate, EventUpdate
from app.services import events as event_service


def test_is_upcoming_handles_naive_dates():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert event_service.is_upcoming(datetime(2026, 6, 1), now)
    assert not event_service.is_upcoming(datetime(2025, 6, 1, tzinfo=timezone.utc), now)
    assert not event_service.is_upcoming(None, now)


async def test_events_are_listed_by_date_with_undated_last(db, admin):
    soon = datetime.now(timezone.utc) + timedelta(days=3)
    later = soon + timedelta(days=30)
    await event_service.create_event(db, admin.caller, EventCreate(title="Undated"))
    await event_service.create_event(db, admin.caller, EventCreate(title="Later", event_date=later))
    await event_service.create_event(db, admin.caller, EventCreate(title="Soon", event_date=soon))

    events = await event_service.list_events(db)
    assert [e.title for e in events] == ["Soon", "Later", "Undated"]
    assert events[0].is_upcoming is True
    assert events[2].is_upcoming is False


async def test_only_admins_and_service_manage_events(db, alumnus):
    with pytest.raises(PermissionDenied):
        await event_service.create_event(db, alumnus.caller, EventCreate(title="Party"))

    event = await event_service.create_event(db, SERVICE, EventCreate(title="Party"))
    assert event.organizer_id is None


async def test_update_and_delete(db, admin):
    event = await event_service.create_event(db, admin.caller, EventCreate(title="Meetup"))

    with pytest.raises(MissingRequiredField):
        await event_service.update_event(db, admin.caller, event.id, EventUpdate(title=" "))

    updated = await event_service.update_event(
        db, admin.caller, event.id, EventUpdate(location="Auditorium")
    )
    assert updated.location == "Auditorium"

    await event_service.delete_event(db, admin.caller, event.id)
    with pytest.raises(NotFound):
        await event_service.delete_event(db, admin.caller, event.id)


async def test_event_endpoints(client, admin, alumnus):
    response = await client.post("/events", json={"title": "Annual Meet"}, headers=admin.headers)
    assert response.status_code == 201
    event_id = response.json()["id"]

    response = await client.patch(f"/events/{event_id}", json={"title": "x"}, headers=alumnus.headers)
    assert response.status_code == 403

    response = await client.delete(f"/events/{event_id}", headers=admin.headers)
    assert response.status_code == 204
    assert (await client.get("/events")).json() == []
