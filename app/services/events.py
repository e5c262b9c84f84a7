"""Event service — the official calendar, managed by admins."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFound, require_text
from app.models.event import Event
from app.policies import Caller, can_manage_events, require
from app.schemas.event import EventCreate, EventOut, EventUpdate
from app.services.realtime import EVENTS, ChangeBus, notify


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_upcoming(event_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    if event_date is None:
        return False
    now = now or datetime.now(timezone.utc)
    return as_utc(event_date) > now


def to_event_out(event: Event, now: Optional[datetime] = None) -> EventOut:
    out = EventOut.model_validate(event)
    out.is_upcoming = is_upcoming(event.event_date, now)
    return out


async def list_events(db: AsyncSession) -> List[EventOut]:
    """Events by date, soonest first; undated events at the end."""
    result = await db.execute(
        select(Event).order_by(
            Event.event_date.is_(None), Event.event_date.asc(), Event.id.asc()
        )
    )
    now = datetime.now(timezone.utc)
    return [to_event_out(e, now) for e in result.scalars().all()]


async def create_event(
    db: AsyncSession, caller: Caller, data: EventCreate, bus: Optional[ChangeBus] = None
) -> EventOut:
    require(caller, can_manage_events(caller), "create events")
    event = Event(
        title=require_text(data.title, "title"),
        description=data.description,
        location=(data.location or "").strip() or None,
        event_date=data.event_date,
        organizer_id=caller.user_id,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)
    await notify(bus, EVENTS, "insert", event.id)
    return to_event_out(event)


async def update_event(
    db: AsyncSession,
    caller: Caller,
    event_id: int,
    data: EventUpdate,
    bus: Optional[ChangeBus] = None,
) -> EventOut:
    require(caller, can_manage_events(caller), "edit events")
    event = await db.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")

    changes = data.model_dump(exclude_unset=True)
    if "title" in changes:
        event.title = require_text(changes.pop("title"), "title")
    for field, value in changes.items():
        setattr(event, field, value)

    await db.commit()
    await db.refresh(event)
    await notify(bus, EVENTS, "update", event.id)
    return to_event_out(event)


async def delete_event(
    db: AsyncSession, caller: Caller, event_id: int, bus: Optional[ChangeBus] = None
) -> None:
    require(caller, can_manage_events(caller), "delete events")
    event = await db.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")
    await db.delete(event)
    await db.commit()
    await notify(bus, EVENTS, "delete", event_id)
