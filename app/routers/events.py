"""Events router — list the calendar; admins create, edit and delete."""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.policies import Caller
from app.routers.auth import get_caller
from app.schemas.event import EventCreate, EventOut, EventUpdate
from app.services import events as event_service
from app.services.realtime import ChangeBus, get_change_bus

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=List[EventOut])
async def list_events(db: AsyncSession = Depends(get_db)):
    return await event_service.list_events(db)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await event_service.create_event(db, caller, body, bus)


@router.patch("/{event_id}", response_model=EventOut)
async def update_event(
    event_id: int,
    body: EventUpdate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await event_service.update_event(db, caller, event_id, body, bus)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    await event_service.delete_event(db, caller, event_id, bus)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
