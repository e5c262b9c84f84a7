"""
Suggestions router — suggest events, vote, comment, and the live feed.

Endpoints:
    GET  /suggestions                  → newest-first list with counts
    GET  /suggestions/{id}             → one suggestion
    POST /suggestions                  → create a suggestion
    POST /suggestions/{id}/vote        → toggle the caller's vote
    POST /suggestions/{id}/comments    → add a comment
    WS   /suggestions/feed             → snapshot on connect, then on every change
"""

from typing import List

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.policies import Caller
from app.routers.auth import get_caller
from app.schemas.suggestion import CommentCreate, CommentOut, SuggestionCreate, SuggestionOut, VoteResult
from app.services import suggestions as suggestion_service
from app.services.realtime import ChangeBus, get_change_bus

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.get("", response_model=List[SuggestionOut])
async def list_suggestions(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await suggestion_service.list_suggestions(db, caller)


@router.post("", response_model=SuggestionOut, status_code=status.HTTP_201_CREATED)
async def create_suggestion(
    body: SuggestionCreate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await suggestion_service.create_suggestion(db, caller, body, bus)


# ═══════════════════════════════════════════════════════════════
#  WS /suggestions/feed (registered before /{suggestion_id})
# ═══════════════════════════════════════════════════════════════

@router.websocket("/feed")
async def suggestion_feed(websocket: WebSocket):
    manager = websocket.app.state.feed_manager
    feed = websocket.app.state.suggestion_feed

    await manager.connect(websocket)
    try:
        await manager.send_snapshot(websocket, await feed.load())
        while True:
            # Clients don't send anything meaningful; this just waits for close.
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)


@router.get("/{suggestion_id}", response_model=SuggestionOut)
async def get_suggestion(
    suggestion_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await suggestion_service.get_suggestion(db, suggestion_id, caller)


@router.post("/{suggestion_id}/vote", response_model=VoteResult)
async def vote(
    suggestion_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await suggestion_service.cast_vote(db, caller, suggestion_id, bus)


@router.post(
    "/{suggestion_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
async def comment(
    suggestion_id: int,
    body: CommentCreate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    bus: ChangeBus = Depends(get_change_bus),
):
    return await suggestion_service.add_comment(db, caller, suggestion_id, body.content, bus)
