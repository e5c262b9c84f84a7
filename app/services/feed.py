"""
Suggestion feed — keeps observers in step with suggestions, votes and comments.

Any change to one of the three collections triggers a full refetch of the
aggregated suggestion list; there is no incremental patching. Refetches run
in a background task, so the request that made the change doesn't wait on
them, and a burst of changes arriving before the task runs is served by a
single refetch.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, List, Optional

from fastapi import WebSocket
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.schemas.suggestion import SuggestionOut
from app.services.realtime import COMMENTS, SUGGESTIONS, VOTES, ChangeBus, ChangeEvent
from app.services.suggestions import list_suggestions

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[List[SuggestionOut]]]
RefreshHandler = Callable[[List[SuggestionOut]], Optional[Awaitable[None]]]


def session_loader(session_factory: async_sessionmaker[AsyncSession]) -> Loader:
    """Build a loader that reads the suggestion list in a fresh session."""
    async def load() -> List[SuggestionOut]:
        async with session_factory() as session:
            return await list_suggestions(session)
    return load


class SuggestionFeed:
    COLLECTIONS = (SUGGESTIONS, VOTES, COMMENTS)

    def __init__(self, bus: ChangeBus, loader: Loader, on_refresh: RefreshHandler):
        self.bus = bus
        self.loader = loader
        self.on_refresh = on_refresh
        self.latest: Optional[List[SuggestionOut]] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._refresh_task: Optional[asyncio.Task] = None
        self._dirty = False

    @property
    def running(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> None:
        if self.running:
            return
        for collection in self.COLLECTIONS:
            self._unsubscribers.append(self.bus.subscribe(collection, self._on_change))

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        if self._refresh_task and not self._refresh_task.done():
            self._refresh_task.cancel()
        self._refresh_task = None
        self._dirty = False

    async def load(self) -> List[SuggestionOut]:
        return await self.loader()

    async def refresh(self) -> List[SuggestionOut]:
        snapshot = await self.loader()
        self.latest = snapshot
        result = self.on_refresh(snapshot)
        if inspect.isawaitable(result):
            await result
        return snapshot

    async def flush(self) -> None:
        """Wait until every change seen so far has been refetched."""
        while self._refresh_task and not self._refresh_task.done():
            await self._refresh_task

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug("Feed refresh requested by %s/%s", event.collection, event.action)
        self._dirty = True
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        while self._dirty:
            self._dirty = False
            try:
                await self.refresh()
            except Exception:
                logger.exception("Suggestion feed refresh failed")


# ==============================================================================
# WebSocket connections
# ==============================================================================

class FeedConnectionManager:
    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def send_snapshot(self, websocket: WebSocket, suggestions: List[SuggestionOut]):
        await websocket.send_json(_snapshot_message(suggestions))

    async def broadcast(self, suggestions: List[SuggestionOut]):
        message = _snapshot_message(suggestions)
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except Exception:
                logger.info("Dropping closed feed connection")
                self.disconnect(connection)


def _snapshot_message(suggestions: List[SuggestionOut]) -> dict:
    return {
        "type": "suggestions",
        "suggestions": [s.model_dump(mode="json") for s in suggestions],
    }
