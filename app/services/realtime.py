"""
Change notifications — a small in-process publish/subscribe bus.

Writers publish a ``ChangeEvent`` after committing; observers register a
callback per collection. Callbacks may be plain functions or coroutines.
Nothing is guaranteed about ordering across different collections.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from fastapi import Request

logger = logging.getLogger(__name__)

SUGGESTIONS = "suggestions"
VOTES = "votes"
COMMENTS = "comments"
EVENTS = "events"
JOBS = "jobs"
PROFILES = "profiles"


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    action: str  # "insert" | "update" | "delete"
    row_id: Optional[Any] = None


Callback = Callable[[ChangeEvent], Union[None, Awaitable[None]]]


class ChangeBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callback]] = {}

    def subscribe(self, collection: str, callback: Callback) -> Callable[[], None]:
        """Register ``callback`` for ``collection``; returns an unsubscribe function."""
        self._subscribers.setdefault(collection, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(collection)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)
            if collection in self._subscribers and not self._subscribers[collection]:
                del self._subscribers[collection]

        return unsubscribe

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscribers.get(collection, []))

    async def publish(self, event: ChangeEvent) -> None:
        # Copy: a callback may unsubscribe while we iterate.
        for callback in list(self._subscribers.get(event.collection, [])):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Change callback failed for %s/%s", event.collection, event.action
                )

    async def publish_many(self, events: List[ChangeEvent]) -> None:
        for event in events:
            await self.publish(event)


async def notify(bus: Optional[ChangeBus], collection: str, action: str, row_id: Any = None) -> None:
    """Publish on ``bus`` when one was supplied."""
    if bus is not None:
        await bus.publish(ChangeEvent(collection, action, row_id))


def get_change_bus(request: Request) -> ChangeBus:
    """FastAPI dependency: the bus owned by the running application."""
    return request.app.state.change_bus
