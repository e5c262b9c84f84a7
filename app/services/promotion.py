"""
Promotion job — turns well-supported suggestions into official events.

Runs with the service identity: it reads every suggestion, writes to the
events table and retires the promoted suggestion together with its votes
and comments. Each promotion is one transaction, so a failure at any step
leaves the suggestion, its votes and its comments exactly as they were for
the next run to retry.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.errors import ConfigurationError
from app.models.event import Event
from app.models.event_comment import EventComment
from app.models.event_suggestion import EventSuggestion
from app.models.event_vote import EventVote
from app.policies import SERVICE, can_manage_events, can_retire_suggestions, require
from app.services.realtime import COMMENTS, EVENTS, SUGGESTIONS, VOTES, ChangeBus, ChangeEvent
from app.services.suggestions import count_votes, suggestions_with_vote_counts

logger = logging.getLogger(__name__)


def event_from_suggestion(suggestion: EventSuggestion) -> Event:
    """Copy a suggestion's fields onto a new Event."""
    return Event(
        title=suggestion.title,
        description=suggestion.description,
        location=suggestion.location,
        event_date=suggestion.proposed_date,
        organizer_id=suggestion.created_by,
    )


def resolve_threshold(threshold: Optional[int] = None) -> int:
    value = settings.EVENT_PROMOTE_THRESHOLD if threshold is None else threshold
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError("Vote threshold must be an integer")
    if value < 1:
        raise ConfigurationError("Vote threshold must be at least 1")
    return value


async def _promote_one(
    session_factory: async_sessionmaker[AsyncSession],
    suggestion_id: int,
    threshold: int,
) -> Optional[int]:
    """Promote a single suggestion. Returns the new event id, or None if skipped."""
    try:
        async with session_factory.begin() as session:
            suggestion = await session.get(EventSuggestion, suggestion_id)
            if suggestion is None:
                # Promoted by an overlapping run.
                return None
            if await count_votes(session, suggestion_id) < threshold:
                # Lost votes since the scan.
                return None

            event = event_from_suggestion(suggestion)
            session.add(event)
            await session.flush()

            await session.execute(delete(EventVote).where(EventVote.suggestion_id == suggestion_id))
            await session.execute(delete(EventComment).where(EventComment.suggestion_id == suggestion_id))
            await session.execute(delete(EventSuggestion).where(EventSuggestion.id == suggestion_id))
            return event.id
    except SQLAlchemyError:
        logger.exception(
            "Failed to promote suggestion %s; leaving it in place for the next run", suggestion_id
        )
        return None


async def run_promotion(
    session_factory: async_sessionmaker[AsyncSession],
    credential: Optional[str],
    threshold: Optional[int] = None,
    bus: Optional[ChangeBus] = None,
) -> List[int]:
    """
    Promote every suggestion whose vote count reaches ``threshold``.

    Suggestions are processed oldest-first. Returns the ids of the promoted
    suggestions. A missing ``credential`` is a ``ConfigurationError`` and
    nothing is read or written.
    """
    if not credential:
        logger.error("Promotion job invoked without a service role key")
        raise ConfigurationError("Missing service role key")

    threshold = resolve_threshold(threshold)
    require(SERVICE, can_manage_events(SERVICE) and can_retire_suggestions(SERVICE), "promote suggestions")

    async with session_factory() as session:
        rows = await suggestions_with_vote_counts(session, oldest_first=True)
    candidates = [suggestion.id for suggestion, votes in rows if votes >= threshold]

    promoted: List[int] = []
    for suggestion_id in candidates:
        event_id = await _promote_one(session_factory, suggestion_id, threshold)
        if event_id is None:
            continue
        promoted.append(suggestion_id)
        logger.info("Promoted suggestion %s to event %s", suggestion_id, event_id)
        if bus is not None:
            await bus.publish_many([
                ChangeEvent(EVENTS, "insert", event_id),
                ChangeEvent(VOTES, "delete", suggestion_id),
                ChangeEvent(COMMENTS, "delete", suggestion_id),
                ChangeEvent(SUGGESTIONS, "delete", suggestion_id),
            ])

    logger.info(
        "Promotion run finished: %d of %d candidates promoted (threshold=%d)",
        len(promoted), len(candidates), threshold,
    )
    return promoted
