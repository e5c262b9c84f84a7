"""
Event suggestions — create, vote, comment, and the aggregated read model.

Vote and comment counts are never stored: every read recounts the rows, so
the numbers shown can't drift from the ledgers.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConstraintViolation, EmptyContent, NotFound, require_text
from app.models.event_comment import EventComment
from app.models.event_suggestion import EventSuggestion
from app.models.event_vote import EventVote
from app.policies import Caller, can_delete_vote, can_participate, require
from app.schemas.suggestion import CommentOut, SuggestionCreate, SuggestionOut, VoteResult
from app.services.realtime import COMMENTS, SUGGESTIONS, VOTES, ChangeBus, notify

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
#  Aggregation
# ═══════════════════════════════════════════════════════════════

async def suggestions_with_vote_counts(
    db: AsyncSession, oldest_first: bool = False
) -> List[Tuple[EventSuggestion, int]]:
    """All suggestions paired with their current vote count."""
    if oldest_first:
        ordering = (EventSuggestion.created_at.asc(), EventSuggestion.id.asc())
    else:
        ordering = (EventSuggestion.created_at.desc(), EventSuggestion.id.desc())

    result = await db.execute(
        select(EventSuggestion, func.count(EventVote.id))
        .outerjoin(EventVote, EventVote.suggestion_id == EventSuggestion.id)
        .group_by(EventSuggestion.id)
        .order_by(*ordering)
    )
    return [(suggestion, count) for suggestion, count in result.all()]


async def count_votes(db: AsyncSession, suggestion_id: int) -> int:
    result = await db.execute(
        select(func.count(EventVote.id)).where(EventVote.suggestion_id == suggestion_id)
    )
    return result.scalar() or 0


async def _comments_for(db: AsyncSession, suggestion_ids: Sequence[int]) -> Dict[int, List[EventComment]]:
    grouped: Dict[int, List[EventComment]] = {sid: [] for sid in suggestion_ids}
    if not suggestion_ids:
        return grouped
    result = await db.execute(
        select(EventComment)
        .where(EventComment.suggestion_id.in_(suggestion_ids))
        .order_by(EventComment.created_at.asc(), EventComment.id.asc())
    )
    for comment in result.scalars().all():
        grouped[comment.suggestion_id].append(comment)
    return grouped


async def _voted_by(db: AsyncSession, suggestion_ids: Sequence[int], user_id: Optional[int]) -> Set[int]:
    if user_id is None or not suggestion_ids:
        return set()
    result = await db.execute(
        select(EventVote.suggestion_id).where(
            EventVote.voter_id == user_id,
            EventVote.suggestion_id.in_(suggestion_ids),
        )
    )
    return set(result.scalars().all())


def _to_view(
    suggestion: EventSuggestion,
    vote_count: int,
    comments: List[EventComment],
    has_voted: bool,
) -> SuggestionOut:
    return SuggestionOut(
        id=suggestion.id,
        title=suggestion.title,
        description=suggestion.description,
        location=suggestion.location,
        proposed_date=suggestion.proposed_date,
        created_by=suggestion.created_by,
        created_at=suggestion.created_at,
        vote_count=vote_count,
        comment_count=len(comments),
        comments=[CommentOut.model_validate(c) for c in comments],
        has_voted=has_voted,
    )


async def list_suggestions(db: AsyncSession, caller: Optional[Caller] = None) -> List[SuggestionOut]:
    """Newest-first suggestions with vote counts and chronological comments."""
    rows = await suggestions_with_vote_counts(db)
    ids = [s.id for s, _ in rows]
    comments = await _comments_for(db, ids)
    voted = await _voted_by(db, ids, caller.user_id if caller else None)
    return [_to_view(s, count, comments[s.id], s.id in voted) for s, count in rows]


async def get_suggestion(
    db: AsyncSession, suggestion_id: int, caller: Optional[Caller] = None
) -> SuggestionOut:
    suggestion = await db.get(EventSuggestion, suggestion_id)
    if suggestion is None:
        raise NotFound("Suggestion not found")
    count = await count_votes(db, suggestion_id)
    comments = await _comments_for(db, [suggestion_id])
    voted = await _voted_by(db, [suggestion_id], caller.user_id if caller else None)
    return _to_view(suggestion, count, comments[suggestion_id], suggestion_id in voted)


# ═══════════════════════════════════════════════════════════════
#  Writes
# ═══════════════════════════════════════════════════════════════

async def _ensure_suggestion_exists(db: AsyncSession, suggestion_id: int) -> None:
    result = await db.execute(
        select(EventSuggestion.id).where(EventSuggestion.id == suggestion_id)
    )
    if result.scalar_one_or_none() is None:
        raise ConstraintViolation("Suggestion does not exist")


async def create_suggestion(
    db: AsyncSession,
    caller: Caller,
    data: SuggestionCreate,
    bus: Optional[ChangeBus] = None,
) -> SuggestionOut:
    require(caller, can_participate(caller), "suggest an event")
    title = require_text(data.title, "title")
    description = require_text(data.description, "description")

    suggestion = EventSuggestion(
        title=title,
        description=description,
        location=(data.location or "").strip() or None,
        proposed_date=data.proposed_date,
        created_by=caller.user_id,
    )
    db.add(suggestion)
    await db.commit()
    logger.info("Suggestion %s created by user %s", suggestion.id, caller.user_id)

    await notify(bus, SUGGESTIONS, "insert", suggestion.id)
    return _to_view(suggestion, 0, [], False)


async def cast_vote(
    db: AsyncSession,
    caller: Caller,
    suggestion_id: int,
    bus: Optional[ChangeBus] = None,
) -> VoteResult:
    """
    Toggle the caller's vote on a suggestion.

    No existing vote → one is added. An existing vote → it is removed.
    The (suggestion_id, voter_id) unique constraint keeps a single row when
    two adds race, and a removal that deleted nothing means another request
    got there first. Either way the loser gets ``ConstraintViolation``.
    """
    require(caller, can_participate(caller), "vote")
    await _ensure_suggestion_exists(db, suggestion_id)

    result = await db.execute(
        select(EventVote).where(
            EventVote.suggestion_id == suggestion_id,
            EventVote.voter_id == caller.user_id,
        )
    )
    existing = result.scalar_one_or_none()

    if existing is not None:
        require(caller, can_delete_vote(caller, existing), "remove this vote")
        result = await db.execute(delete(EventVote).where(EventVote.id == existing.id))
        if result.rowcount == 0:
            # Another request from the same voter removed it first.
            await db.rollback()
            logger.warning(
                "Rejected concurrent vote removal by user %s on suggestion %s",
                caller.user_id, suggestion_id,
            )
            raise ConstraintViolation("Your vote on this suggestion was already removed")
        action = "removed"
    else:
        db.add(EventVote(suggestion_id=suggestion_id, voter_id=caller.user_id))
        action = "added"

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(
            "Rejected concurrent vote by user %s on suggestion %s", caller.user_id, suggestion_id
        )
        raise ConstraintViolation("Your vote on this suggestion is already recorded")

    vote_count = await count_votes(db, suggestion_id)
    await notify(bus, VOTES, "insert" if action == "added" else "delete", suggestion_id)
    return VoteResult(suggestion_id=suggestion_id, action=action, vote_count=vote_count)


async def add_comment(
    db: AsyncSession,
    caller: Caller,
    suggestion_id: int,
    content: Optional[str],
    bus: Optional[ChangeBus] = None,
) -> CommentOut:
    require(caller, can_participate(caller), "comment")
    text = (content or "").strip()
    if not text:
        raise EmptyContent("Comment cannot be empty")
    await _ensure_suggestion_exists(db, suggestion_id)

    comment = EventComment(
        suggestion_id=suggestion_id,
        commenter_id=caller.user_id,
        content=text,
    )
    db.add(comment)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConstraintViolation("Suggestion does not exist")

    await notify(bus, COMMENTS, "insert", comment.id)
    return CommentOut.model_validate(comment)
