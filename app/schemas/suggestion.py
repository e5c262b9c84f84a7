"""Suggestion Pydantic schemas — suggestions, votes, comments, promotion."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


class SuggestionCreate(BaseModel):
    """Fields submitted on the suggest-an-event form."""
    title: str = ""
    description: str = ""
    location: Optional[str] = None
    proposed_date: Optional[datetime] = None


class CommentCreate(BaseModel):
    content: str = ""


class CommentOut(BaseModel):
    id: int
    suggestion_id: int
    commenter_id: Optional[int] = None
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SuggestionOut(BaseModel):
    """A suggestion with counts recomputed at read time."""
    id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    proposed_date: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    vote_count: int = 0
    comment_count: int = 0
    comments: List[CommentOut] = []
    has_voted: bool = False


class VoteResult(BaseModel):
    suggestion_id: int
    action: Literal["added", "removed"]
    vote_count: int


class PromotionResult(BaseModel):
    promoted: List[int]
