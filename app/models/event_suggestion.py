"""EventSuggestion model — a proposed event waiting for community votes."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventSuggestion(Base):
    __tablename__ = "event_suggestions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    location: Mapped[Optional[str]] = mapped_column(String(200))
    proposed_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    # Set client-side so rows created within the same second still order.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # ── Relationships (owned; removed with the suggestion) ──
    votes: Mapped[List["EventVote"]] = relationship(  # noqa: F821
        "EventVote", back_populates="suggestion",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    comments: Mapped[List["EventComment"]] = relationship(  # noqa: F821
        "EventComment", back_populates="suggestion",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="EventComment.id",
    )
