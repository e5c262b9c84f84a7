"""EventVote model — one vote per user per suggestion."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.event_suggestion import _utcnow


class EventVote(Base):
    __tablename__ = "event_votes"
    __table_args__ = (
        UniqueConstraint("suggestion_id", "voter_id", name="uq_event_votes_suggestion_voter"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    suggestion_id: Mapped[int] = mapped_column(
        ForeignKey("event_suggestions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    voter_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    suggestion: Mapped["EventSuggestion"] = relationship(  # noqa: F821
        "EventSuggestion", back_populates="votes"
    )
